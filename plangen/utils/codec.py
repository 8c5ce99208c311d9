"""URL-safe encoding of plan Markdown.

A token is the gzip-compressed UTF-8 text, base64 encoded with the URL-safe
alphabet (``-`` and ``_``) and without ``=`` padding, so it can be dropped
straight into a URL fragment or path segment.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import logging
import zlib

from plangen.core.errors import DecodeError

logger = logging.getLogger(__name__)


def encode_plan(text: str) -> str:
    """Encode plan text into a compact URL-safe token.

    Args:
        text: Any string; size limits are enforced by the caller.

    Returns:
        Token containing only ``[A-Za-z0-9_-]``.
    """
    # mtime=0 keeps the gzip header stable so equal text gives equal tokens
    compressed = gzip.compress(text.encode("utf-8"), mtime=0)
    encoded = base64.b64encode(compressed).decode("ascii")
    return encoded.replace("+", "-").replace("/", "_").rstrip("=")


def _restore_base64(token: str) -> str:
    padded = token.replace("-", "+").replace("_", "/")
    return padded + "=" * (-len(padded) % 4)


def _gunzip(data: bytes, max_bytes: int | None) -> bytes:
    # wbits=31 selects the gzip container; max_length 0 means unbounded
    decompressor = zlib.decompressobj(wbits=31)
    output = decompressor.decompress(data, 0 if max_bytes is None else max_bytes + 1)
    if max_bytes is not None and len(output) > max_bytes:
        raise DecodeError(
            code="token_too_large",
            message="Decoded plan exceeds the maximum allowed size",
            details={"max_value": max_bytes},
        )
    if not decompressor.eof:
        raise DecodeError(
            code="token_corrupt",
            message="Compressed plan data is truncated",
        )
    # Tokens hold exactly one gzip member
    if decompressor.unused_data:
        raise DecodeError(
            code="token_corrupt",
            message="Compressed plan data has trailing bytes",
        )
    return output


def decode_plan(token: str, *, max_bytes: int | None = None) -> str:
    """Decode a token produced by :func:`encode_plan`.

    Args:
        token: Token string, possibly attacker supplied.
        max_bytes: Optional limit on the decompressed size.

    Returns:
        The original plan text.

    Raises:
        DecodeError: If the token is not valid base64, the compressed stream
            is corrupt or truncated, or the payload is not UTF-8.
    """
    if not token:
        raise DecodeError(code="token_empty", message="Share token is empty")

    try:
        compressed = base64.b64decode(_restore_base64(token), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(
            code="token_invalid_base64",
            message="Share token is not valid base64",
        ) from exc

    try:
        raw = _gunzip(compressed, max_bytes)
    except zlib.error as exc:
        raise DecodeError(
            code="token_corrupt",
            message="Share token does not contain a valid compressed plan",
        ) from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(
            code="token_not_utf8",
            message="Decoded plan is not valid UTF-8 text",
        ) from exc


def try_decode_plan(token: str, *, max_bytes: int | None = None) -> str | None:
    """Decode a token, returning None instead of raising on bad input."""
    try:
        return decode_plan(token, max_bytes=max_bytes)
    except DecodeError as exc:
        logger.info(
            "codec.decode_failed",
            extra={"error_code": exc.code, "token_length": len(token)},
        )
        return None
