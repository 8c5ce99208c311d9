"""Tests for the URL-safe plan codec."""

import base64
import gzip
import re

import pytest

from plangen.core.errors import DecodeError
from plangen.utils.codec import decode_plan, encode_plan, try_decode_plan

TOKEN_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "# Plan\n- [ ] Task 1",
        "Ünïcödé ✓ 计划 🚀 — mixed scripts",
        "line\r\nwith\ttabs and = + / characters",
    ],
)
def test_round_trip(text: str) -> None:
    token = encode_plan(text)

    assert TOKEN_ALPHABET.fullmatch(token)
    assert decode_plan(token) == text


def test_round_trip_large_plan() -> None:
    text = "".join(f"- [ ] Task {i}: implement feature ✓\n" for i in range(5000))
    assert len(text.encode("utf-8")) >= 100 * 1024

    token = encode_plan(text)

    assert TOKEN_ALPHABET.fullmatch(token)
    assert "=" not in token
    assert decode_plan(token) == text
    # Structured Markdown compresses well
    assert len(token) < len(text) // 2


def test_example_plan_round_trip() -> None:
    token = encode_plan("# Plan\n- [ ] Task 1")
    assert decode_plan(token) == "# Plan\n- [ ] Task 1"


def test_encoding_is_deterministic() -> None:
    assert encode_plan("same input") == encode_plan("same input")


@pytest.mark.parametrize(
    "token",
    [
        "not-valid-base64-!!!",
        "abcde",
        "é-not-ascii",
        "",
    ],
)
def test_decode_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(DecodeError):
        decode_plan(token)


def test_decode_rejects_valid_base64_that_is_not_gzip() -> None:
    token = base64.urlsafe_b64encode(b"plain bytes, not compressed").decode().rstrip("=")

    with pytest.raises(DecodeError) as exc_info:
        decode_plan(token)

    assert exc_info.value.code == "token_corrupt"


def test_decode_rejects_truncated_stream() -> None:
    token = encode_plan("# Plan\n" + "- [ ] a task that is long enough\n" * 50)

    with pytest.raises(DecodeError):
        decode_plan(token[: len(token) // 2])


def test_decode_rejects_non_utf8_payload() -> None:
    compressed = gzip.compress(b"\xff\xfe\xfa invalid utf-8", mtime=0)
    token = base64.urlsafe_b64encode(compressed).decode().rstrip("=")

    with pytest.raises(DecodeError) as exc_info:
        decode_plan(token)

    assert exc_info.value.code == "token_not_utf8"


def test_decode_enforces_max_bytes() -> None:
    token = encode_plan("x" * 10_000)

    with pytest.raises(DecodeError) as exc_info:
        decode_plan(token, max_bytes=1_000)

    assert exc_info.value.code == "token_too_large"
    assert decode_plan(token, max_bytes=10_000) == "x" * 10_000


def test_try_decode_returns_none_on_failure() -> None:
    assert try_decode_plan("not-valid-base64-!!!") is None
    assert try_decode_plan(encode_plan("ok")) == "ok"


@pytest.mark.parametrize("max_bytes", [None, 1_000])
@pytest.mark.parametrize(
    "payload",
    [
        gzip.compress(b"a", mtime=0) + gzip.compress(b"b", mtime=0),
        gzip.compress(b"# Plan", mtime=0) + b"trailing",
    ],
)
def test_decode_rejects_data_after_first_member(payload: bytes, max_bytes: int | None) -> None:
    token = base64.urlsafe_b64encode(payload).decode().rstrip("=")

    with pytest.raises(DecodeError) as exc_info:
        decode_plan(token, max_bytes=max_bytes)

    assert exc_info.value.code == "token_corrupt"
