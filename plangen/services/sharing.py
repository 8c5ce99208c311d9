"""Share links and scaffolding CLI commands for generated plans.

Two link styles exist: a self-contained token link (``#/p=<token>``) that
needs no server state, and a short link (``#/plan/<id>``) backed by the
in-memory plan store. The CLI fetches raw Markdown from
``/api/plan/<token>``.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from plangen.core.config import settings
from plangen.utils.codec import encode_plan


def _base(base_url: str) -> str:
    return base_url.rstrip("/")


def build_token_url(base_url: str, token: str) -> str:
    return f"{_base(base_url)}/#/p={token}"


def build_short_url(base_url: str, plan_id: str) -> str:
    return f"{_base(base_url)}/#/plan/{plan_id}"


def build_raw_plan_url(base_url: str, token: str) -> str:
    return f"{_base(base_url)}/api/plan/{token}"


def build_cli_command(
    plan_url: str,
    *,
    template: str = "next",
    project_name: str | None = None,
    package: str | None = None,
) -> str:
    """Build the scaffolding command that bootstraps a project from a plan.

    Args:
        plan_url: URL serving the raw plan Markdown.
        template: Scaffolding template name.
        project_name: Target directory; defaults to the configured name.
        package: npm package of the CLI; defaults to the configured one.

    Returns:
        Shell-quoted ``npx`` command line.
    """
    parts = [
        "npx",
        package or settings.app.cli_package,
        project_name or settings.app.default_project_name,
        "--template",
        template,
        "--plan",
        plan_url,
    ]
    return shlex.join(parts)


@dataclass(frozen=True)
class ShareBundle:
    """Everything a client needs to share a plan without server storage."""

    token: str
    share_url: str
    raw_url: str
    cli_command: str


def share_plan(
    plan: str,
    *,
    template: str = "next",
    base_url: str | None = None,
) -> ShareBundle:
    """Encode a plan and build its token link, raw URL and CLI command."""
    base = base_url or settings.app.public_base_url
    token = encode_plan(plan)
    raw_url = build_raw_plan_url(base, token)
    return ShareBundle(
        token=token,
        share_url=build_token_url(base, token),
        raw_url=raw_url,
        cli_command=build_cli_command(raw_url, template=template),
    )
