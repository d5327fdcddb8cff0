"""Rendering helpers for pull request text."""

from __future__ import annotations

from .models import PendingChange
from .templating import get_environment


def build_pull_request_title(change: PendingChange) -> str:
    count = len(change.added_entries)
    return f"chore(rss): {count} new link(s) - {change.generated_at:%Y-%m-%d}"


def build_commit_message(change: PendingChange) -> str:
    return f"chore(rss): add {len(change.added_entries)} new link(s) [automated]"


def build_pull_request_body(
    change: PendingChange, repository: str, server_url: str = "https://github.com"
) -> str:
    """Render the markdown pull request description."""
    template = get_environment().get_template("pull_request.md.j2")
    return template.render(
        added=change.added_entries,
        evicted_count=change.evicted_count,
        max_links=change.max_links,
        repository=repository,
        server_url=server_url.rstrip("/"),
    )
