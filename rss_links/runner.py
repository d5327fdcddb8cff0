"""High-level orchestration for the rss_links application."""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from .feeds import (
    DEFAULT_TIMEOUT,
    MAX_ITEMS_PER_FEED,
    fetch_feed_items,
    to_link_record,
)
from .merge import merge_links
from .models import FeedItem, LinkRecord, PendingChange
from .publishing import Publisher
from .section import SEED_DOCUMENT, parse_section, render_document
from .storage import read_document, write_document

logger = logging.getLogger(__name__)


class RunError(RuntimeError):
    """A fatal failure in one of the pipeline steps."""


@dataclass
class RunConfig:
    """Runtime options for executing the application."""

    feed_urls: List[str]
    owner: str
    repo: str
    max_links: int = 10
    output_file: str = "links.md"
    workspace: str = "."
    dry_run: bool = False
    fetch_timeout: float = DEFAULT_TIMEOUT
    items_per_feed: int = MAX_ITEMS_PER_FEED
    concurrency: int = 4


@dataclass
class RunResult:
    """Returned data after executing the app."""

    pr_url: str = ""
    new_items_count: int = 0
    evicted_count: int = 0


def _collect_items(config: RunConfig) -> List[FeedItem]:
    """Fetch every feed, keeping configured order in the combined list."""

    def process_feed(url: str) -> List[FeedItem]:
        try:
            return fetch_feed_items(
                url, timeout=config.fetch_timeout, limit=config.items_per_feed
            )
        except Exception:
            logger.exception("Failed to process feed %s", url)
            return []

    items: List[FeedItem] = []
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=max(1, config.concurrency)
    ) as executor:
        for feed_items in executor.map(process_feed, config.feed_urls):
            items.extend(feed_items)
    return items


def execute(
    config: RunConfig,
    publisher: Optional[Publisher] = None,
    today: Optional[date] = None,
) -> RunResult:
    """Run the application logic and return the result payload."""
    now = datetime.now(timezone.utc)
    today = today or now.date()

    items = _collect_items(config)
    if not items:
        logger.info("No items fetched from any feed. Exiting without creating a PR.")
        return RunResult()

    fresh: List[LinkRecord] = [
        to_link_record(item, config.owner, config.repo, today) for item in items
    ]

    path = Path(config.workspace) / config.output_file
    try:
        existing = read_document(path)
    except (OSError, UnicodeError) as exc:
        raise RunError(f"Failed to read output file '{config.output_file}': {exc}") from exc

    section = parse_section(
        existing if existing is not None else SEED_DOCUMENT, today.isoformat()
    )
    result = merge_links(fresh, section.entries, config.max_links)
    if not result.added_count:
        return RunResult()

    content = render_document(section, result.final_entries)
    try:
        write_document(path, content)
    except (OSError, UnicodeError) as exc:
        raise RunError(f"Failed to write output file '{config.output_file}': {exc}") from exc
    logger.info(
        "Wrote %d link(s) to '%s'", len(result.final_entries), config.output_file
    )

    if config.dry_run or publisher is None:
        logger.info("Dry run; skipping commit and pull request.")
        return RunResult(
            new_items_count=result.added_count, evicted_count=result.evicted_count
        )

    change = PendingChange(
        path=config.output_file,
        content=content,
        added_entries=result.added_entries,
        evicted_count=result.evicted_count,
        max_links=config.max_links,
        generated_at=now,
    )
    try:
        pr_url = publisher.publish(change)
    except RuntimeError as exc:
        raise RunError(f"Failed to publish changes: {exc}") from exc

    return RunResult(
        pr_url=pr_url or "",
        new_items_count=result.added_count,
        evicted_count=result.evicted_count,
    )
