"""Shared data models for rss_links."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple


@dataclass(frozen=True)
class LinkRecord:
    """One entry of the managed link list."""

    title: str
    url: str
    date: str


@dataclass(frozen=True)
class FeedItem:
    """Raw item as returned by the feed source."""

    title: Optional[str]
    link: str
    published: Optional[datetime] = None


@dataclass(frozen=True)
class ManagedSection:
    """A document split around its managed region."""

    prefix: str
    suffix: str
    entries: Tuple[LinkRecord, ...] = ()


@dataclass(frozen=True)
class MergeResult:
    """Outcome of merging fresh items into the existing list."""

    final_entries: Tuple[LinkRecord, ...]
    added_entries: Tuple[LinkRecord, ...] = ()
    evicted_count: int = 0

    @property
    def added_count(self) -> int:
        return len(self.added_entries)


@dataclass(frozen=True)
class PendingChange:
    """Everything the publisher needs to open a pull request."""

    path: str
    content: str
    added_entries: Tuple[LinkRecord, ...]
    evicted_count: int
    max_links: int
    generated_at: datetime = field(
        compare=False, default_factory=lambda: datetime.now(timezone.utc)
    )
