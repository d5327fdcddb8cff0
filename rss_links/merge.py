"""Deduplicate fresh links against the existing list and enforce the cap."""

from __future__ import annotations

import logging
from typing import Sequence

from .models import LinkRecord, MergeResult
from .urls import canonicalize

logger = logging.getLogger(__name__)


def merge_links(
    fresh_items: Sequence[LinkRecord],
    existing_entries: Sequence[LinkRecord],
    cap: int,
) -> MergeResult:
    """Prepend unseen fresh items to the existing list and trim to ``cap``.

    Fresh items are compared against existing entries only; two feeds that
    yield the same story in one run will both be kept.
    """
    if cap < 1:
        raise ValueError(f"Link cap must be at least 1, got {cap}.")

    existing = tuple(existing_entries)
    known = {canonicalize(record.url) for record in existing}
    new_items = tuple(item for item in fresh_items if canonicalize(item.url) not in known)

    if not new_items:
        logger.info("All fetched items already exist; nothing to merge")
        return MergeResult(final_entries=existing)

    combined = new_items + existing
    evicted = 0
    if len(combined) > cap:
        evicted = len(combined) - cap
        logger.info("Trimming %d oldest link(s) to enforce cap=%d", evicted, cap)
        combined = combined[:cap]

    logger.info("%d new item(s) merged", len(new_items))
    return MergeResult(
        final_entries=combined,
        added_entries=new_items,
        evicted_count=evicted,
    )
