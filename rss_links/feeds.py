"""Feed retrieval and conversion of feed items to link records."""

from __future__ import annotations

import calendar
import logging
import re
import time
from datetime import date, datetime, timezone
from typing import List, Optional

import feedparser
import requests
from bs4 import BeautifulSoup

from .models import FeedItem, LinkRecord
from .section import sanitize_title
from .urls import decorate

logger = logging.getLogger(__name__)

MAX_ITEMS_PER_FEED = 20
DEFAULT_TIMEOUT = 15.0
USER_AGENT = "rss-links/0.1"


def to_datetime(value: Optional[time.struct_time]) -> Optional[datetime]:
    """Convert feedparser UTC timestamps to timezone-aware datetimes."""
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    except (OverflowError, ValueError, TypeError):
        return None


def fetch_feed_items(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    limit: int = MAX_ITEMS_PER_FEED,
) -> List[FeedItem]:
    """Fetch at most ``limit`` items from a single RSS/Atom feed.

    Network errors, timeouts and unparseable feeds are logged and yield an
    empty list so one broken feed never stops the others.
    """
    logger.info("Fetching: %s", url)
    try:
        response = requests.get(
            url, timeout=timeout, headers={"User-Agent": USER_AGENT}
        )
        response.raise_for_status()
        content = response.content
    except requests.RequestException as exc:
        logger.warning("Failed to fetch '%s': %s", url, exc)
        return []

    parsed = feedparser.parse(content)
    if getattr(parsed, "bozo", False) and not parsed.entries:
        logger.warning(
            "Failed to parse '%s': %s", url, getattr(parsed, "bozo_exception", "unknown error")
        )
        return []

    items: List[FeedItem] = []
    for entry in parsed.entries[:limit]:
        link = getattr(entry, "link", None) or getattr(entry, "id", None)
        if not link:
            logger.debug("Skipping entry without link in feed '%s'", url)
            continue

        published = None
        for attr in ("published_parsed", "updated_parsed", "created_parsed"):
            published = getattr(entry, attr, None)
            if published:
                break

        title = getattr(entry, "title", None)
        items.append(
            FeedItem(
                title=_strip_html(title) if title else None,
                link=link,
                published=to_datetime(published),
            )
        )

    feed_title = getattr(getattr(parsed, "feed", None), "title", None) or url
    logger.info("Collected %d item(s) from '%s'", len(items), feed_title)
    return items


def _strip_html(raw_value: str) -> str:
    """Return text content extracted from HTML fragments."""
    if "<" not in raw_value:
        return raw_value
    soup = BeautifulSoup(raw_value, "html.parser")
    text = soup.get_text(separator=" ", strip=True)
    return re.sub(r"\s{2,}", " ", text).strip()


def to_link_record(item: FeedItem, owner: str, repo: str, today: date) -> LinkRecord:
    """Turn a raw feed item into a decorated, sanitised link record."""
    published = item.published.date() if item.published else today
    return LinkRecord(
        title=sanitize_title(item.title),
        url=decorate(item.link, owner, repo),
        date=published.isoformat(),
    )
