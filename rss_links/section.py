"""Parsing and rendering of the managed link section of a markdown document."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from .models import LinkRecord, ManagedSection

logger = logging.getLogger(__name__)

MARKER_START = "<!-- rss-action:start -->"
MARKER_END = "<!-- rss-action:end -->"

SEED_DOCUMENT = f"# RSS Links\n\n{MARKER_START}\n{MARKER_END}\n"

UNTITLED = "Untitled"

# - [title](url) - YYYY-MM-DD
_ENTRY_PATTERN = re.compile(
    r"^- \[(.+?)\]\(([^)]+)\)(?: - ([0-9]{4}-[0-9]{2}-[0-9]{2}))?", re.MULTILINE
)


def sanitize_title(raw: Optional[str]) -> str:
    """Make a feed title safe to embed as markdown link text."""
    text = re.sub(r"[\[\]]", "", raw or "")
    return re.sub(r"\s+", " ", text).strip() or UNTITLED


def parse_section(content: str, today: str) -> ManagedSection:
    """Split ``content`` around the managed section and parse its entries.

    Entries without a date suffix are stamped with ``today``. When no valid
    marker pair exists the whole document becomes the prefix and the section
    will be appended at the end.
    """
    start = content.find(MARKER_START)
    end = content.find(MARKER_END, start + len(MARKER_START)) if start != -1 else -1

    if start == -1 or end == -1:
        logger.info("No managed section found; it will be appended")
        trimmed = content.rstrip()
        return ManagedSection(
            prefix=trimmed + "\n\n" if trimmed else "",
            suffix="\n",
        )

    body = content[start + len(MARKER_START) : end]
    entries: List[LinkRecord] = [
        LinkRecord(title=match.group(1), url=match.group(2), date=match.group(3) or today)
        for match in _ENTRY_PATTERN.finditer(body)
    ]
    logger.debug("Parsed %d existing entries from managed section", len(entries))

    return ManagedSection(
        prefix=content[:start],
        suffix=content[end + len(MARKER_END) :],
        entries=tuple(entries),
    )


def render_entry(record: LinkRecord) -> str:
    return f"- [{record.title}]({record.url}) - {record.date}"


def render_section(entries: Iterable[LinkRecord]) -> str:
    """Render the markers and the entry lines between them."""
    lines = [render_entry(record) for record in entries]
    body = "\n" + "\n".join(lines) + "\n" if lines else "\n"
    return f"{MARKER_START}{body}{MARKER_END}"


def render_document(section: ManagedSection, entries: Iterable[LinkRecord]) -> str:
    """Rebuild the full document with ``entries`` in the managed section."""
    return section.prefix + render_section(entries) + section.suffix
