"""Reading and writing the tracked markdown file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def read_document(path: Path) -> Optional[str]:
    """Return the file's text, or None when it does not exist yet."""
    if not path.exists():
        logger.info("'%s' not found; it will be created", path)
        return None
    return path.read_text(encoding="utf-8")


def write_document(path: Path, content: str) -> None:
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %d characters to %s", len(content), path)
