"""Tracking-parameter decoration and canonical URLs for deduplication."""

from __future__ import annotations

import logging
from typing import Iterable, NamedTuple, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

UTM_SOURCE = "utm_source"
UTM_MEDIUM = "utm_medium"
UTM_CAMPAIGN = "utm_campaign"
TRACKING_KEYS = (UTM_SOURCE, UTM_MEDIUM, UTM_CAMPAIGN)

PLATFORM_TAG = "github"


class UrlRewrite(NamedTuple):
    """Result of rewriting a URL's query string.

    ``parsed`` is False when the input was not a valid absolute URL, in which
    case ``url`` is the input string unchanged.
    """

    url: str
    parsed: bool


def rewrite_query(url: str, extra: Iterable[Tuple[str, str]] = ()) -> UrlRewrite:
    """Drop the tracking keys from ``url`` and append ``extra`` pairs."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        logger.debug("Leaving unparseable URL unchanged: %s", url)
        return UrlRewrite(url, False)

    if not parts.scheme or not parts.netloc:
        logger.debug("Leaving non-absolute URL unchanged: %s", url)
        return UrlRewrite(url, False)

    pairs = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in TRACKING_KEYS
    ]
    pairs.extend(extra)

    rebuilt = urlunsplit(
        (
            parts.scheme.lower(),
            parts.netloc.lower(),
            parts.path or "/",
            urlencode(pairs),
            parts.fragment,
        )
    )
    return UrlRewrite(rebuilt, True)


def decorate(url: str, owner: str, repo: str) -> str:
    """Tag ``url`` with the platform, owner and repository tracking keys."""
    return rewrite_query(
        url,
        [(UTM_SOURCE, PLATFORM_TAG), (UTM_MEDIUM, owner), (UTM_CAMPAIGN, repo)],
    ).url


def canonicalize(url: str) -> str:
    """Return the deduplication key for ``url``."""
    return rewrite_query(url).url
