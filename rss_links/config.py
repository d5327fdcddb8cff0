"""Action input parsing."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINKS = 10
DEFAULT_OUTPUT_FILE = "links.md"
DEFAULT_BRANCH_PREFIX = "rss-update"
DEFAULT_BASE_BRANCH = "main"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SERVER_URL = "https://github.com"


class ConfigurationError(ValueError):
    """Raised for missing or malformed inputs."""


@dataclass
class ActionConfig:
    feed_urls: List[str] = field(default_factory=list)
    max_links: int = DEFAULT_MAX_LINKS
    output_file: str = DEFAULT_OUTPUT_FILE
    token: Optional[str] = None
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    base_branch: str = DEFAULT_BASE_BRANCH
    repository: Optional[str] = None
    workspace: str = "."
    api_url: str = DEFAULT_API_URL
    server_url: str = DEFAULT_SERVER_URL
    log_level: str = "INFO"

    @property
    def owner(self) -> str:
        return split_repository(self.repository)[0]

    @property
    def repo(self) -> str:
        return split_repository(self.repository)[1]


def get_input(environ: Mapping[str, str], name: str, required: bool = False) -> str:
    """Read an action input the way the Actions runner exposes it."""
    key = "INPUT_" + name.upper().replace("-", "_").replace(" ", "_")
    value = (environ.get(key) or "").strip()
    if required and not value:
        raise ConfigurationError(f'Required input "{name}" is missing.')
    return value


def parse_url_list(raw: str) -> List[str]:
    """Split a newline or comma separated list of feed URLs."""
    return [url.strip() for url in re.split(r"[\n,]+", raw or "") if url.strip()]


def parse_max_links(raw: str) -> int:
    if not raw:
        return DEFAULT_MAX_LINKS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"max_links must be an integer, got {raw!r}.")
    return max(1, value)


def split_repository(repository: Optional[str]) -> Tuple[str, str]:
    owner, _, repo = (repository or "").partition("/")
    if not owner or not repo:
        raise ConfigurationError(
            f"Repository must look like 'owner/repo', got {repository!r}."
        )
    return owner, repo


def parse_action_config(environ: Mapping[str, str]) -> ActionConfig:
    """Build the configuration from action inputs and runner variables.

    Required values are not checked here so command-line flags can still
    supply them; call ``validate_config`` once overrides are applied.
    """
    return ActionConfig(
        feed_urls=parse_url_list(get_input(environ, "rss_urls")),
        max_links=parse_max_links(get_input(environ, "max_links")),
        output_file=get_input(environ, "output_file") or DEFAULT_OUTPUT_FILE,
        token=get_input(environ, "github_token") or None,
        branch_prefix=get_input(environ, "branch_prefix") or DEFAULT_BRANCH_PREFIX,
        base_branch=get_input(environ, "base_branch") or DEFAULT_BASE_BRANCH,
        repository=environ.get("GITHUB_REPOSITORY") or None,
        workspace=environ.get("GITHUB_WORKSPACE") or ".",
        api_url=environ.get("GITHUB_API_URL") or DEFAULT_API_URL,
        server_url=environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
        log_level=get_input(environ, "log_level") or "INFO",
    )


def validate_config(config: ActionConfig, dry_run: bool = False) -> None:
    if not config.feed_urls:
        raise ConfigurationError("No RSS URLs provided.")
    split_repository(config.repository)
    if not dry_run and not config.token:
        raise ConfigurationError('Required input "github_token" is missing.')
    logger.debug("Configuration validated for %d feed(s)", len(config.feed_urls))
