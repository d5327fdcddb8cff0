"""Command-line interface for the rss_links application."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import pprint
from pathlib import Path
from typing import List, Mapping, Optional

from .config import (
    ActionConfig,
    ConfigurationError,
    parse_action_config,
    parse_max_links,
    parse_url_list,
    validate_config,
)
from .publishing import GitClient, GitHubClient, GitHubPublisher
from .runner import RunConfig, RunError, RunResult, execute

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Merge new RSS/Atom links into a markdown file and open a pull request."
    )
    parser.add_argument(
        "--rss-urls",
        default=None,
        help="Newline or comma separated feed URLs. Overrides INPUT_RSS_URLS.",
    )
    parser.add_argument(
        "--max-links",
        default=None,
        help="Maximum number of links kept in the file. Overrides INPUT_MAX_LINKS.",
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Markdown file to update, relative to the workspace.",
    )
    parser.add_argument(
        "--repository",
        default=None,
        help="Repository as owner/repo. Overrides GITHUB_REPOSITORY.",
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help="Repository checkout directory. Overrides GITHUB_WORKSPACE.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Update the file but skip the commit and pull request.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides INPUT_LOG_LEVEL.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file.",
    )
    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging according to options."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ConfigurationError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def apply_overrides(config: ActionConfig, args: argparse.Namespace) -> ActionConfig:
    """Return a copy of ``config`` with command-line values taking priority."""
    changes = {}
    if args.rss_urls is not None:
        changes["feed_urls"] = parse_url_list(args.rss_urls)
    if args.max_links is not None:
        changes["max_links"] = parse_max_links(args.max_links)
    if args.output_file:
        changes["output_file"] = args.output_file
    if args.repository:
        changes["repository"] = args.repository
    if args.workspace:
        changes["workspace"] = args.workspace
    if args.log_level:
        changes["log_level"] = args.log_level
    return dataclasses.replace(config, **changes)


def set_output(name: str, value: str, environ: Mapping[str, str]) -> None:
    """Expose a step output to later workflow steps."""
    output_path = environ.get("GITHUB_OUTPUT")
    if not output_path:
        logger.info("Output %s=%s", name, value)
        return
    with open(output_path, "a", encoding="utf-8") as handle:
        handle.write(f"{name}={value}\n")


def report_failure(message: str, environ: Mapping[str, str]) -> None:
    logger.error("%s", message)
    if environ.get("GITHUB_ACTIONS") == "true":
        print(f"::error::{message}")


def build_publisher(config: ActionConfig) -> GitHubPublisher:
    return GitHubPublisher(
        git=GitClient(workspace=Path(config.workspace), token=config.token or ""),
        github=GitHubClient(
            token=config.token or "",
            repository=config.repository or "",
            api_url=config.api_url,
        ),
        branch_prefix=config.branch_prefix,
        base_branch=config.base_branch,
        server_url=config.server_url,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    environ = os.environ

    try:
        action_config = apply_overrides(parse_action_config(environ), args)
        configure_logging(action_config.log_level, args.log_file)
        validate_config(action_config, dry_run=args.dry_run)

        config = RunConfig(
            feed_urls=action_config.feed_urls,
            owner=action_config.owner,
            repo=action_config.repo,
            max_links=action_config.max_links,
            output_file=action_config.output_file,
            workspace=action_config.workspace,
            dry_run=args.dry_run,
        )

        config_dict = dataclasses.asdict(action_config)
        if config_dict.get("token"):
            config_dict["token"] = "***MASKED***"
        logger.info("Active Configuration:\n%s", pprint.pformat(config_dict))

        publisher = None if args.dry_run else build_publisher(action_config)
        result: RunResult = execute(config, publisher=publisher)
    except ConfigurationError as exc:
        report_failure(f"Configuration error: {exc}", environ)
        return 1
    except RunError as exc:
        report_failure(str(exc), environ)
        return 1
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        report_failure(f"Unexpected error: {exc}", environ)
        return 1

    set_output("pr_url", result.pr_url, environ)
    set_output("new_items_count", str(result.new_items_count), environ)
    return 0
