"""Branch, commit, push and pull request creation on GitHub."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol

import requests

from .models import PendingChange
from .renderers import (
    build_commit_message,
    build_pull_request_body,
    build_pull_request_title,
)

logger = logging.getLogger(__name__)

BOT_NAME = "github-actions[bot]"
BOT_EMAIL = "41898282+github-actions[bot]@users.noreply.github.com"
DEFAULT_API_URL = "https://api.github.com"


class PublishError(RuntimeError):
    """Raised when a git or GitHub API step fails."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step


class Publisher(Protocol):
    """Anything that can turn a pending change into a pull request URL."""

    def publish(self, change: PendingChange) -> str:
        """Publish the change and return the pull request URL."""


@dataclass
class GitClient:
    """Thin wrapper around the ``git`` executable."""

    workspace: Path
    token: str
    timeout: float = 120.0

    def run(self, *args: str) -> str:
        command = ["git", *args]
        logger.debug("Running %s", self._mask(" ".join(command)))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                cwd=str(self.workspace),
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise PublishError(f"git {args[0]}", self._mask(str(exc))) from exc

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            raise PublishError(f"git {args[0]}", self._mask(detail))
        return result.stdout

    def _mask(self, text: str) -> str:
        return text.replace(self.token, "***") if self.token else text

    def commit_to_new_branch(
        self, branch: str, paths: List[str], message: str, remote_url: str
    ) -> None:
        self.run("config", "--local", "user.email", BOT_EMAIL)
        self.run("config", "--local", "user.name", BOT_NAME)
        self.run("remote", "set-url", "origin", remote_url)
        self.run("checkout", "-b", branch)
        self.run("add", *paths)
        self.run("commit", "-m", message)
        self.run("push", "--set-upstream", "origin", branch)


@dataclass
class GitHubClient:
    """Minimal GitHub REST client for opening pull requests."""

    token: str
    repository: str
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0

    def create_pull_request(self, title: str, head: str, base: str, body: str) -> str:
        url = f"{self.api_url.rstrip('/')}/repos/{self.repository}/pulls"
        try:
            response = requests.post(
                url,
                json={"title": title, "head": head, "base": base, "body": body},
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {self.token}",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise PublishError("create pull request", str(exc)) from exc
        except ValueError as exc:
            raise PublishError("create pull request", "invalid JSON response") from exc

        html_url = payload.get("html_url") if isinstance(payload, dict) else None
        if not html_url:
            raise PublishError("create pull request", "response is missing html_url")
        return html_url


@dataclass
class GitHubPublisher:
    """Commit the change on a fresh branch and open a pull request for it."""

    git: GitClient
    github: GitHubClient
    branch_prefix: str = "rss-update"
    base_branch: str = "main"
    server_url: str = "https://github.com"

    def branch_name(self, change: PendingChange) -> str:
        return f"{self.branch_prefix}/{change.generated_at:%Y-%m-%dT%H-%M-%S}"

    def remote_url(self) -> str:
        host = self.server_url.split("://", 1)[-1].rstrip("/")
        return f"https://x-access-token:{self.git.token}@{host}/{self.github.repository}.git"

    def publish(self, change: PendingChange) -> str:
        branch = self.branch_name(change)
        logger.info("Committing %s to branch %s", change.path, branch)
        self.git.commit_to_new_branch(
            branch,
            [change.path],
            build_commit_message(change),
            self.remote_url(),
        )

        pr_url = self.github.create_pull_request(
            title=build_pull_request_title(change),
            head=branch,
            base=self.base_branch,
            body=build_pull_request_body(
                change, self.github.repository, self.server_url
            ),
        )
        logger.info("Pull request created: %s", pr_url)
        return pr_url
