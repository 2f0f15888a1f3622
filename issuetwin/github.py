"""Minimal GitHub REST client for labelling and commenting on issues."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
from rich.console import Console

from .api_utils import make_api_request
from .config import IssueTwinConfig
from .policy import IssueRef

console = Console()

# Request timeout for GitHub API calls
GITHUB_TIMEOUT = 30.0
PER_PAGE = 100


class GitHubError(Exception):
    """GitHub API request failed with a non-retriable error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _split_repo(repo: str) -> tuple[str, str]:
    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"Repository must look like 'owner/name', got {repo!r}")
    return owner, name


class GitHubClient:
    """Thin wrapper over the issues and labels endpoints."""

    def __init__(
        self,
        config: IssueTwinConfig,
        client: httpx.Client | None = None,
        max_retries: int = 3,
    ) -> None:
        self.config = config
        self.max_retries = max_retries
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "issuetwin",
        }
        if config.github_token:
            headers["Authorization"] = f"Bearer {config.github_token}"
        self._client = client or httpx.Client(
            base_url=config.api_base, headers=headers, timeout=GITHUB_TIMEOUT
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, url: str, operation: str, **kwargs: Any) -> httpx.Response:
        try:
            return make_api_request(
                self._client,
                method,
                url,
                max_retries=self.max_retries,
                operation_name=operation,
                **kwargs,
            )
        except httpx.HTTPStatusError as e:
            raise GitHubError(
                f"{operation} failed: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise GitHubError(f"{operation} failed: {e}") from e

    def list_open_issues(self, repo: str) -> list[IssueRef]:
        """Return all open issues of ``repo`` (pull requests excluded)."""
        owner, name = _split_repo(repo)
        url: str | None = f"/repos/{owner}/{name}/issues"
        params: dict[str, Any] | None = {"state": "open", "per_page": PER_PAGE}

        issues: list[IssueRef] = []
        while url:
            response = self._request("GET", url, "List issues", params=params)
            for item in response.json():
                # The issues endpoint also returns pull requests
                if "pull_request" in item:
                    continue
                issues.append(IssueRef(number=item["number"], title=item.get("title") or ""))
            url = response.links.get("next", {}).get("url")
            params = None  # next link already carries the query

        console.print(f"[dim]Fetched {len(issues)} open issues from {repo}[/]")
        return issues

    def ensure_label(self, repo: str, name: str, color: str | bool) -> None:
        """Create label ``name`` unless it already exists."""
        owner, repo_name = _split_repo(repo)
        try:
            self._request(
                "GET", f"/repos/{owner}/{repo_name}/labels/{quote(name, safe='')}", "Get label"
            )
            return
        except GitHubError as e:
            if e.status_code != 404:
                raise

        payload: dict[str, str] = {"name": name}
        if color:
            payload["color"] = str(color)
        self._request("POST", f"/repos/{owner}/{repo_name}/labels", "Create label", json=payload)
        console.print(f"[green]Created label:[/] {name}")

    def add_labels(self, repo: str, number: int, labels: list[str]) -> None:
        owner, name = _split_repo(repo)
        self._request(
            "POST",
            f"/repos/{owner}/{name}/issues/{number}/labels",
            "Add labels",
            json={"labels": labels},
        )

    def create_comment(self, repo: str, number: int, body: str) -> None:
        owner, name = _split_repo(repo)
        self._request(
            "POST",
            f"/repos/{owner}/{name}/issues/{number}/comments",
            "Create comment",
            json={"body": body},
        )
