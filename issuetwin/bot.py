"""Check one issue against the open issues of its repository and flag it."""

from __future__ import annotations

from rich.console import Console

from .config import DuplicateSettings
from .dictionaries import Dictionaries
from .github import GitHubClient
from .policy import DuplicateMatch, IssueRef, find_duplicates, render_comment

console = Console()


def mark_as_duplicate(
    client: GitHubClient,
    repo: str,
    issue: IssueRef,
    matches: list[DuplicateMatch],
    settings: DuplicateSettings,
) -> None:
    """Label ``issue`` and post the reference comment, as configured."""
    if settings.issue_label is not False:
        client.ensure_label(repo, settings.issue_label, settings.label_color)
        client.add_labels(repo, issue.number, [settings.issue_label])
        console.print(f"[green]Labelled #{issue.number}:[/] {settings.issue_label}")

    body = render_comment(matches, settings)
    if body:
        client.create_comment(repo, issue.number, body)
        console.print(f"[green]Commented on #{issue.number}[/]")


def check_issue(
    client: GitHubClient,
    repo: str,
    issue: IssueRef,
    settings: DuplicateSettings,
    dictionaries: Dictionaries | None = None,
    dry_run: bool = False,
    candidates: list[IssueRef] | None = None,
) -> list[DuplicateMatch]:
    """
    Find duplicates of ``issue`` among open issues and flag it.

    Args:
        client: GitHub client
        repo: Repository as ``owner/name``
        issue: Issue to check
        settings: Duplicate-detection settings
        dictionaries: Normalization tables (shared defaults when omitted)
        dry_run: Report matches without labelling or commenting
        candidates: Already fetched open issues; fetched from GitHub when omitted

    Returns:
        Matches found, best first
    """
    if not settings.enabled:
        console.print("[dim]Duplicate detection disabled[/]")
        return []

    console.print(f"[blue]Checking #{issue.number}:[/] {issue.title}")
    if candidates is None:
        candidates = client.list_open_issues(repo)
    matches = find_duplicates(issue, candidates, settings, dictionaries)

    if not matches:
        console.print("[dim]No duplicates found[/]")
        return matches

    console.print(f"[yellow]Found {len(matches)} potential duplicate(s)[/]")
    if dry_run:
        console.print("[dim]Dry run - not labelling or commenting[/]")
        return matches

    mark_as_duplicate(client, repo, issue, matches, settings)
    return matches
