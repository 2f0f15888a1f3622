"""Duplicate decision policy: threshold checks and comment rendering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console

from .config import DEFAULT_THRESHOLD, DuplicateSettings
from .dictionaries import Dictionaries
from .errors import DegenerateAggregationError, InvalidInputError
from .similarity import compare

console = Console()

__all__ = [
    "DEFAULT_THRESHOLD",
    "DuplicateMatch",
    "IssueRef",
    "find_duplicates",
    "is_duplicate",
    "render_comment",
]


@dataclass(frozen=True)
class IssueRef:
    """An issue as seen by the policy: just its number and title."""

    number: int
    title: str


@dataclass
class DuplicateMatch:
    """An existing issue whose title scored above the threshold."""

    issue: IssueRef
    score: float

    @property
    def accuracy(self) -> int:
        """Score as a whole percentage, clamped to 0..100."""
        return max(0, min(100, round(self.score * 100)))


def is_duplicate(score: float, threshold: float | bool | None = DEFAULT_THRESHOLD) -> bool:
    """Return True when ``score`` reaches ``threshold``. False/None disables detection."""
    if threshold is None or threshold is False:
        return False
    return score >= threshold


def find_duplicates(
    issue: IssueRef,
    candidates: Iterable[IssueRef],
    settings: DuplicateSettings | None = None,
    dictionaries: Dictionaries | None = None,
) -> list[DuplicateMatch]:
    """
    Compare an issue title against other issues.

    Args:
        issue: The new or edited issue
        candidates: Existing issues (the issue itself is skipped)
        settings: Threshold and penalty settings
        dictionaries: Normalization tables (shared defaults when omitted)

    Returns:
        Matches at or above the threshold, best first
    """
    settings = settings or DuplicateSettings()
    if not settings.enabled:
        console.print("[dim]Duplicate detection disabled (threshold: false)[/]")
        return []

    matches: list[DuplicateMatch] = []
    for candidate in candidates:
        if candidate.number == issue.number:
            continue
        try:
            score = compare(
                candidate.title,
                issue.title,
                dictionaries=dictionaries,
                error_adj=settings.error_adj,
            )
        except (InvalidInputError, DegenerateAggregationError) as e:
            console.print(f"[yellow]Skipping #{candidate.number}: {e}[/]")
            continue

        console.print(f"[dim]  #{candidate.number} {candidate.title!r} ~ {issue.title!r} = {score:.2f}[/]")

        if is_duplicate(score, settings.threshold):
            matches.append(DuplicateMatch(issue=candidate, score=score))

    matches.sort(key=lambda m: (-m.score, m.issue.number))
    return matches


def render_comment(
    matches: list[DuplicateMatch], settings: DuplicateSettings | None = None
) -> str | None:
    """Render the reference comment, or None if commenting is disabled or nothing matched."""
    settings = settings or DuplicateSettings()
    if settings.reference_comment is False or not matches:
        return None

    lines = [settings.comment_header] if settings.comment_header else []
    for match in matches:
        lines.append(
            settings.reference_comment.format(
                number=match.issue.number,
                title=match.issue.title,
                accuracy=match.accuracy,
            )
        )
    return "\n".join(lines)
