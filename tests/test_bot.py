"""Tests for checking and flagging a single issue."""

from unittest.mock import MagicMock

import pytest

from issuetwin.bot import check_issue, mark_as_duplicate
from issuetwin.config import DuplicateSettings
from issuetwin.github import GitHubClient
from issuetwin.policy import DuplicateMatch, IssueRef

# --- Fixtures ---


@pytest.fixture
def client() -> MagicMock:
    """GitHub client returning two open issues."""
    mock = MagicMock(spec=GitHubClient)
    mock.list_open_issues.return_value = [
        IssueRef(1, "isues testin"),
        IssueRef(2, "Dark mode for the editor"),
        IssueRef(5, "testing issues"),
    ]
    return mock


@pytest.fixture
def issue() -> IssueRef:
    return IssueRef(5, "testing issues")


class TestCheckIssue:
    """End-to-end flow with a mocked GitHub client."""

    def test_labels_and_comments_duplicates(self, client: MagicMock, issue: IssueRef) -> None:
        matches = check_issue(client, "octo/repo", issue, DuplicateSettings())

        assert [m.issue.number for m in matches] == [1]
        client.list_open_issues.assert_called_once_with("octo/repo")
        client.ensure_label.assert_called_once_with("octo/repo", "potential-duplicate", "cfd3d7")
        client.add_labels.assert_called_once_with("octo/repo", 5, ["potential-duplicate"])
        client.create_comment.assert_called_once()
        body = client.create_comment.call_args[0][2]
        assert body.startswith("Potential duplicates:\n- [#1] isues testin (")

    def test_no_duplicates_no_writes(self, client: MagicMock) -> None:
        matches = check_issue(client, "octo/repo", IssueRef(9, "Export to PDF"), DuplicateSettings())

        assert matches == []
        client.add_labels.assert_not_called()
        client.create_comment.assert_not_called()

    def test_dry_run(self, client: MagicMock, issue: IssueRef) -> None:
        matches = check_issue(client, "octo/repo", issue, DuplicateSettings(), dry_run=True)

        assert len(matches) == 1
        client.add_labels.assert_not_called()
        client.create_comment.assert_not_called()

    def test_disabled(self, client: MagicMock, issue: IssueRef) -> None:
        matches = check_issue(client, "octo/repo", issue, DuplicateSettings(threshold=False))

        assert matches == []
        client.list_open_issues.assert_not_called()

    def test_uses_given_candidates(self, client: MagicMock, issue: IssueRef) -> None:
        check_issue(
            client, "octo/repo", issue, DuplicateSettings(), candidates=[IssueRef(1, "isues testin")]
        )

        client.list_open_issues.assert_not_called()
        client.add_labels.assert_called_once()


class TestMarkAsDuplicate:
    """Label and comment toggles."""

    def test_label_disabled(self, client: MagicMock, issue: IssueRef) -> None:
        settings = DuplicateSettings(issue_label=False)
        matches = [DuplicateMatch(IssueRef(1, "isues testin"), 0.85)]

        mark_as_duplicate(client, "octo/repo", issue, matches, settings)

        client.ensure_label.assert_not_called()
        client.add_labels.assert_not_called()
        client.create_comment.assert_called_once()

    def test_comment_disabled(self, client: MagicMock, issue: IssueRef) -> None:
        settings = DuplicateSettings(reference_comment=False)
        matches = [DuplicateMatch(IssueRef(1, "isues testin"), 0.85)]

        mark_as_duplicate(client, "octo/repo", issue, matches, settings)

        client.add_labels.assert_called_once()
        client.create_comment.assert_not_called()
