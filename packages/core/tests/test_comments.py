"""Tests for finding and upserting the dependency report comment."""

from unittest.mock import MagicMock

from github import GithubException

from depwatch_core.gh.comments import ReportComment, find_report_comment, is_report_comment, upsert_report
from depwatch_core.render import ACTION_NAME, build_comment_body

BODY = build_comment_body("| table |")


def _comment(body, user_type="Bot", comment_id=1):
    c = MagicMock()
    c.id = comment_id
    c.body = body
    c.user.type = user_type
    return c


def _repo(comments=()):
    repo = MagicMock()
    repo.get_issue.return_value.get_comments.return_value = list(comments)
    return repo


def _forbidden():
    return GithubException(403, {"message": "Resource not accessible by integration"})


class TestIsReportComment:
    def test_bot_comment_with_marker(self):
        assert is_report_comment(_comment(BODY))

    def test_human_comment_with_marker_ignored(self):
        assert not is_report_comment(_comment(BODY, user_type="User"))

    def test_bot_comment_without_marker_ignored(self):
        assert not is_report_comment(_comment("Deploy preview ready"))

    def test_marker_outside_sub_tag_ignored(self):
        assert not is_report_comment(_comment(f"mentions {ACTION_NAME} in passing"))

    def test_none_body(self):
        assert not is_report_comment(_comment(None))


class TestFindReportComment:
    def test_returns_newest_marked_comment(self):
        older = _comment(BODY, comment_id=1)
        newer = _comment(BODY, comment_id=2)
        issue = MagicMock()
        issue.get_comments.return_value = [older, _comment("other", comment_id=3), newer]
        assert find_report_comment(issue) is newer

    def test_none_when_absent(self):
        issue = MagicMock()
        issue.get_comments.return_value = [_comment("LGTM", user_type="User")]
        assert find_report_comment(issue) is None


class TestUpsertReport:
    def test_updates_existing_comment(self):
        existing = _comment(BODY, comment_id=42)
        repo = _repo([existing])

        assert upsert_report(repo, ReportComment("owner/repo", 7, "new body")) == "updated"

        existing.edit.assert_called_once_with("new body")
        repo.get_issue.return_value.create_comment.assert_not_called()

    def test_creates_comment_when_none_found(self):
        repo = _repo([_comment("LGTM", user_type="User")])

        assert upsert_report(repo, ReportComment("owner/repo", 7, BODY)) == "created"

        repo.get_issue.assert_called_with(7)
        repo.get_issue.return_value.create_comment.assert_called_once_with(BODY)
        assert ACTION_NAME in repo.get_issue.return_value.create_comment.call_args.args[0]

    def test_update_failure_falls_through_to_create(self):
        existing = _comment(BODY)
        existing.edit.side_effect = _forbidden()
        repo = _repo([existing])

        assert upsert_report(repo, ReportComment("owner/repo", 7, BODY)) == "created"
        repo.get_issue.return_value.create_comment.assert_called_once_with(BODY)

    def test_listing_failure_treated_as_not_found(self):
        repo = _repo()
        repo.get_issue.return_value.get_comments.side_effect = _forbidden()

        assert upsert_report(repo, ReportComment("owner/repo", 7, BODY)) == "created"

    def test_update_and_create_failing_submits_review(self):
        existing = _comment(BODY)
        existing.edit.side_effect = _forbidden()
        repo = _repo([existing])
        repo.get_issue.return_value.create_comment.side_effect = _forbidden()

        assert upsert_report(repo, ReportComment("owner/repo", 7, BODY)) == "review_commented"
        repo.get_pull.assert_called_once_with(7)
        repo.get_pull.return_value.create_review.assert_called_once_with(body=BODY, event="COMMENT")

    def test_all_tiers_failing_prints_raw_body(self, capsys):
        repo = _repo()
        repo.get_issue.return_value.create_comment.side_effect = _forbidden()
        repo.get_pull.return_value.create_review.side_effect = RuntimeError("network down")

        assert upsert_report(repo, ReportComment("owner/repo", 7, BODY)) == "printed_raw"

        out = capsys.readouterr().out
        assert "unable to comment on your PR" in out
        assert f"<sub>{ACTION_NAME}</sub>" in out
