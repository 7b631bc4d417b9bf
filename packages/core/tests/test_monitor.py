"""Tests for the dual-build run orchestration."""

from unittest.mock import MagicMock, call

import pytest

from depwatch_core.config import DEFAULT_CONFIG
from depwatch_core.events import PullRequestEvent, PushEvent, RevisionTarget
from depwatch_core.exceptions import BuildStageError, CheckoutError, UnsupportedTriggerError
from depwatch_core.gh.comments import ReportComment
from depwatch_core.monitor import run_monitor
from depwatch_core.render import ACTION_NAME
from depwatch_core.snapshot import AssetManifest

SHA = "a" * 40
PR_EVENT = PullRequestEvent(kind="pull_request", base_sha=SHA, base_ref="trunk", number=12)
PUSH_EVENT = PushEvent(before="abc123", ref="main")

CURRENT = {"a.js": AssetManifest(frozenset({"x", "y"}), "H1")}
BASE = {"a.js": AssetManifest(frozenset({"x"}), "H2")}


def _config(tmp_path, **overrides):
    return {**DEFAULT_CONFIG, "cwd": str(tmp_path), "repo_token": "tok", **overrides}


@pytest.fixture
def pipeline(mocker):
    """Patch every working-tree collaborator and record the order they run in."""
    order = MagicMock()

    def build(label, *args, **kwargs):
        return CURRENT if label == "current" else BASE

    order.build.side_effect = build
    order.checkout.return_value = "trunk"
    mocker.patch("depwatch_core.monitor.run_build_cycle", order.build)
    mocker.patch("depwatch_core.monitor.checkout_base", order.checkout)
    mocker.patch("depwatch_core.monitor.run_clean_script", order.clean)
    mocker.patch("depwatch_core.monitor.upsert_report", order.upsert)
    order.upsert.return_value = "created"
    return order


class TestRunMonitor:
    def test_pull_request_flow(self, tmp_path, pipeline):
        repo = MagicMock()
        result = run_monitor(PR_EVENT, _config(tmp_path), repo_obj=repo)

        root = tmp_path.resolve()
        assert [c[0] for c in pipeline.mock_calls] == ["build", "checkout", "build", "upsert"]
        pipeline.build.assert_any_call("current", root, "build", "**/*.asset.php", DEFAULT_CONFIG["exclude"])
        pipeline.checkout.assert_called_once_with(RevisionTarget(ref="trunk", sha=SHA), root)
        pipeline.upsert.assert_called_once_with(repo, ReportComment(repo=None, issue_number=12, body=result.body))

        assert result.outcome == "created"
        assert result.base == RevisionTarget(ref="trunk", sha=SHA)
        (change,) = result.changes
        assert change.status == "changed"
        assert change.before == {"x"}
        assert change.after == {"x", "y"}
        assert f"<sub>{ACTION_NAME}</sub>" in result.body

    def test_clean_script_runs_between_checkout_and_base_build(self, tmp_path, pipeline):
        run_monitor(PR_EVENT, _config(tmp_path, clean_script="clean"), repo_obj=MagicMock())
        assert [c[0] for c in pipeline.mock_calls] == ["build", "checkout", "clean", "build", "upsert"]
        pipeline.clean.assert_called_once_with(tmp_path.resolve(), "clean")

    def test_push_skips_commenting(self, tmp_path, pipeline, capsys):
        result = run_monitor(PUSH_EVENT, _config(tmp_path))
        assert result.outcome == "skipped"
        pipeline.upsert.assert_not_called()
        pipeline.checkout.assert_called_once_with(RevisionTarget(ref="main", sha="abc123"), tmp_path.resolve())
        assert "All done!" in capsys.readouterr().out

    def test_unsupported_event_fails_before_any_work(self, tmp_path, pipeline):
        with pytest.raises(UnsupportedTriggerError):
            run_monitor(object(), _config(tmp_path))
        assert pipeline.mock_calls == []

    def test_build_failure_aborts_without_reporting(self, tmp_path, pipeline):
        pipeline.build.side_effect = BuildStageError("[current] install failed")
        with pytest.raises(BuildStageError):
            run_monitor(PR_EVENT, _config(tmp_path), repo_obj=MagicMock())
        pipeline.checkout.assert_not_called()
        pipeline.upsert.assert_not_called()

    def test_checkout_failure_is_fatal(self, tmp_path, pipeline):
        pipeline.checkout.side_effect = CheckoutError("no base")
        with pytest.raises(CheckoutError):
            run_monitor(PR_EVENT, _config(tmp_path), repo_obj=MagicMock())
        assert pipeline.build.call_args_list == [
            call("current", tmp_path.resolve(), "build", "**/*.asset.php", DEFAULT_CONFIG["exclude"])
        ]

    def test_render_options_passed_through(self, tmp_path, pipeline, mocker):
        render = mocker.patch("depwatch_core.monitor.render_table", return_value="TABLE")
        run_monitor(PR_EVENT, _config(tmp_path, omit_unchanged=True), repo_obj=MagicMock())
        assert render.call_args.kwargs == {"collapse_unchanged": False, "omit_unchanged": True}

    def test_repo_created_from_name_and_token(self, tmp_path, pipeline, mocker):
        repo = MagicMock()
        get_repo = mocker.patch("depwatch_core.monitor.get_repo", return_value=repo)
        run_monitor(PR_EVENT, _config(tmp_path), repo="owner/repo")
        get_repo.assert_called_once_with("owner/repo", token="tok")
        assert pipeline.upsert.call_args.args[0] is repo

    def test_repo_connection_failure_prints_raw_report(self, tmp_path, pipeline, mocker, capsys):
        mocker.patch("depwatch_core.monitor.get_repo", side_effect=RuntimeError("bad credentials"))
        result = run_monitor(PR_EVENT, _config(tmp_path), repo="owner/repo")
        assert result.outcome == "printed_raw"
        pipeline.upsert.assert_not_called()
        assert "unable to comment on your PR" in capsys.readouterr().out
