"""Dual-build dependency comparison.

Builds the incoming revision, checks out the base revision in the same
working tree, builds it again and reports how the declared dependencies of
each asset changed. Every step mutates the working tree, so everything runs
strictly in sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from depwatch_core.build import run_build_cycle, run_clean_script
from depwatch_core.checkout import checkout_base
from depwatch_core.config import DEFAULT_CONFIG
from depwatch_core.diff import ChangeRecord, diff_snapshots, has_changes
from depwatch_core.events import PullRequestEvent, PushEvent, RevisionTarget, TriggerEvent, resolve_base_revision
from depwatch_core.gh.comments import PRINTED_RAW, ReportComment, get_repo, print_raw_report, upsert_report
from depwatch_core.render import build_comment_body, render_table
from depwatch_core.utils.console import console, log_group

logger = logging.getLogger(__name__)

SKIPPED = "skipped"


@dataclass
class MonitorResult:
    """What a run produced: the base it compared against, the diff and how it was reported."""

    base: RevisionTarget
    body: str
    outcome: str  # "updated" | "created" | "review_commented" | "printed_raw" | "skipped"
    changes: list[ChangeRecord] = field(default_factory=list)


def _publish(event: TriggerEvent, body: str, config: dict, repo: str | None, repo_obj) -> str:
    if not isinstance(event, PullRequestEvent):
        console.print("No PR associated with this action run. Not posting a comment.")
        return SKIPPED

    with log_group("Updating dependencies PR comment"):
        if repo_obj is None:
            try:
                repo_obj = get_repo(repo, token=config.get("repo_token"))
            except Exception as e:
                console.print(f"Error connecting to repository {repo}: {e}", markup=False, highlight=False)
                logger.debug("get_repo(%r) failed", repo, exc_info=True)
        if repo_obj is None:
            print_raw_report(body)
            return PRINTED_RAW
        return upsert_report(repo_obj, ReportComment(repo=repo, issue_number=event.number, body=body))


def run_monitor(
    event: TriggerEvent,
    config: dict,
    repo: str | None = None,
    repo_obj=None,
) -> MonitorResult:
    """Run the full comparison and return a MonitorResult.

    Failures while resolving, building, checking out or diffing propagate to
    the caller. Failures while posting the report never do.
    """
    base = resolve_base_revision(event)
    if isinstance(event, PushEvent):
        console.print(f"Pushed new commit on top of {base.ref} ({base.sha})", markup=False, highlight=False)
    else:
        console.print(f"PR #{event.number} is targeted at {base.ref} ({base.sha})", markup=False, highlight=False)

    root = Path(config.get("cwd") or Path.cwd()).resolve()
    pattern = config.get("pattern") or DEFAULT_CONFIG["pattern"]
    exclude = config.get("exclude") or DEFAULT_CONFIG["exclude"]
    build_script = config.get("build_script") or DEFAULT_CONFIG["build_script"]

    current_snapshot = run_build_cycle("current", root, build_script, pattern, exclude)
    console.print(f"Found {len(current_snapshot)} asset manifest(s) in the current build.")

    with log_group("[base] Checkout target branch"):
        checkout_base(base, root)

    clean_script = config.get("clean_script")
    if clean_script:
        run_clean_script(root, clean_script)

    base_snapshot = run_build_cycle("base", root, build_script, pattern, exclude)
    console.print(f"Found {len(base_snapshot)} asset manifest(s) in the base build.")

    changes = diff_snapshots(base_snapshot, current_snapshot)
    if not has_changes(changes):
        console.print("No dependency changes between the base and the current build.")
    table = render_table(
        changes,
        collapse_unchanged=config.get("collapse_unchanged", False),
        omit_unchanged=config.get("omit_unchanged", False),
    )
    body = build_comment_body(table)

    outcome = _publish(event, body, config, repo, repo_obj)

    console.print("All done!")
    return MonitorResult(base=base, body=body, outcome=outcome, changes=changes)
