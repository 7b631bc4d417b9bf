"""Keep a single dependency report comment up to date on a pull request.

Posting tiers, each tried only when the previous one failed:
  1. edit the previous report comment in place (if one was found)
  2. create a new issue comment
  3. submit a COMMENT pull request review
  4. print the report so a human can paste it manually

Forks without write permissions typically fail 1-3. None of the tiers may
fail the run.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import partial

from github import Github, GithubException

from depwatch_core.exceptions import ReportingError
from depwatch_core.render import ACTION_NAME
from depwatch_core.utils.console import console
from depwatch_core.utils.fallback import Attempt, first_success

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"<sub>" + re.escape(ACTION_NAME))

UPDATED = "updated"
CREATED = "created"
REVIEW_COMMENTED = "review_commented"
PRINTED_RAW = "printed_raw"


@dataclass(frozen=True)
class ReportComment:
    """The report for one pull request. At most one live copy is kept per issue."""

    repo: str | None  # "owner/name"
    issue_number: int
    body: str


def get_repo(repo_name: str, token: str | None):
    return Github(token).get_repo(repo_name)


def is_report_comment(comment) -> bool:
    """True for comments posted by a bot that carry the report marker."""
    user = getattr(comment, "user", None)
    if user is None or getattr(user, "type", None) != "Bot":
        return False
    return bool(_MARKER_RE.search(comment.body or ""))


def find_report_comment(issue):
    """Return the newest report comment on ``issue``, or None."""
    for comment in reversed(list(issue.get_comments())):
        if is_report_comment(comment):
            return comment
    return None


def _update_comment(comment, body: str) -> None:
    console.print(f"Updating previous comment #{comment.id}")
    try:
        comment.edit(body)
    except GithubException as e:
        raise ReportingError(f"could not edit comment #{comment.id} ({e.status})") from e


def _create_comment(repo, issue_number: int, body: str) -> None:
    console.print("Creating new comment")
    try:
        repo.get_issue(issue_number).create_comment(body)
    except GithubException as e:
        raise ReportingError(f"could not comment on #{issue_number} ({e.status})") from e


def _create_review(repo, issue_number: int, body: str) -> None:
    console.print("Submitting a PR review comment instead...")
    try:
        repo.get_pull(issue_number).create_review(body=body, event="COMMENT")
    except GithubException as e:
        raise ReportingError(f"could not review #{issue_number} ({e.status})") from e


def print_raw_report(body: str) -> None:
    console.print(
        f"Error: {ACTION_NAME} was unable to comment on your PR.\n"
        "This can happen for PR's originating from a fork without write permissions.\n"
        "You can copy the dependency table directly into a comment using the markdown below:\n\n"
        f"{body}\n",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def upsert_report(repo, report: ReportComment) -> str:
    """Post ``report`` on its pull request through ``repo``.

    Returns which tier succeeded: "updated", "created", "review_commented"
    or "printed_raw". Never raises.
    """
    number, body = report.issue_number, report.body
    existing = None
    try:
        existing = find_report_comment(repo.get_issue(number))
    except Exception as e:
        console.print(f"Error checking for previous comments: {e}", markup=False, highlight=False)
        logger.debug("Listing comments on %s#%d failed", report.repo, number, exc_info=True)

    attempts = []
    if existing is not None:
        attempts.append(Attempt(UPDATED, partial(_update_comment, existing, body), "Editing previous comment"))
    attempts.append(Attempt(CREATED, partial(_create_comment, repo, number, body), "Creating comment"))
    attempts.append(Attempt(REVIEW_COMMENTED, partial(_create_review, repo, number, body), "Creating PR review"))

    posted = first_success(attempts)
    if posted is not None:
        return posted.name

    print_raw_report(body)
    return PRINTED_RAW
