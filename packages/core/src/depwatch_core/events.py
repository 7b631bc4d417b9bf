"""Workflow trigger events and base revision resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from depwatch_core.exceptions import UnsupportedTriggerError

PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")
SUPPORTED_EVENTS = ("push",) + PULL_REQUEST_EVENTS


@dataclass(frozen=True)
class PushEvent:
    before: str | None
    ref: str | None


@dataclass(frozen=True)
class PullRequestEvent:
    kind: str  # "pull_request" | "pull_request_target"
    base_sha: str | None
    base_ref: str | None
    number: int
    head_sha: str | None = None


TriggerEvent = Union[PushEvent, PullRequestEvent]


@dataclass(frozen=True)
class RevisionTarget:
    """The base revision to compare against. At least one of ref/sha is set."""

    ref: str | None
    sha: str | None


def _unsupported(event_name) -> UnsupportedTriggerError:
    return UnsupportedTriggerError(
        f"Unsupported event: {event_name}. "
        'Only "pull_request", "pull_request_target", and "push" triggered workflows are currently supported.'
    )


def parse_trigger_event(event_name: str | None, payload: dict | None) -> TriggerEvent:
    """Validate a raw workflow payload into a TriggerEvent.

    Unknown event names are rejected here, before any build or checkout work.
    """
    payload = payload or {}
    if event_name == "push":
        return PushEvent(before=payload.get("before") or None, ref=payload.get("ref") or None)

    if event_name in PULL_REQUEST_EVENTS:
        pr = payload.get("pull_request") or {}
        base = pr.get("base") or {}
        head = pr.get("head") or {}
        number = pr.get("number") or payload.get("number")
        if not number:
            raise UnsupportedTriggerError(f"{event_name} payload does not carry a pull request number.")
        return PullRequestEvent(
            kind=event_name,
            base_sha=base.get("sha") or None,
            base_ref=base.get("ref") or None,
            number=int(number),
            head_sha=head.get("sha") or None,
        )

    raise _unsupported(event_name)


def resolve_base_revision(event: TriggerEvent) -> RevisionTarget:
    """Return the revision the current build is compared against."""
    if isinstance(event, PushEvent):
        target = RevisionTarget(ref=event.ref, sha=event.before)
    elif isinstance(event, PullRequestEvent):
        target = RevisionTarget(ref=event.base_ref, sha=event.base_sha)
    else:
        raise _unsupported(type(event).__name__)

    if not target.ref and not target.sha:
        raise UnsupportedTriggerError("Trigger payload carries neither a base ref nor a base sha.")
    return target
