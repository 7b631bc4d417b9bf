"""Move the working tree to the base revision.

CI checkouts are usually shallow, so the base ref may not exist locally. We
try a shallow fetch of the ref, then of the sha, then a plain fetch, and
finally hard-reset to whichever of ref/sha resolves.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path

from depwatch_core.events import RevisionTarget
from depwatch_core.exceptions import CheckoutError, CheckoutTierError, CommandError
from depwatch_core.utils.console import console
from depwatch_core.utils.fallback import Attempt, first_success
from depwatch_core.utils.process import run_command


def _git(root: Path, command: str) -> None:
    try:
        run_command(command, cwd=root)
    except CommandError as e:
        raise CheckoutTierError(str(e)) from e


def fetch_attempts(target: RevisionTarget, root: Path) -> list[Attempt]:
    attempts = []
    if target.ref:
        attempts.append(
            Attempt(
                "ref",
                partial(_git, root, f"git fetch --no-tags --depth=1 origin {target.ref}"),
                f"fetching base ref {target.ref}",
            )
        )
    if target.sha:
        attempts.append(
            Attempt(
                "sha",
                partial(_git, root, f"git fetch --no-tags --depth=1 origin {target.sha}"),
                f"fetching base sha {target.sha}",
            )
        )
    attempts.append(Attempt("all", partial(_git, root, "git fetch --no-tags"), "fetch"))
    return attempts


def reset_attempts(target: RevisionTarget, root: Path) -> list[Attempt]:
    return [
        Attempt(rev, partial(_git, root, f"git reset --hard {rev}"), f"resetting to {rev}")
        for rev in (target.ref, target.sha)
        if rev
    ]


def checkout_base(target: RevisionTarget, root: str | Path) -> str:
    """Check out the base revision and return the ref or sha the tree was reset to.

    Fetch failures are logged and tolerated. Raises CheckoutError only when
    neither the ref nor the sha can be reset to.
    """
    root = Path(root)

    fetched = first_success(fetch_attempts(target, root))
    if fetched is None:
        console.print("All fetch attempts failed; trying to reset with local history.")
    else:
        console.print(f"Successfully fetched base {fetched.name}.", markup=False, highlight=False)

    console.print("Checking out and building base commit")
    reset = first_success(reset_attempts(target, root))
    if reset is None:
        raise CheckoutError(f"Could not check out base revision (ref={target.ref!r}, sha={target.sha!r}).")
    return reset.name
