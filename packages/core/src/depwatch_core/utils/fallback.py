"""Ordered fallback chains.

Checkout and comment posting both try a list of alternative operations in
order until one succeeds. Keeping the chain as data makes the tier order and
the give-up condition visible in one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from depwatch_core.utils.console import console

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attempt:
    name: str
    action: Callable[[], object]
    description: str = ""


def first_success(attempts: Sequence[Attempt]) -> Attempt | None:
    """Run attempts in order and return the first that did not raise.

    Every failure is logged with its cause and never re-raised. Returns None
    when the chain is exhausted.
    """
    for attempt in attempts:
        try:
            attempt.action()
        except Exception as e:
            console.print(f"{attempt.description or attempt.name} failed: {e}", markup=False, highlight=False)
            logger.debug("Fallback tier %r failed", attempt.name, exc_info=True)
            continue
        return attempt
    return None
