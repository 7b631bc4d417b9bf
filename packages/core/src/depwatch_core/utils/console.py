"""Workflow log helpers.

GitHub Actions folds lines between ``::group::`` and ``::endgroup::`` into a
collapsible section and turns ``::error::`` lines into run annotations.
"""

from __future__ import annotations

from contextlib import contextmanager

from rich.console import Console

# Lines are never wrapped: workflow commands and copied report text must stay intact.
console = Console(soft_wrap=True)


@contextmanager
def log_group(title: str):
    console.print(f"::group::{title}", markup=False, highlight=False)
    try:
        yield
    finally:
        console.print("::endgroup::", markup=False, highlight=False)


def log_error(message: str) -> None:
    # Workflow commands are single-line; escape newlines the way the runner expects.
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    console.print(f"::error::{escaped}", markup=False, highlight=False, soft_wrap=True)
