"""Markdown rendering of a snapshot diff."""

from __future__ import annotations

from depwatch_core.diff import ADDED, REMOVED, UNCHANGED, ChangeRecord

ACTION_NAME = "monitor-wordpress-dependencies-action"
ACTION_URL = "https://github.com/fabiankaegy/monitor-wordpress-dependencies-action"

_HEADER = "| Asset | Added | Removed | Dependencies |\n|-------|-------|---------|--------------|"


def _format_deps(deps) -> str:
    return ", ".join(f"`{d}`" for d in sorted(deps)) if deps else "—"


def _row(change: ChangeRecord) -> str:
    label = f"`{change.asset}`"
    if change.status == ADDED:
        label += " _(new)_"
    elif change.status == REMOVED:
        label += " _(removed)_"
    current = change.before if change.status == REMOVED else change.after
    return (
        f"| {label} "
        f"| {_format_deps(change.added_dependencies)} "
        f"| {_format_deps(change.removed_dependencies)} "
        f"| {_format_deps(current)} |"
    )


def _table(changes: list[ChangeRecord]) -> str:
    return "\n".join([_HEADER] + [_row(c) for c in changes])


def render_table(changes: list[ChangeRecord], collapse_unchanged: bool = False, omit_unchanged: bool = False) -> str:
    """Render changed assets as a table, with unchanged ones inline, collapsed or omitted."""
    changed = [c for c in changes if c.status != UNCHANGED]
    unchanged = [c for c in changes if c.status == UNCHANGED]

    if omit_unchanged:
        unchanged = []
    if not changed and not unchanged:
        return "No dependency changes detected."

    if not collapse_unchanged or not unchanged:
        return _table(changed + unchanged)

    parts = [_table(changed)] if changed else ["No dependency changes detected."]
    parts.append(
        f"<details><summary><strong>View Unchanged</strong></summary>\n\n{_table(unchanged)}\n\n</details>"
    )
    return "\n\n".join(parts)


def build_comment_body(table: str) -> str:
    """Wrap a rendered table in the report header and the marker footer."""
    return (
        "#### Monitor WordPress Dependencies Action"
        "\n\n"
        f'The <a href="{ACTION_URL}">{ACTION_NAME}</a> action has detected some changed script dependencies '
        "between this branch and trunk. Please review and confirm the following are correct before merging."
        "\n\n"
        f"{table}"
        "\n\n"
        f'<a href="{ACTION_URL}"><sub>{ACTION_NAME}</sub></a>'
    )
