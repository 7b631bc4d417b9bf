from __future__ import annotations

from dataclasses import dataclass

from depwatch_core.snapshot import DependencySnapshot

ADDED = "added"
REMOVED = "removed"
CHANGED = "changed"
UNCHANGED = "unchanged"


@dataclass(frozen=True)
class ChangeRecord:
    """How one asset's declared dependencies moved from the base to the current build."""

    asset: str
    status: str  # "added" | "removed" | "changed" | "unchanged"
    before: frozenset[str] | None = None
    after: frozenset[str] | None = None
    fingerprint_changed: bool = False

    @property
    def added_dependencies(self) -> list[str]:
        return sorted((self.after or frozenset()) - (self.before or frozenset()))

    @property
    def removed_dependencies(self) -> list[str]:
        return sorted((self.before or frozenset()) - (self.after or frozenset()))


def diff_snapshots(base: DependencySnapshot, current: DependencySnapshot) -> list[ChangeRecord]:
    """Compare two snapshots, one record per asset, sorted by asset id.

    Only the dependency sets decide the status. A manifest whose fingerprint
    moved but whose dependencies did not is reported ``unchanged`` with
    ``fingerprint_changed`` set.
    """
    records = []
    for asset in sorted(base.keys() | current.keys()):
        old = base.get(asset)
        new = current.get(asset)
        if old is None:
            records.append(ChangeRecord(asset, ADDED, after=new.dependencies))
        elif new is None:
            records.append(ChangeRecord(asset, REMOVED, before=old.dependencies))
        else:
            status = CHANGED if old.dependencies != new.dependencies else UNCHANGED
            records.append(
                ChangeRecord(
                    asset,
                    status,
                    before=old.dependencies,
                    after=new.dependencies,
                    fingerprint_changed=old.fingerprint != new.fingerprint,
                )
            )
    return records


def has_changes(changes: list[ChangeRecord]) -> bool:
    return any(c.status != UNCHANGED for c in changes)
