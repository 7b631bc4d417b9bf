"""Read the dependency manifests that the WordPress scripts build emits.

Each ``<entry>.asset.php`` file returns a PHP array such as::

    <?php return array('dependencies' => array('react', 'wp-element'), 'version' => '0a1b2c');

A snapshot maps each asset to the set of script handles it declares plus a
fingerprint of the manifest file.
"""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass
from pathlib import Path

import pathspec

from depwatch_core.exceptions import SnapshotError

MANIFEST_SUFFIX = ".asset.php"

_BRACE_RE = re.compile(r"\{([^{}]*)\}")
_DEPENDENCIES_RE = re.compile(
    r"""['"]dependencies['"]\s*=>\s*(?:array\s*\((?P<array>.*?)\)|\[(?P<short>.*?)\])""",
    re.DOTALL,
)
_STRING_RE = re.compile(r"'([^']*)'|\"([^\"]*)\"")


@dataclass(frozen=True)
class AssetManifest:
    dependencies: frozenset[str]
    fingerprint: str


DependencySnapshot = dict[str, AssetManifest]


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives: ``{x/**,y/**}`` becomes ``["x/**", "y/**"]``."""
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def compile_globs(pattern: str | None) -> pathspec.PathSpec:
    """Compile a brace-expanded glob into a gitwildmatch spec.

    ``*`` stops at ``/`` and only ``**`` crosses directories, so
    ``build/*.asset.php`` matches ``build/a.asset.php`` but not
    ``build/blocks/a.asset.php``.
    """
    return pathspec.PathSpec.from_lines("gitwildmatch", expand_braces(pattern) if pattern else [])


def is_excluded(rel_path: str, spec: pathspec.PathSpec) -> bool:
    """Return True if the root-relative POSIX path (``dir/`` for directories) is excluded."""
    return spec.match_file(rel_path)


def asset_id(rel_path: str) -> str:
    if rel_path.endswith(MANIFEST_SUFFIX):
        return rel_path[: -len(MANIFEST_SUFFIX)] + ".js"
    return rel_path


def parse_dependencies(source: str) -> frozenset[str]:
    match = _DEPENDENCIES_RE.search(source)
    if not match:
        return frozenset()
    listing = match.group("array") if match.group("array") is not None else match.group("short")
    return frozenset(single or double for single, double in _STRING_RE.findall(listing))


def find_manifests(root: str | Path, pattern: str, exclude: str | None = None) -> list[Path]:
    """Walk ``root`` for files matching ``pattern``.

    Excluded directories (node_modules, vendor) are pruned during the walk
    instead of being listed and filtered afterwards.
    """
    root = Path(root)
    include_spec = compile_globs(pattern)
    exclude_spec = compile_globs(exclude)
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = sorted(d for d in dirnames if not is_excluded(f"{prefix}{d}/", exclude_spec))
        for name in filenames:
            rel_path = prefix + name
            if include_spec.match_file(rel_path) and not is_excluded(rel_path, exclude_spec):
                found.append(root / rel_path)
    return sorted(found)


def read_snapshot(root: str | Path, pattern: str, exclude: str | None = None) -> DependencySnapshot:
    """Capture the declared dependencies of every manifest under ``root``."""
    root = Path(root)
    snapshot: DependencySnapshot = {}
    for path in find_manifests(root, pattern, exclude):
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise SnapshotError(f"Could not read manifest {path}: {e}") from e
        snapshot[asset_id(path.relative_to(root).as_posix())] = AssetManifest(
            dependencies=parse_dependencies(raw.decode("utf-8", errors="replace")),
            fingerprint=hashlib.sha256(raw).hexdigest(),
        )
    return snapshot
