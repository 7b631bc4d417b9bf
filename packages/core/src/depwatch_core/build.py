"""One install → build → reset → snapshot cycle for the checked-out revision."""

from __future__ import annotations

from pathlib import Path

from depwatch_core.exceptions import BuildStageError, CommandError
from depwatch_core.package_manager import PackageManagerProfile, detect_package_manager
from depwatch_core.snapshot import DependencySnapshot, read_snapshot
from depwatch_core.utils.console import console, log_group
from depwatch_core.utils.process import run_command


def _run_stage(label: str, stage: str, command: str, root: Path) -> None:
    try:
        run_command(command, cwd=root)
    except CommandError as e:
        raise BuildStageError(f"[{label}] {stage} failed: {e}") from e


def run_clean_script(root: str | Path, clean_script: str) -> PackageManagerProfile:
    """Run the user's clean script between checking out the base and installing it."""
    root = Path(root)
    profile = detect_package_manager(root)
    with log_group(f"[base] Cleanup via {profile.name} run {clean_script}"):
        _run_stage("base", "clean", f"{profile.name} run {clean_script}", root)
    return profile


def run_build_cycle(
    label: str,
    root: str | Path,
    build_script: str,
    pattern: str,
    exclude: str | None = None,
) -> DependencySnapshot:
    """Install, build and snapshot the revision currently checked out at ``root``.

    The package manager is detected afresh each cycle, since the base revision
    may carry different lockfiles. Any failing stage raises BuildStageError.
    """
    root = Path(root)
    profile = detect_package_manager(root)

    with log_group(f"[{label}] Install Dependencies"):
        console.print(f"Installing using {profile.install_command}", markup=False, highlight=False)
        _run_stage(label, "install", profile.install_command, root)

    with log_group(f"[{label}] Build using {profile.name}"):
        console.print(f"Building using {profile.name} run {build_script}", markup=False, highlight=False)
        _run_stage(label, "build", f"{profile.name} run {build_script}", root)

    # The build may rewrite tracked files (lockfiles, package.json); drop those changes.
    _run_stage(label, "reset", "git reset --hard", root)

    return read_snapshot(root, pattern, exclude)
