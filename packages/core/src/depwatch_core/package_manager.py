from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PackageManagerProfile:
    name: str  # "npm" | "yarn" | "pnpm"
    install_command: str


# Highest priority first. The first lockfile found decides the profile.
LOCKFILE_PROFILES: list[tuple[str, PackageManagerProfile]] = [
    ("yarn.lock", PackageManagerProfile("yarn", "yarn --frozen-lockfile")),
    ("pnpm-lock.yaml", PackageManagerProfile("pnpm", "pnpm install --frozen-lockfile")),
    ("package-lock.json", PackageManagerProfile("npm", "npm ci")),
]
DEFAULT_PROFILE = PackageManagerProfile("npm", "npm install")


def detect_package_manager(root: str | Path) -> PackageManagerProfile:
    """Pick the package manager for the working tree at ``root`` from its lockfiles."""
    root = Path(root)
    for lockfile, profile in LOCKFILE_PROFILES:
        if (root / lockfile).is_file():
            return profile
    return DEFAULT_PROFILE
