import json
import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "pattern": "**/*.asset.php",
    "exclude": "{**/node_modules/**,**/vendor/**}",
    "build_script": "build",
    "clean_script": None,  # None = no cleanup between checking out the base and installing it
    "collapse_unchanged": False,
    "omit_unchanged": False,
    "cwd": None,  # None = the directory depwatch was started in
    "repo_token": None,
}

_BOOL_KEYS = ("collapse_unchanged", "omit_unchanged")
_TRUTHY = {"1", "true", "yes", "on"}


def to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def _action_input(key: str, environ) -> Optional[str]:
    """Read a GitHub Actions input: ``build_script`` arrives as ``INPUT_BUILD-SCRIPT``."""
    value = environ.get("INPUT_" + key.replace("_", "-").upper(), "")
    return value.strip() or None


def load_config(
    config_path: str = ".depwatch.yml",
    cli_overrides: Optional[dict] = None,
    environ=None,
) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .depwatch.yml (a relative path is resolved against the cwd override, if any)
      3. GitHub Actions inputs (INPUT_* environment variables)
      4. CLI argument overrides
    """
    environ = os.environ if environ is None else environ
    config = dict(DEFAULT_CONFIG)

    # The cwd override applies before anything else, including locating the config file.
    cwd = (cli_overrides or {}).get("cwd") or _action_input("cwd", environ)
    path = Path(config_path)
    if cwd and not path.is_absolute():
        path = Path(cwd) / path
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update({k.replace("-", "_"): v for k, v in file_config.items()})

    for key in DEFAULT_CONFIG:
        value = _action_input(key, environ)
        if value is not None:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    for key in _BOOL_KEYS:
        config[key] = to_bool(config.get(key))

    # Explicit repo-token input wins over the token Actions injects.
    if not config.get("repo_token"):
        config["repo_token"] = environ.get("GITHUB_TOKEN")

    return config


def load_event_context(environ=None) -> tuple[Optional[str], dict, Optional[str]]:
    """
    Read the workflow trigger from the GitHub Actions environment.

    Returns (event name, event payload, "owner/repo"). The payload is empty
    when GITHUB_EVENT_PATH is unset or missing.
    """
    environ = os.environ if environ is None else environ
    payload: dict = {}
    event_path = environ.get("GITHUB_EVENT_PATH")
    if event_path and Path(event_path).is_file():
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f) or {}
    return environ.get("GITHUB_EVENT_NAME"), payload, environ.get("GITHUB_REPOSITORY")
