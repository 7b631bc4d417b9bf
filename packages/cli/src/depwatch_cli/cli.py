"""CLI entry point for depwatch.

Meant to run as a GitHub Actions step: the trigger event, repository and
token are read from the workflow environment, action inputs from INPUT_*
variables, and any option given on the command line overrides both.
"""

from __future__ import annotations

import importlib.metadata
import sys

import click

from depwatch_core.monitor import run_monitor


@click.command()
@click.version_option(
    version=importlib.metadata.version("depwatch"),
    prog_name="depwatch",
)
@click.option(
    "--config",
    "config_path",
    default=".depwatch.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="DEPWATCH_CONFIG",
)
@click.option("--cwd", default=None, help="Working directory of the project to build.")
@click.option("--pattern", default=None, help="Glob for dependency manifests. [default: **/*.asset.php]")
@click.option("--exclude", default=None, help="Glob of manifests to skip. [default: {**/node_modules/**,**/vendor/**}]")
@click.option("--build-script", default=None, help="Package script that builds the assets. [default: build]")
@click.option("--clean-script", default=None, help="Package script to run after checking out the base revision.")
@click.option("--collapse-unchanged", is_flag=True, help="Fold unchanged assets into a details block.")
@click.option("--omit-unchanged", is_flag=True, help="Leave unchanged assets out of the report.")
@click.option("--event-name", envvar="GITHUB_EVENT_NAME", default=None, help="Workflow trigger event name.")
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to the trigger event JSON payload.",
)
@click.option("--repo", envvar="GITHUB_REPOSITORY", default=None, help="GitHub repository in owner/name format.")
def main(
    config_path: str,
    cwd: str | None,
    pattern: str | None,
    exclude: str | None,
    build_script: str | None,
    clean_script: str | None,
    collapse_unchanged: bool,
    omit_unchanged: bool,
    event_name: str | None,
    event_path: str | None,
    repo: str | None,
):
    """Compare declared asset dependencies between this change and its base.

    Builds the project twice (current and base revision), diffs the
    generated *.asset.php manifests and posts the result on the pull request.

    \b
    Environment variables:
      GITHUB_TOKEN         Token used to post the report (or INPUT_REPO-TOKEN)
      GITHUB_EVENT_NAME    push, pull_request or pull_request_target
      GITHUB_EVENT_PATH    JSON payload of the triggering event
    """
    from depwatch_core.config import load_config, load_event_context
    from depwatch_core.events import parse_trigger_event
    from depwatch_core.utils.console import log_error

    try:
        config = load_config(
            config_path,
            cli_overrides={
                "cwd": cwd,
                "pattern": pattern,
                "exclude": exclude,
                "build_script": build_script,
                "clean_script": clean_script,
                "collapse_unchanged": collapse_unchanged or None,
                "omit_unchanged": omit_unchanged or None,
            },
        )

        _, payload, _ = load_event_context({"GITHUB_EVENT_PATH": event_path or ""})
        event = parse_trigger_event(event_name, payload)

        run_monitor(event, config, repo=repo)
    except Exception as e:
        log_error(str(e))
        sys.exit(1)
