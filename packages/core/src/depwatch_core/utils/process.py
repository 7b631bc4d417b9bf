from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from depwatch_core.exceptions import CommandError
from depwatch_core.utils.console import console

logger = logging.getLogger(__name__)


def run_command(command: str, cwd: str | Path | None = None) -> None:
    """Run ``command`` in ``cwd``, streaming its output into the run log.

    Blocks until the command exits. There is no internal timeout; the hosting
    runner bounds the overall run time.

    Raises:
        CommandError: If the command cannot be started or exits non-zero.
    """
    args = shlex.split(command)
    console.print(f"[command]{command}", markup=False, highlight=False)
    try:
        result = subprocess.run(args, cwd=cwd)
    except (FileNotFoundError, PermissionError) as e:
        raise CommandError(f"Could not start `{command}`: {e}") from e
    if result.returncode != 0:
        raise CommandError(f"`{command}` failed with exit code {result.returncode}")
    logger.debug("`%s` completed in %s", command, cwd)
