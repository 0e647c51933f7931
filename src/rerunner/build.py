"""External build command invocation."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from rerunner.errors import BuildError

LOGGER = logging.getLogger(__name__)


def format_command(command: Sequence[str]) -> str:
    return shlex.join(command)


def run_build(command: Sequence[str], *, cwd: Path) -> None:
    """Run *command* in *cwd* with output streamed to this terminal."""
    LOGGER.debug("Running build command in %s: %s", cwd, format_command(command))
    try:
        process = subprocess.run(list(command), cwd=cwd, check=False)
    except FileNotFoundError as exc:
        raise BuildError(f"Required command is missing: {command[0]}") from exc
    except OSError as exc:
        raise BuildError(f"Failed to run {format_command(command)}: {exc}") from exc
    if process.returncode != 0:
        raise BuildError(f"{format_command(command)} failed with code {process.returncode}")
