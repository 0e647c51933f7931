"""Start the installed application in place of rerunner."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import NoReturn

from rerunner.errors import LaunchError
from rerunner.probe import DEFAULT_APPLICATIONS_DIR, application_bundle_path

LOGGER = logging.getLogger(__name__)


def application_executable_path(bundle_path: Path, app_name: str) -> Path:
    return bundle_path / "Contents" / "MacOS" / app_name


def launch_application(
    app_name: str,
    *,
    applications_dir: Path = DEFAULT_APPLICATIONS_DIR,
) -> NoReturn:
    """Run the installed app attached to this terminal, then exit with its code.

    This never returns: rerunner ends when the application does. A child killed
    by a signal reports exit status 0.
    """
    bundle = application_bundle_path(app_name, applications_dir)
    if not bundle.is_dir():
        raise LaunchError(f"{app_name}.app not found in {applications_dir}")

    executable = application_executable_path(bundle, app_name)
    if not executable.is_file():
        raise LaunchError(f"Executable not found at {executable}")

    LOGGER.debug("Launching %s", executable)
    try:
        process = subprocess.run([str(executable)], check=False)
    except OSError as exc:
        raise LaunchError(f"Failed to start {executable}: {exc}") from exc
    raise SystemExit(max(process.returncode, 0))
