"""Termination of the running target application."""

from __future__ import annotations

import logging
import subprocess
import time

LOGGER = logging.getLogger(__name__)

TERMINATION_GRACE_SECONDS = 2.0


def _pkill(pattern: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(["pkill", "-f", pattern], text=True, capture_output=True, check=False)


def terminate_application(app_name: str, *, grace_seconds: float = TERMINATION_GRACE_SECONDS) -> None:
    """Signal every process matching *app_name* and wait for them to exit.

    Finding nothing to signal is not an error. The grace period always elapses
    so callers see the same timing whether or not a process was killed.
    """
    try:
        result = _pkill(app_name)
    except OSError as exc:
        LOGGER.warning("Could not run pkill: %s", exc)
    else:
        if result.returncode == 0:
            LOGGER.debug("Sent SIGTERM to processes matching %r", app_name)
        else:
            LOGGER.debug("No process matched %r (pkill exit=%s)", app_name, result.returncode)
    time.sleep(max(grace_seconds, 0.0))
