"""Point-in-time host state queries.

Nothing in this module has side effects or raises for an absent process,
bundle or file: absence is an ordinary answer.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_APPLICATIONS_DIR = Path("/Applications")


def application_bundle_path(app_name: str, applications_dir: Path = DEFAULT_APPLICATIONS_DIR) -> Path:
    return applications_dir / f"{app_name}.app"


def _pgrep(pattern: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(["pgrep", "-f", pattern], text=True, capture_output=True, check=False)


def is_process_running(app_name: str) -> bool:
    """Return whether any process command line matches *app_name*."""
    try:
        result = _pgrep(app_name)
    except OSError as exc:
        LOGGER.debug("pgrep unavailable: %s", exc)
        return False
    return result.returncode == 0 and bool(result.stdout.strip())


def is_application_installed(
    app_name: str,
    applications_dir: Path = DEFAULT_APPLICATIONS_DIR,
) -> bool:
    bundle = application_bundle_path(app_name, applications_dir)
    try:
        return bundle.exists() and os.access(bundle, os.R_OK)
    except OSError:
        return False


def file_age_seconds(path: Path, *, now: float | None = None) -> int | None:
    """Return whole seconds since *path* was modified, or None when unreadable."""
    try:
        modified_at = path.stat().st_mtime
    except OSError:
        return None
    current = time.time() if now is None else now
    return int(current - modified_at)


def format_age(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"
