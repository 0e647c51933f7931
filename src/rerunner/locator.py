"""Installer artifact path derivation."""

from __future__ import annotations

from pathlib import Path

_EXTENSIONS = {
    "darwin": "dmg",
    "win32": "exe",
    "linux": "AppImage",
}
UNKNOWN_EXTENSION = "unknown"


def installer_extension(platform_name: str) -> str:
    """Map a `sys.platform` value to the installer file extension."""
    return _EXTENSIONS.get(platform_name, UNKNOWN_EXTENSION)


def arch_suffix(platform_name: str, machine: str) -> str:
    # Apple Silicon builds are published with a separate file name.
    if platform_name == "darwin" and machine == "arm64":
        return "-arm64"
    return ""


def installer_filename(app_name: str, version: str, platform_name: str, machine: str) -> str:
    suffix = arch_suffix(platform_name, machine)
    return f"{app_name}-{version}{suffix}.{installer_extension(platform_name)}"


def locate_installer(
    dist_dir: Path,
    app_name: str,
    version: str,
    platform_name: str,
    machine: str,
) -> Path:
    """Return where the build places the installer for this host.

    Pure function of its inputs; the returned path is not checked for existence.
    """
    return dist_dir / installer_filename(app_name, version, platform_name, machine)
