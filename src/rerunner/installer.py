"""Install an application bundle from a disk image."""

from __future__ import annotations

import logging
import plistlib
import shutil
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from xml.parsers.expat import ExpatError

from rerunner.errors import InstallError, MountError
from rerunner.probe import DEFAULT_APPLICATIONS_DIR, application_bundle_path

LOGGER = logging.getLogger(__name__)

_VOLUMES_PREFIX = "/Volumes/"
_DEVICE_PREFIX = "/dev/"


def _hdiutil(*args: str) -> subprocess.CompletedProcess[bytes]:
    return subprocess.run(["hdiutil", *args], capture_output=True, check=False)


def _mount_point_from_plist(payload: object) -> Path:
    entities = payload.get("system-entities") if isinstance(payload, dict) else None
    if not isinstance(entities, list):
        raise MountError("hdiutil output has no system-entities list")
    for entity in entities:
        if not isinstance(entity, dict):
            continue
        mount_point = entity.get("mount-point")
        if isinstance(mount_point, str) and mount_point.strip():
            return Path(mount_point.strip())
    raise MountError("Failed to find mount point in hdiutil output")


def _mount_point_from_text(text: str) -> Path:
    for line in text.splitlines():
        index = line.find(_VOLUMES_PREFIX)
        if index == -1:
            continue
        candidate = line[index:].strip()
        if len(candidate) > len(_VOLUMES_PREFIX):
            return Path(candidate)
    raise MountError("Failed to find mount point in hdiutil output")


def _load_plist(output: bytes) -> object | None:
    start = output.find(b"<?xml")
    if start == -1:
        start = output.find(b"<plist")
    if start == -1:
        return None
    try:
        return plistlib.loads(output[start:])
    except (plistlib.InvalidFileException, ValueError, ExpatError) as exc:
        raise MountError(f"Could not parse hdiutil plist output: {exc}") from exc


def parse_attach_output(output: bytes) -> Path:
    """Return the mount point reported by `hdiutil attach`.

    Accepts the property list written by `hdiutil attach -plist`, which may be
    preceded by progress lines, and takes the first system entity carrying a
    ``mount-point``. Output without a plist is read as the tab-separated table
    of plain `hdiutil attach`, where the mount point is the ``/Volumes/...``
    tail of a line; volume names may contain spaces.

    Raises MountError when no mount point can be found.
    """
    payload = _load_plist(output)
    if payload is not None:
        return _mount_point_from_plist(payload)
    return _mount_point_from_text(output.decode("utf-8", errors="replace"))


def parse_attached_device(output: bytes) -> str | None:
    """Return the first device node in `hdiutil attach` output, if any."""
    try:
        payload = _load_plist(output)
    except MountError:
        return None

    if payload is None:
        for line in output.decode("utf-8", errors="replace").splitlines():
            fields = line.split()
            if fields and fields[0].startswith(_DEVICE_PREFIX):
                return fields[0]
        return None

    entities = payload.get("system-entities") if isinstance(payload, dict) else None
    for entity in entities if isinstance(entities, list) else []:
        if isinstance(entity, dict):
            device = entity.get("dev-entry")
            if isinstance(device, str) and device.startswith(_DEVICE_PREFIX):
                return device
    return None


def attach_disk_image(image_path: Path) -> Path:
    """Attach *image_path* and return its mount point.

    An image that attaches without a readable mount point is detached by
    device node before the MountError propagates.
    """
    LOGGER.info("Mounting disk image: %s", image_path)
    try:
        result = _hdiutil("attach", "-plist", str(image_path))
    except OSError as exc:
        raise MountError(f"Failed to run hdiutil: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.decode("utf-8", errors="replace").strip()
        raise MountError(f"hdiutil attach failed (exit={result.returncode}): {detail}")
    LOGGER.debug("hdiutil output: %s", result.stdout.decode("utf-8", errors="replace"))

    try:
        mount_point = parse_attach_output(result.stdout)
    except MountError:
        device = parse_attached_device(result.stdout)
        if device is None:
            LOGGER.error("Could not find a device to detach for %s", image_path)
        else:
            _detach_quietly(device)
        raise
    LOGGER.info("Mount point: %s", mount_point)
    return mount_point


def detach_disk_image(target: Path | str) -> None:
    """Detach the image mounted at *target*, a mount point or device node."""
    LOGGER.info("Unmounting disk image...")
    try:
        result = _hdiutil("detach", str(target))
    except OSError as exc:
        raise MountError(f"Failed to run hdiutil: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.decode("utf-8", errors="replace").strip()
        raise MountError(f"hdiutil detach {target} failed (exit={result.returncode}): {detail}")


def _detach_quietly(target: Path | str) -> None:
    try:
        detach_disk_image(target)
    except MountError as exc:
        LOGGER.error("%s", exc)


@contextmanager
def mounted_disk_image(image_path: Path) -> Iterator[Path]:
    """Attach *image_path* for the duration of the block.

    The image is detached on every exit path. If the block raised, a detach
    failure is logged and the block's error propagates.
    """
    mount_point = attach_disk_image(image_path)
    try:
        yield mount_point
    except BaseException:
        _detach_quietly(mount_point)
        raise
    detach_disk_image(mount_point)


def _remove_installed_bundle(bundle: Path) -> None:
    if bundle.is_symlink() or bundle.is_file():
        bundle.unlink()
    elif bundle.is_dir():
        shutil.rmtree(bundle)
    else:
        return
    LOGGER.info("Removed existing app")


def install_from_disk_image(
    image_path: Path,
    app_name: str,
    *,
    applications_dir: Path = DEFAULT_APPLICATIONS_DIR,
) -> Path:
    """Replace the installed bundle of *app_name* with the one in *image_path*.

    Returns the installed bundle path. The copy is not transactional: an
    interrupted copy leaves the installed bundle incomplete.
    """
    if not image_path.exists():
        raise InstallError(f"Disk image not found: {image_path}")

    installed_bundle = application_bundle_path(app_name, applications_dir)
    with mounted_disk_image(image_path) as mount_point:
        source_bundle = mount_point / f"{app_name}.app"
        LOGGER.debug("Looking for app at: %s", source_bundle)
        if not source_bundle.is_dir():
            raise InstallError(f"App not found in disk image: {source_bundle}")

        try:
            _remove_installed_bundle(installed_bundle)
        except OSError as exc:
            raise InstallError(f"Failed to remove {installed_bundle}: {exc}") from exc

        LOGGER.info("Copying app to %s...", applications_dir)
        try:
            shutil.copytree(source_bundle, installed_bundle, symlinks=True)
        except (shutil.Error, OSError) as exc:
            raise InstallError(f"Failed to copy {source_bundle} to {applications_dir}: {exc}") from exc
    return installed_bundle
