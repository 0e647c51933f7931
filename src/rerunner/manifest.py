"""Project manifest (`package.json`) access."""

from __future__ import annotations

import json
from typing import Any

from rerunner.errors import ManifestError
from rerunner.project import ProjectRoot


def read_manifest(project: ProjectRoot) -> dict[str, Any]:
    path = project.manifest_path
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"failed to load {path.name}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ManifestError(f"{path.name} must contain a JSON object")
    return payload


def read_manifest_version(project: ProjectRoot) -> str:
    """Return the version string declared in the project manifest."""
    version = read_manifest(project).get("version")
    if not isinstance(version, str) or not version.strip():
        raise ManifestError(f"version missing or empty in {project.manifest_path.name}")
    return version.strip()
