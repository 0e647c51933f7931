import json
from pathlib import Path

import pytest

from rerunner.errors import ManifestError
from rerunner.manifest import read_manifest_version
from rerunner.project import ProjectRoot


def test_read_manifest_version(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"version": "1.2.3"}), encoding="utf-8")

    assert read_manifest_version(ProjectRoot(tmp_path)) == "1.2.3"


def test_read_manifest_version_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="failed to load package.json"):
        read_manifest_version(ProjectRoot(tmp_path))


def test_read_manifest_version_requires_string(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"version": 3}), encoding="utf-8")

    with pytest.raises(ManifestError, match="version missing"):
        read_manifest_version(ProjectRoot(tmp_path))
