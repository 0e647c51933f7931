from pathlib import Path
from types import SimpleNamespace

import pytest

from rerunner import launcher
from rerunner.errors import LaunchError


def _install(applications_dir: Path, name: str) -> Path:
    executable = applications_dir / f"{name}.app" / "Contents" / "MacOS" / name
    executable.parent.mkdir(parents=True)
    executable.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    executable.chmod(0o755)
    return executable


def test_launch_application_exits_with_child_code(monkeypatch, tmp_path: Path) -> None:
    executable = _install(tmp_path, "My App")
    commands: list[list[str]] = []

    def fake_run(command, **_kwargs):
        commands.append(command)
        return SimpleNamespace(returncode=3)

    monkeypatch.setattr(launcher.subprocess, "run", fake_run)

    with pytest.raises(SystemExit) as excinfo:
        launcher.launch_application("My App", applications_dir=tmp_path)

    assert excinfo.value.code == 3
    assert commands == [[str(executable)]]


def test_launch_application_signal_exit_maps_to_zero(monkeypatch, tmp_path: Path) -> None:
    _install(tmp_path, "My App")
    monkeypatch.setattr(launcher.subprocess, "run", lambda *_args, **_kwargs: SimpleNamespace(returncode=-15))

    with pytest.raises(SystemExit) as excinfo:
        launcher.launch_application("My App", applications_dir=tmp_path)

    assert excinfo.value.code == 0


def test_launch_application_requires_bundle(tmp_path: Path) -> None:
    with pytest.raises(LaunchError, match="My App.app not found"):
        launcher.launch_application("My App", applications_dir=tmp_path)


def test_launch_application_requires_executable(tmp_path: Path) -> None:
    (tmp_path / "My App.app" / "Contents").mkdir(parents=True)

    with pytest.raises(LaunchError, match="Executable not found at"):
        launcher.launch_application("My App", applications_dir=tmp_path)
