import os
from pathlib import Path
from types import SimpleNamespace

from rerunner import probe


def test_is_process_running_true_when_pgrep_matches(monkeypatch) -> None:
    monkeypatch.setattr(probe, "_pgrep", lambda _name: SimpleNamespace(returncode=0, stdout="4242\n"))

    assert probe.is_process_running("My App") is True


def test_is_process_running_false_when_no_match(monkeypatch) -> None:
    monkeypatch.setattr(probe, "_pgrep", lambda _name: SimpleNamespace(returncode=1, stdout=""))

    assert probe.is_process_running("My App") is False


def test_is_process_running_false_when_pgrep_missing(monkeypatch) -> None:
    def fake_pgrep(_name: str):
        raise FileNotFoundError("pgrep")

    monkeypatch.setattr(probe, "_pgrep", fake_pgrep)

    assert probe.is_process_running("My App") is False


def test_is_application_installed(tmp_path: Path) -> None:
    assert probe.is_application_installed("My App", tmp_path) is False

    (tmp_path / "My App.app" / "Contents").mkdir(parents=True)

    assert probe.is_application_installed("My App", tmp_path) is True


def test_file_age_seconds_for_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "installer.dmg"
    target.write_bytes(b"dmg")
    os.utime(target, (1_000_000, 1_000_000))

    assert probe.file_age_seconds(target, now=1_003_600.9) == 3600


def test_file_age_seconds_none_when_missing(tmp_path: Path) -> None:
    assert probe.file_age_seconds(tmp_path / "missing.dmg") is None


def test_format_age_units() -> None:
    assert probe.format_age(0) == "0s"
    assert probe.format_age(59) == "59s"
    assert probe.format_age(60) == "1m"
    assert probe.format_age(3599) == "59m"
    assert probe.format_age(3600) == "1h"
    assert probe.format_age(86399) == "23h"
    assert probe.format_age(86400 * 3 + 5) == "3d"
