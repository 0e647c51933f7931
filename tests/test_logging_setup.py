import io
import logging

from rerunner.logging_setup import configure_logging, supports_ansi


class _TtyStream(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_configure_logging_writes_plain_text_to_non_tty() -> None:
    stream = io.StringIO()
    configure_logging("warning", stream=stream)

    logging.getLogger("rerunner.test").warning("disk busy")

    assert "WARNING [rerunner.test] disk busy" in stream.getvalue()
    assert "\x1b[" not in stream.getvalue()
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_colors_errors_on_tty(monkeypatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")
    stream = _TtyStream()
    configure_logging("INFO", stream=stream)

    logging.getLogger("rerunner.test").error("boom")

    assert stream.getvalue().startswith("\x1b[31m")


def test_configure_logging_prints_info_as_bare_message() -> None:
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream)

    logging.getLogger("rerunner.installer").info("Mount point: %s", "/Volumes/My App")
    logging.getLogger("rerunner.installer").debug("hdiutil output: done")

    lines = stream.getvalue().splitlines()
    assert lines[0] == "Mount point: /Volumes/My App"
    assert "DEBUG [rerunner.installer] hdiutil output: done" in lines[1]


def test_supports_ansi_respects_no_color(monkeypatch) -> None:
    monkeypatch.setenv("TERM", "xterm")
    monkeypatch.setenv("NO_COLOR", "1")

    assert supports_ansi(_TtyStream()) is False
