"""Logging helpers for rerunner."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

_ANSI_RED = "\x1b[31m"
_ANSI_YELLOW = "\x1b[33m"
_ANSI_RESET = "\x1b[0m"

_LEVEL_COLORS = {
    logging.WARNING: _ANSI_YELLOW,
    logging.ERROR: _ANSI_RED,
    logging.CRITICAL: _ANSI_RED,
}


def supports_ansi(stream: object) -> bool:
    isatty = getattr(stream, "isatty", None)
    if not callable(isatty) or not isatty():
        return False
    if os.environ.get("NO_COLOR") is not None:
        return False
    term = str(os.environ.get("TERM", "")).strip().lower()
    if term in {"", "dumb"}:
        return False
    return True


class _LevelColorFormatter(logging.Formatter):
    """Full format for debug output and problems; INFO reads as progress text."""

    def __init__(self, fmt: str, *, use_color: bool, info_fmt: str = "%(message)s") -> None:
        super().__init__(fmt)
        self._use_color = use_color
        self._info_formatter = logging.Formatter(info_fmt)

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return self._info_formatter.format(record)
        rendered = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno)
        if self._use_color and color is not None:
            return f"{color}{rendered}{_ANSI_RESET}"
        return rendered


def configure_logging(level: str, *, stream: TextIO | None = None) -> None:
    """Configure process logging, replacing any handler installed earlier."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        _LevelColorFormatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            use_color=supports_ansi(handler.stream),
        )
    )
    root.addHandler(handler)
