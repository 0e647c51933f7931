"""ANSI styling helpers for user-facing output."""

from __future__ import annotations

import sys

from rerunner.logging_setup import supports_ansi

_ANSI_RESET = "\x1b[0m"
_STYLES = {
    "dim": "\x1b[2m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "cyan": "\x1b[36m",
}


def stdout_supports_ansi() -> bool:
    return supports_ansi(sys.stdout)


def style(text: str, name: str, *, enabled: bool | None = None) -> str:
    if enabled is None:
        enabled = stdout_supports_ansi()
    if not enabled:
        return text
    return f"{_STYLES[name]}{text}{_ANSI_RESET}"


def green(text: str) -> str:
    return style(text, "green")
