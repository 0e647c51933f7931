"""Interactive confirmation screen shown before the reinstall runs."""

from __future__ import annotations

import logging
import os
import re
import select
import shutil
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum, StrEnum

from rerunner.probe import format_age
from rerunner.terminal import stdout_supports_ansi, style
from rerunner.workflow import WorkflowState

LOGGER = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "Q", "\x03"})
BUILD_KEYS = frozenset({"b", "B"})
RUN_KEYS = frozenset({"r", "R"})
CONFIRM_KEYS = frozenset({"\r", "\n"})

_ENTER_ALT_SCREEN = "\x1b[?1049h"
_LEAVE_ALT_SCREEN = "\x1b[?1049l"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[H\x1b[2J"
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")
_ESCAPE_TIMEOUT_SECONDS = 0.05


class GateAction(StrEnum):
    """Outcome of the confirmation screen."""

    QUIT = "quit"
    PROCEED = "proceed"


class KeyResult(Enum):
    IGNORED = "ignored"
    REDRAW = "redraw"
    QUIT = "quit"
    PROCEED = "proceed"


def _checkbox(checked: bool, *, color: bool) -> str:
    if checked:
        return style("[✓]", "green", enabled=color)
    return "[ ]"


def _key(label: str, *, color: bool) -> str:
    return style(label, "cyan", enabled=color)


def render_status(state: WorkflowState, *, color: bool = False) -> str:
    """Render the full status view for *state*."""
    lines = [
        f"App: {state.app_name}",
        f"Installer: {state.installer_path.name}",
        "",
    ]

    if state.build_required:
        lines.append(
            style("[✓] [B]uild the app (required - no installer found)", "dim", enabled=color)
        )
    else:
        age = ""
        if state.installer_age_seconds is not None:
            age = " " + style(f"({format_age(state.installer_age_seconds)} old)", "dim", enabled=color)
        lines.append(f"{_checkbox(state.rebuild_selected, color=color)} [B]uild the app{age}")

    lines.append(f"{_checkbox(state.launch_after_install_selected, color=color)} [R]un the app")
    lines.append("")

    if state.app_installed:
        lines.append(style("APP WILL BE OVERWRITTEN", "yellow", enabled=color))
    else:
        lines.append("App not currently installed")
    if state.app_running:
        lines.append(style("APP WILL BE KILLED", "red", enabled=color))
    else:
        lines.append("App not currently running")

    lines.extend(
        [
            "",
            f"Press {_key('[Q]', color=color)} to quit, {_key('[Enter]', color=color)} to proceed",
            f"Press {_key('[B]', color=color)} to toggle build, {_key('[R]', color=color)} to toggle run",
        ]
    )
    return "\n".join(lines)


def _frame(body: str, *, width: int, color: bool) -> str:
    inner = max(width - 4, 20)
    top = style("┌" + "─" * inner + "┐", "cyan", enabled=color)
    bottom = style("└" + "─" * inner + "┘", "cyan", enabled=color)
    side = style("│", "cyan", enabled=color)
    rows = []
    for line in body.splitlines():
        padding = " " * max(inner - 2 - _visible_width(line), 0)
        rows.append(f"  {side} {line}{padding} {side}")
    return "\n".join(["", f"  {top}", *rows, f"  {bottom}", ""])


def _visible_width(text: str) -> int:
    return len(_ANSI_ESCAPE.sub("", text))


def decode_key(read_char: Callable[[], str], pending: Callable[[], bool]) -> str:
    """Read one key press, keeping escape sequences together.

    Arrow and function keys arrive as ``ESC [ ... final`` or ``ESC O x``;
    those bytes are returned as one string so none of them is taken for a
    bound key. A lone ``ESC`` with nothing pending is returned as is.
    """
    key = read_char()
    if key != "\x1b" or not pending():
        return key

    sequence = key + read_char()
    if sequence.endswith("["):
        while pending():
            char = read_char()
            sequence += char
            # CSI final byte
            if not char or "\x40" <= char <= "\x7e":
                break
    elif sequence.endswith("O") and pending():
        sequence += read_char()
    return sequence


def handle_key(state: WorkflowState, key: str) -> KeyResult:
    """Apply one key press to *state*."""
    if key in QUIT_KEYS:
        return KeyResult.QUIT
    if key in CONFIRM_KEYS:
        return KeyResult.PROCEED
    if key in BUILD_KEYS:
        return KeyResult.REDRAW if state.toggle_build() else KeyResult.IGNORED
    if key in RUN_KEYS:
        state.toggle_launch()
        return KeyResult.REDRAW
    return KeyResult.IGNORED


def gate_loop(
    state: WorkflowState,
    read_key: Callable[[], str],
    draw: Callable[[WorkflowState], None],
) -> GateAction:
    """Draw, then process keys until the user quits or confirms.

    End of input counts as quitting.
    """
    draw(state)
    while True:
        try:
            key = read_key()
        except KeyboardInterrupt:
            return GateAction.QUIT
        if key == "":
            return GateAction.QUIT

        result = handle_key(state, key)
        if result is KeyResult.QUIT:
            return GateAction.QUIT
        if result is KeyResult.PROCEED:
            return GateAction.PROCEED
        if result is KeyResult.REDRAW:
            draw(state)


@contextmanager
def terminal_session() -> Iterator[Callable[[], str]]:
    """Switch the terminal to single-key input on an alternate screen.

    Yields a function reading one key press. Terminal modes and the cursor
    are restored on exit, including when the block raises.
    """
    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)

    def read_char() -> str:
        return os.read(fd, 1).decode("utf-8", errors="replace")

    def pending() -> bool:
        ready, _, _ = select.select([fd], [], [], _ESCAPE_TIMEOUT_SECONDS)
        return bool(ready)

    sys.stdout.write(_ENTER_ALT_SCREEN + _HIDE_CURSOR)
    sys.stdout.flush()
    try:
        tty.setcbreak(fd)
        yield lambda: decode_key(read_char, pending)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        sys.stdout.write(_SHOW_CURSOR + _LEAVE_ALT_SCREEN)
        sys.stdout.flush()


def _draw_to_stdout(state: WorkflowState) -> None:
    color = stdout_supports_ansi()
    width = int(shutil.get_terminal_size().columns * 0.9)
    sys.stdout.write(_CLEAR_SCREEN + _frame(render_status(state, color=color), width=width, color=color))
    sys.stdout.flush()


def run_gate(state: WorkflowState) -> GateAction:
    """Show the confirmation screen on the controlling terminal."""
    with terminal_session() as read_key:
        action = gate_loop(state, read_key, _draw_to_stdout)
    LOGGER.debug(
        "Gate closed: action=%s rebuild=%s launch=%s",
        action,
        state.rebuild_selected,
        state.launch_after_install_selected,
    )
    return action
