"""
Shared utilities for the haulbuild CLI.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence, TextIO


# =============================================================================
# Styling
# =============================================================================


class Style(Enum):
    """Output categories, each mapped to a terminal color."""

    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"
    FAILURE = "failure"
    RESTORE_DONE = "restore_done"
    RESTORE_START = "restore_start"
    VERSION = "version"
    HEADER = "header"
    BOLD = "bold"
    DIM = "dim"
    PLAIN = "plain"


COLORS = {
    "reset": "\033[0m",
    "red": "\033[91m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "blue": "\033[94m",
    "magenta": "\033[95m",
    "cyan": "\033[96m",
    "bold": "\033[1m",
    "dim": "\033[2m",
}

STYLE_CODES: dict[Style, str] = {
    Style.ERROR: COLORS["red"],
    Style.WARNING: COLORS["yellow"],
    Style.SUCCESS: COLORS["green"],
    Style.FAILURE: COLORS["bold"] + COLORS["red"],
    Style.RESTORE_DONE: COLORS["blue"],
    Style.RESTORE_START: COLORS["cyan"],
    Style.VERSION: COLORS["magenta"],
    Style.HEADER: COLORS["cyan"],
    Style.BOLD: COLORS["bold"],
    Style.DIM: COLORS["dim"],
    Style.PLAIN: "",
}


def style(message: str, category: Style, use_color: bool = True) -> str:
    """Wrap a message in the ANSI codes for its category."""
    code = STYLE_CODES.get(category, "")
    if not use_color or not code:
        return message
    return f"{code}{message}{COLORS['reset']}"


# =============================================================================
# Logging
# =============================================================================


class Logger:
    """Simple colored logger with --no-color support.

    Writes to an explicit stream so callers (and tests) decide where output goes.
    """

    def __init__(self, stream: Optional[TextIO] = None, use_color: Optional[bool] = None):
        self._stream = stream if stream is not None else sys.stdout
        if use_color is None:
            isatty = getattr(self._stream, "isatty", None)
            self._use_color = bool(isatty and isatty())
        else:
            self._use_color = use_color

    @property
    def use_color(self) -> bool:
        return self._use_color

    def set_color(self, use_color: bool) -> None:
        """Set whether to use color output."""
        self._use_color = use_color

    def _color(self, text: str, category: Style) -> str:
        return style(text, category, self._use_color)

    def _write(self, text: str) -> None:
        print(text, file=self._stream)

    def header(self, message: str) -> None:
        """Print a section header."""
        marker = self._color("===", Style.HEADER)
        self._write(f"\n{marker} {self._color(message, Style.BOLD)} {marker}")

    def info(self, message: str) -> None:
        """Print an info message."""
        self._write(f"  {message}")

    def success(self, message: str) -> None:
        """Print a success message."""
        self._write(f"  {self._color('[OK]', Style.SUCCESS)} {message}")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._write(f"  {self._color('[WARN]', Style.WARNING)} {message}")

    def error(self, message: str) -> None:
        """Print an error message."""
        self._write(f"  {self._color('[ERROR]', Style.ERROR)} {message}")

    def dim(self, message: str) -> None:
        """Print a dim/secondary message."""
        self._write(f"  {self._color(message, Style.DIM)}")

    def line(self, text: str) -> None:
        """Print pre-rendered toolchain output as-is, indented."""
        self._write(f"    {text}")

    def banner(self, message: str, category: Style = Style.SUCCESS) -> None:
        """Print a full-width closing banner."""
        rule = "=" * max(len(message) + 4, 40)
        self._write("")
        self._write(self._color(rule, category))
        self._write(self._color(f"  {message}", category))
        self._write(self._color(rule, category))

    def table_row(self, col1: str, col2: str, col1_width: int = 30) -> None:
        """Print a table row with two columns."""
        self._write(f"  {col1:<{col1_width}} {col2}")


# =============================================================================
# Runtime Utilities
# =============================================================================


@dataclass(frozen=True)
class CommandResult:
    """Result of a subprocess invocation."""

    cmd: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """All of stdout, then all of stderr.

        The streams are captured separately, so stderr lines are not
        interleaved with the stdout lines they were emitted between.
        """
        if self.stdout and self.stderr:
            return self.stdout.rstrip("\n") + "\n" + self.stderr
        return self.stdout or self.stderr


CommandRunner = Callable[[Sequence[str], Optional[Path]], CommandResult]

# Anything a runner may raise when a command cannot be started or read.
INVOCATION_ERRORS: tuple[type[Exception], ...] = (
    OSError,
    subprocess.SubprocessError,
    ValueError,
)


def run_cmd(cmd: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
    """Run a command to completion and capture its output.

    Never raises on a non-zero exit. Output is decoded as UTF-8 with
    undecodable bytes replaced. Launch failures (missing executable,
    permission denied) propagate as OSError.
    """
    completed = subprocess.run(
        list(cmd),
        cwd=cwd,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    return CommandResult(
        cmd=tuple(cmd),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


def format_cmd(cmd: Sequence[str]) -> str:
    """Render a command line for display."""
    return " ".join(str(part) for part in cmd)
