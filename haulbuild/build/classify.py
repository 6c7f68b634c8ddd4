"""
Toolchain output classification.

Maps each line of build output to a category so it can be recolored.
Classification is purely cosmetic: build success is decided by exit code alone.
"""

from __future__ import annotations

import re
from enum import Enum

from haulbuild.core.utils import Style, style


class LineCategory(Enum):
    ERROR = "error"
    WARNING = "warning"
    BUILD_SUCCEEDED = "build_succeeded"
    BUILD_FAILED = "build_failed"
    RESTORE_COMPLETE = "restore_complete"
    RESTORE_START = "restore_start"
    VERSION = "version"
    OTHER = "other"


# Checked in order; the first match wins.
LINE_PATTERNS: list[tuple[LineCategory, re.Pattern[str]]] = [
    (LineCategory.ERROR, re.compile(r"\berror\s+[A-Z]+\d+\s*:")),
    (LineCategory.WARNING, re.compile(r"\bwarning\s+[A-Z]+\d+\s*:")),
    (LineCategory.BUILD_SUCCEEDED, re.compile(r"\bBuild succeeded\b")),
    (LineCategory.BUILD_FAILED, re.compile(r"\bBuild FAILED\b")),
    (
        LineCategory.RESTORE_COMPLETE,
        re.compile(r"^\s*Restored\s|All projects are up-to-date for restore"),
    ),
    (LineCategory.RESTORE_START, re.compile(r"Determining projects to restore")),
    (
        LineCategory.VERSION,
        re.compile(
            r"\.NET (?:SDK|Runtime)|Microsoft\.(?:NETCore|AspNetCore|WindowsDesktop)\.App"
            r"|\bnet(?:\d+\.\d+|4\d{1,2})\b|\bVersion:\s*\d+\.\d+"
        ),
    ),
]

CATEGORY_STYLES: dict[LineCategory, Style] = {
    LineCategory.ERROR: Style.ERROR,
    LineCategory.WARNING: Style.WARNING,
    LineCategory.BUILD_SUCCEEDED: Style.SUCCESS,
    LineCategory.BUILD_FAILED: Style.FAILURE,
    LineCategory.RESTORE_COMPLETE: Style.RESTORE_DONE,
    LineCategory.RESTORE_START: Style.RESTORE_START,
    LineCategory.VERSION: Style.VERSION,
    LineCategory.OTHER: Style.PLAIN,
}


def classify_line(line: str) -> LineCategory:
    """Return the category of a single line of toolchain output."""
    for category, pattern in LINE_PATTERNS:
        if pattern.search(line):
            return category
    return LineCategory.OTHER


def render_line(line: str, use_color: bool = True) -> str:
    """Classify a line and color it accordingly. Unmatched lines pass through."""
    return style(line, CATEGORY_STYLES[classify_line(line)], use_color)
