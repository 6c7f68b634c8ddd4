"""
haulbuild.core - Foundation layer for the haulbuild CLI.

Exports output styling, the colored logger, subprocess execution and timing helpers.
"""

from haulbuild.core.utils import (
    # Styling
    Style,
    style,
    # Logging
    Logger,
    # Runtime utilities
    CommandResult,
    CommandRunner,
    run_cmd,
    format_cmd,
)
from haulbuild.core.timing import (
    StepTimings,
    format_duration,
)

__all__ = [
    # Styling
    "Style",
    "style",
    # Logging
    "Logger",
    # Runtime utilities
    "CommandResult",
    "CommandRunner",
    "run_cmd",
    "format_cmd",
    # Timing
    "StepTimings",
    "format_duration",
]
