"""Wall-clock timing of build steps."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


class StepTimings:
    """Records how long each named step of a run took, in execution order.

    Usage:
        timings = StepTimings()
        with timings.measure("build:PickUpAndHaul"):
            run_build()
        timings["build:PickUpAndHaul"]  # -> 4.213
    """

    def __init__(self) -> None:
        self._steps: dict[str, float] = {}

    @contextmanager
    def measure(self, step: str) -> Iterator[None]:
        start = time.monotonic()
        try:
            yield
        finally:
            self._steps[step] = round(time.monotonic() - start, 3)

    def __getitem__(self, step: str) -> float:
        return self._steps[step]

    def __contains__(self, step: object) -> bool:
        return step in self._steps

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def total(self) -> float:
        return sum(self._steps.values())

    def summary(self) -> str:
        """One-line summary, e.g. ``clean: 0.8s | build:Core: 4.1s | total: 4.9s``."""
        if not self._steps:
            return "(no timing data)"
        parts = [f"{step}: {format_duration(seconds)}" for step, seconds in self._steps.items()]
        parts.append(f"total: {format_duration(self.total)}")
        return " | ".join(parts)


def format_duration(seconds: float) -> str:
    """Format seconds as human-readable duration.

    Examples:
        0.5 -> "0.5s"
        65.3 -> "1m 5.3s"
    """
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, remaining = divmod(seconds, 60)
    if minutes < 60:
        return f"{int(minutes)}m {remaining:.1f}s"

    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}h {minutes}m {remaining:.1f}s"
