"""
haulbuild - Build orchestration CLI for the PickUpAndHaul mod.

Drives the dotnet toolchain to build IHoldMultipleThings and then
PickUpAndHaul, colorizing compiler output along the way.

Usage:
    python -m haulbuild [--configuration NAME] [--clean] [--verbose]

Options:
    --configuration  Build configuration (Debug, Release, ...)
    --clean          Clean every project before building
    --verbose        Detailed toolchain output and timing summary
    --dry-run        Print clean/build commands without running them
"""

from .cli import __version__, main

__all__ = ["__version__", "main"]
