"""
Main CLI for the haulbuild tool.

Builds IHoldMultipleThings and then PickUpAndHaul with the dotnet toolchain.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import Optional

from haulbuild.build.config import DEFAULT_CONFIGURATION, BuildConfig, ConfigError, load_workspace
from haulbuild.build.orchestrator import BuildOrchestrator
from haulbuild.build.toolchain import DotnetToolchain
from haulbuild.core.utils import Logger, run_cmd


# =============================================================================
# Version
# =============================================================================

__version__ = "0.1.0"


# =============================================================================
# Argument Parsing
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="haulbuild",
        description="Build IHoldMultipleThings and PickUpAndHaul in dependency order",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  haulbuild                        # Debug build of both projects
  haulbuild -c Release             # Release build
  haulbuild --clean --verbose      # Clean first, detailed toolchain output
  haulbuild --dry-run              # Show what would be run
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--configuration", "-c",
        default=DEFAULT_CONFIGURATION,
        help=f"Build configuration passed to the toolchain (default: {DEFAULT_CONFIGURATION})",
    )

    parser.add_argument(
        "--clean",
        action="store_true",
        help="Clean every project before building",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Request detailed toolchain output",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show clean/build commands without executing them",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root containing the project descriptors (default: current directory)",
    )

    parser.add_argument(
        "--config",
        help="Workspace config file (default: haulbuild.yaml in the root, if present)",
    )

    return parser


# =============================================================================
# Entry Point
# =============================================================================


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    log = Logger(stream=sys.stdout)
    if args.no_color:
        log.set_color(False)

    config = BuildConfig(
        configuration=args.configuration,
        clean=args.clean,
        verbose=args.verbose,
        dry_run=args.dry_run,
    )

    try:
        workspace = load_workspace(
            Path(args.root),
            Path(args.config) if args.config else None,
        )
        toolchain = DotnetToolchain(
            executable=workspace.toolchain,
            runner=run_cmd,
            cwd=workspace.root,
        )
        orchestrator = BuildOrchestrator(config, workspace, toolchain, log)
        return orchestrator.run()

    except ConfigError as e:
        log.error(str(e))
        return 1
    except KeyboardInterrupt:
        log.warning("Build interrupted")
        return 130
    except Exception as e:
        log.error(str(e))
        if args.verbose:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
