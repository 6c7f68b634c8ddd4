"""
Entry point for running haulbuild as a module: python -m haulbuild
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
