"""
CLI entry point.

Usage:
    python -m hsize 1536
    python -m hsize --help
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
