"""Module entry point for running with python -m learnpath."""

import sys

from learnpath.cli import main

if __name__ == "__main__":
    sys.exit(main())
