"""Console-script entry point for ``treebuild``."""

import sys

from .cli import run


def main() -> None:
    """Run the command line interface and exit with its status."""
    sys.exit(run())


if __name__ == "__main__":
    main()
