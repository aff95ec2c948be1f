"""Utility functions for reading class configuration sources.

A configuration is read either from a file or, when the source is ``-`` or
omitted, from standard input.
"""

import sys
from pathlib import Path
from typing import TextIO

from .errors import SourceReadError
from .logging_config import get_logger

logger = get_logger(__name__)

STDIN_SOURCE = "-"


def read_config_file(file_path: str | Path) -> tuple[str, str]:
    """Read a class configuration from a local file.

    Args:
        file_path: Path to the configuration file.

    Returns:
        Tuple of (source description, configuration text).

    Raises:
        SourceReadError: If the file does not exist, cannot be read or is
            not valid UTF-8.
    """
    file_path = Path(file_path)
    logger.debug("reading configuration from file: %s", file_path)

    if not file_path.exists():
        raise SourceReadError(f"File not found: {file_path}", str(file_path))

    if file_path.is_dir():
        raise SourceReadError(f"Not a file: {file_path}", str(file_path))

    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SourceReadError(
            f"Configuration file {file_path} is not valid UTF-8: {e}", str(file_path)
        ) from e
    except OSError as e:
        raise SourceReadError(f"Error reading file {file_path}: {e}", str(file_path)) from e

    logger.info("read %d characters from %s", len(text), file_path)
    return str(file_path), text


def read_config_stream(stream: TextIO, name: str = "<stdin>") -> tuple[str, str]:
    """Read a class configuration from an open text stream."""
    try:
        text = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Error reading {name}: {e}", name) from e

    logger.info("read %d characters from %s", len(text), name)
    return name, text


def read_config(source: str | Path | None = None) -> tuple[str, str]:
    """Read a class configuration from a file, or from stdin for ``-``/None.

    Returns:
        Tuple of (source description, configuration text).

    Raises:
        SourceReadError: If reading fails.
    """
    if source is None or str(source) == STDIN_SOURCE:
        return read_config_stream(sys.stdin)
    return read_config_file(source)
