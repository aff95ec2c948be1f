"""Logging setup shared by all tree_builder modules.

Modules obtain their logger with ``get_logger(__name__)``; the command line
front end calls ``setup_logging`` once to attach a rich console handler.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "tree_builder"

_handler: logging.Handler | None = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger placed under the ``tree_builder`` hierarchy.

    Args:
        name: Usually the calling module's ``__name__``.

    Returns:
        A standard library logger.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def verbosity_to_level(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    level: int = logging.WARNING,
    use_rich: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Calling this more than once replaces the previously installed handler
    instead of adding a second one.

    Args:
        level: Logging level for the package logger.
        use_rich: Use a ``RichHandler`` (otherwise a plain stream handler).
        console: Console the rich handler writes to (stderr by default).

    Returns:
        The configured package logger.
    """
    global _handler

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )

    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    _handler = handler
    return logger
