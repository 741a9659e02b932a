"""Logging setup shared by the library and the command-line runner.

Library modules only ever do::

    from csvframe.logging import get_logger
    logger = get_logger(__name__)

and the runner calls :func:`configure_logging` once at start-up.
"""
import logging
import sys

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT, stream=None):
    """Install a single stream handler on the root logger.

    Calling it again only changes the level.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
