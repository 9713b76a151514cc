# src/combinator/utils/log.py
import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "combinator"


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configures the `combinator` logger to render on stderr through rich.
    stdout is reserved for the combined text or the temp file path.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
        rich_tracebacks=debug,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
    return logger
