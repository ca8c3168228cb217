"""Logging setup for the elang command-line drivers."""
import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(level: str = "WARNING") -> None:
    """
    Install a stderr handler for the CLI and REPL.

    Library modules only create loggers; stdout is reserved for results.

    Args:
        level: Logging level name; unknown names fall back to WARNING
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("elang").debug("Logging initialized at %s level", logging.getLevelName(numeric_level))

def get_logger(name: str) -> logging.Logger:
    """Logger for an elang module, typically get_logger(__name__)."""
    return logging.getLogger(name)
