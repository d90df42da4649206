"""
Logger Configuration
Shared logging setup
"""
import logging

from rich.logging import RichHandler
from rich.console import Console


# Global console instance
console = Console()

LOG_FORMAT_SIMPLE = "%(message)s"

# Every package logs through module loggers named after ``__name__``
PACKAGE_LOGGERS = ("config", "scrapers", "processing", "storage", "orchestrator", "webapp", "__main__")


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Attach a Rich console handler to one logger.

    Repeated calls only update the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    logger.addHandler(handler)
    return logger


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the logger of every package in the project."""
    for name in PACKAGE_LOGGERS:
        setup_logger(name, level=level)
