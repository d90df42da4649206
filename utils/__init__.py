"""
Utils Module
Shared helpers
"""
from .logger import setup_logger, setup_logging
from .exceptions import (
    NoticeboardError,
    ConfigurationError,
    FetchError,
    FetchTimeoutError,
    ChallengeDetected,
    ParseAnomaly,
    SectionFailure,
    RunFailure,
    StorageError,
)

__all__ = [
    "setup_logger",
    "setup_logging",
    "NoticeboardError",
    "ConfigurationError",
    "FetchError",
    "FetchTimeoutError",
    "ChallengeDetected",
    "ParseAnomaly",
    "SectionFailure",
    "RunFailure",
    "StorageError",
]
