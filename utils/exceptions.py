"""
Custom Exceptions
Noticeboard pipeline error taxonomy
"""
from typing import Optional


class NoticeboardError(Exception):
    """Base class for every pipeline error"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(NoticeboardError):
    """Invalid or missing configuration"""
    pass


class FetchError(NoticeboardError):
    """HTTP fetch failed (bad status or transport error)"""

    def __init__(self, message: str, url: str = None, status: Optional[int] = None, **kwargs):
        super().__init__(message, kwargs)
        self.url = url
        self.status = status


class FetchTimeoutError(FetchError, TimeoutError):
    """No response within the configured timeout"""
    pass


class ChallengeDetected(FetchError):
    """The site answered with an anti-automation interstitial"""

    def __init__(self, message: str, url: str = None, artifact_path: str = None, **kwargs):
        super().__init__(message, url=url, **kwargs)
        self.artifact_path = artifact_path


class ParseAnomaly(NoticeboardError):
    """A selector matched nothing where a fallback exists"""

    def __init__(self, message: str, strategy: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.strategy = strategy


class SectionFailure(NoticeboardError):
    """A whole section could not be scraped"""

    def __init__(self, message: str, section: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.section = section


class RunFailure(NoticeboardError):
    """An error escaped the orchestrator"""
    pass


class StorageError(NoticeboardError):
    """Snapshot read/write failure"""
    pass
