"""Exception types raised by the crawler components.

Network, parsing and storage failures each get their own class so the
orchestrator and workers can log them with context and skip the affected
page or document without stopping the run.
"""

from typing import Optional


class CrawlerError(RuntimeError):
    """Base exception for crawl failures."""


class ConfigError(CrawlerError):
    """Raised when startup configuration is missing or unreadable."""


class TransportError(CrawlerError):
    """Raised when a resource cannot be retrieved."""

    def __init__(self, url: str, status_code: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        self.url = url
        self.status_code = status_code
        self.cause = cause
        if status_code is not None:
            detail = f"HTTP error {status_code}"
        else:
            detail = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
        super().__init__(f"{url}: {detail}")


class ParseError(CrawlerError):
    """Raised when a listing page or metadata payload cannot be parsed."""

    def __init__(self, what: str, cause: Optional[BaseException] = None):
        self.what = what
        self.cause = cause
        super().__init__(f"cannot parse {what}: {cause}" if cause else f"cannot parse {what}")


class StorageError(CrawlerError):
    """Raised when an artifact cannot be written to the output directory."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot write {path}: {cause}")
