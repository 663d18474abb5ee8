"""
Error types raised by the downloader pipeline.
"""

from typing import Iterable, List, Optional


class DownloaderError(Exception):
    """Base class for every error the downloader raises."""


class ConfigError(DownloaderError):
    """Invalid or conflicting options; raised before anything is fetched."""


class FetchError(DownloaderError):
    """Transport failure or non-success HTTP status."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ParseError(DownloaderError):
    """A listing produced no usable entries."""


class NotFoundError(DownloaderError):
    """A requested run or parameter is not in the catalog."""

    def __init__(self, message: str, known: Iterable[str]):
        self.known: List[str] = list(known)
        super().__init__(f"{message}. Available: {self.known}")


class RetrievalExhausted(DownloaderError):
    """Every attempt to retrieve one file failed."""

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException]):
        super().__init__(f"failed after {attempts} attempts: {url}: {last_error}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
