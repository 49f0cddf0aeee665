"""
Error taxonomy for the Daily Digest.

Per-source fetch failures are FetchError subclasses. They are captured in a
FeedResult and counted in RunStats; they never escape a fetch task. Errors
raised before fetching starts (bad source list, bad config) abort the run.
"""

from __future__ import annotations


class DigestError(Exception):
    """Base class for all Daily Digest errors."""


class ConfigError(DigestError):
    """The configuration file could not be read or parsed."""


class SourceListError(DigestError):
    """The source list could not be loaded. Fatal to the whole run."""


class FetchError(DigestError):
    """A single source failed to fetch."""

    kind = "fetch_error"


class FetchTimeout(FetchError):
    kind = "timeout"

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Timeout after {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class HttpStatusError(FetchError):
    kind = "http_error"

    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP {status}")
        self.status = status


class NetworkError(FetchError):
    kind = "network_error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause
