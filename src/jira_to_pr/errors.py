"""Exception types shared across the package."""

from __future__ import annotations


class JiraToPrError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(JiraToPrError, ValueError):
    """Required settings are missing or empty."""

    def __init__(self, message: str, *, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class HttpStatusError(JiraToPrError):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int, reason: str) -> None:
        super().__init__(f"HTTP {status}: {reason}")
        self.status = status
        self.reason = reason


class RequestTimeoutError(JiraToPrError):
    """A request did not complete within the configured timeout."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Request timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms
