"""
Error taxonomy for the Jolpica (Ergast-compatible) data layer.

Every failure surfaced to callers is exactly one of:
- TransportError: timeout, network failure or non-2xx status.
- ValidationError: a response arrived but does not match the expected shape.
"""
from typing import Optional


RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


class JolpicaError(Exception):
    """Base class for all classified data-layer failures."""

    kind: str = "unknown"

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class TransportError(JolpicaError):
    """
    The request could not be completed.

    Attributes:
        status: HTTP status code, or None for timeouts and network failures.
        url: The URL that failed.
        reason: One of 'timeout', 'network', 'status'.
    """

    kind = "transport"

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status: Optional[int] = None,
        reason: str = "network",
    ) -> None:
        super().__init__(message, url)
        self.status = status
        self.reason = reason

    @property
    def retryable(self) -> bool:
        if self.status is None:
            return True
        if self.status in RETRYABLE_CLIENT_STATUSES:
            return True
        return self.status >= 500

    def __repr__(self) -> str:
        return f"TransportError(reason={self.reason!r}, status={self.status!r}, url={self.url!r})"


class ValidationError(JolpicaError):
    """The response body does not match the expected payload shape. Never retried."""

    kind = "validation"

    def __init__(self, detail: str, url: Optional[str] = None) -> None:
        super().__init__(f"Invalid API response format: {detail}", url)
        self.detail = detail

    @property
    def retryable(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"ValidationError(detail={self.detail!r}, url={self.url!r})"
