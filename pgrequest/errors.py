"""
Exception types raised by pgrequest.
"""

from typing import Any, Optional


class PgRequestError(Exception):
    """Base class for every error raised by pgrequest."""


class UnsupportedMethod(PgRequestError):
    """A request state carries a method outside GET, POST, PATCH and DELETE."""

    def __init__(self, method: Any):
        self.method = method
        super().__init__(f"Unsupported request method: {method!r}")


class TransportError(PgRequestError):
    """Network or HTTP-level failure reported by a transport."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class EncodingError(PgRequestError, ValueError):
    """The request body could not be encoded as JSON."""
