"""
Transport capability consumed by the dispatcher, and the response it returns.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

QueryParams = Sequence[Tuple[str, str]]


class Response:
    """Decoded result of a dispatched request."""

    def __init__(
        self,
        status_code: int,
        headers: Mapping[str, str],
        data: Any = None,
        text: str = "",
    ):
        self.status_code = status_code
        self.headers = dict(headers)
        self.data = data
        self.text = text

    @property
    def count(self) -> Optional[int]:
        """Total row count from a ``Content-Range`` header such as ``0-9/42``."""
        content_range = self.headers.get("content-range") or self.headers.get("Content-Range")
        if not content_range or "/" not in content_range:
            return None
        total = content_range.rsplit("/", 1)[1]
        return int(total) if total.isdigit() else None

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Return rows as a list, wrapping a single-object result."""
        if self.data is None:
            return []
        if isinstance(self.data, list):
            return self.data
        return [self.data]

    def first(self) -> Optional[Dict[str, Any]]:
        """Get the first row or None."""
        rows = self.to_dicts()
        return rows[0] if rows else None

    def __repr__(self) -> str:
        return f"Response(status_code={self.status_code}, data={self.data!r})"


class Transport(ABC):
    """Sends exactly one HTTP request per call."""

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]],
        params: QueryParams,
        body: Any,
        options: Mapping[str, Any],
    ) -> Response:
        """
        Send a request.

        Args:
            method: GET, POST, PATCH or DELETE
            url: Absolute request URL
            headers: Headers to send, or None to send none
            params: Ordered query parameters; keys may repeat
            body: JSON-serializable payload, or None for no body
            options: Transport hints such as ``basic_auth`` and ``timeout``

        Raises:
            TransportError: On network failures and error responses
            EncodingError: When ``body`` cannot be encoded as JSON
        """

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncTransport(ABC):
    """Coroutine counterpart of ``Transport``."""

    @abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]],
        params: QueryParams,
        body: Any,
        options: Mapping[str, Any],
    ) -> Response:
        """Send a request; see ``Transport.send``."""

    async def aclose(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
