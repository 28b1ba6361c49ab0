"""
httpx-backed transports.
"""

import json
from typing import Any, Dict, Mapping, Optional

import httpx

from pgrequest.errors import EncodingError, TransportError
from pgrequest.logging_config import get_logger
from pgrequest.transport.base import AsyncTransport, QueryParams, Response, Transport

logger = get_logger(__name__)


def encode_body(body: Any) -> Optional[bytes]:
    """
    JSON-encode ``body``; ``None`` means the request carries no body.

    NaN and infinities have no JSON spelling and raise ``EncodingError``.
    """
    if body is None:
        return None
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Request body is not JSON serializable: {e}") from e


def build_request_kwargs(
    headers: Optional[Mapping[str, str]],
    params: QueryParams,
    body: Any,
    options: Mapping[str, Any],
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "headers": dict(headers) if headers is not None else None,
        "params": list(params),
    }

    content = encode_body(body)
    if content is not None:
        kwargs["content"] = content

    basic_auth = options.get("basic_auth")
    if basic_auth:
        username, password = basic_auth
        kwargs["auth"] = httpx.BasicAuth(username, password)

    if options.get("timeout") is not None:
        kwargs["timeout"] = options["timeout"]

    return kwargs


def to_response(response: httpx.Response) -> Response:
    """Decode an httpx response, raising TransportError for error statuses."""
    data = None
    if response.content:
        try:
            data = response.json()
        except ValueError:
            data = None

    if response.is_error:
        logger.warning(
            "Request %s %s failed with status %s", response.request.method, response.request.url, response.status_code
        )
        raise TransportError(
            f"{response.status_code} {response.reason_phrase} for {response.request.method} {response.request.url}",
            status_code=response.status_code,
            payload=data if data is not None else response.text,
        )

    return Response(
        status_code=response.status_code,
        headers=response.headers,
        data=data,
        text=response.text,
    )


class HttpxTransport(Transport):
    """
    Synchronous transport over ``httpx.Client``.

    An injected client is left open on ``close()``; a client created here is
    owned and closed with the transport.
    """

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self._owned_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=httpx.Timeout(timeout))

    def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]],
        params: QueryParams,
        body: Any,
        options: Mapping[str, Any],
    ) -> Response:
        kwargs = build_request_kwargs(headers, params, body, options)
        try:
            response = self.client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Request %s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e
        return to_response(response)

    def close(self) -> None:
        if self._owned_client:
            self.client.close()


class AsyncHttpxTransport(AsyncTransport):
    """Asynchronous transport over ``httpx.AsyncClient``."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._owned_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]],
        params: QueryParams,
        body: Any,
        options: Mapping[str, Any],
    ) -> Response:
        kwargs = build_request_kwargs(headers, params, body, options)
        try:
            response = await self.client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Request %s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e
        return to_response(response)

    async def aclose(self) -> None:
        if self._owned_client:
            await self.client.aclose()
