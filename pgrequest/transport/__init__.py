from pgrequest.transport.base import AsyncTransport, Response, Transport
from pgrequest.transport.httpx_transport import AsyncHttpxTransport, HttpxTransport

__all__ = [
    "Transport",
    "AsyncTransport",
    "Response",
    "HttpxTransport",
    "AsyncHttpxTransport",
]
