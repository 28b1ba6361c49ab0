"""
Request builder client for PostgREST servers.

Builder operations are pure functions over ``RequestState``; ``RequestBuilder``
chains them fluently and ``dispatch`` sends the result through a transport.
"""

from pgrequest.client import AsyncClient, Client
from pgrequest.config import ClientConfig
from pgrequest.dispatch import adispatch, call, dispatch
from pgrequest.errors import EncodingError, PgRequestError, TransportError, UnsupportedMethod
from pgrequest.request import Method, Operator, RequestBuilder, RequestState, init
from pgrequest.transport import AsyncHttpxTransport, AsyncTransport, HttpxTransport, Response, Transport

__all__ = [
    "AsyncClient",
    "Client",
    "ClientConfig",
    "adispatch",
    "call",
    "dispatch",
    "EncodingError",
    "PgRequestError",
    "TransportError",
    "UnsupportedMethod",
    "Method",
    "Operator",
    "RequestBuilder",
    "RequestState",
    "init",
    "AsyncHttpxTransport",
    "AsyncTransport",
    "HttpxTransport",
    "Response",
    "Transport",
]
