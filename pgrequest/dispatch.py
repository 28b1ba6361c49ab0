"""
Dispatcher: maps a finished request state onto exactly one transport call.

| method | headers | query params | body                 |
|--------|---------|--------------|----------------------|
| GET    | yes     | yes          | no                   |
| POST   | yes     | yes          | yes                  |
| PATCH  | yes     | yes          | yes                  |
| DELETE | yes     | yes          | only when non-empty  |
"""

from typing import Any, Dict, Tuple

from pgrequest.errors import PgRequestError, UnsupportedMethod
from pgrequest.logging_config import get_logger, log_performance
from pgrequest.request.state import Method, RequestState
from pgrequest.transport.base import AsyncTransport, Response, Transport

logger = get_logger(__name__)


def _delete_body(body: Any) -> Any:
    return body if body not in (None, {}, []) else None


# method -> body selector
BODY_RULES = {
    Method.GET: lambda body: None,
    Method.POST: lambda body: body,
    Method.PATCH: lambda body: body,
    Method.DELETE: _delete_body,
}


def prepare(state: RequestState) -> Tuple[str, Dict[str, Any]]:
    """
    Resolve the verb and the keyword arguments for ``Transport.send``.

    Raises:
        UnsupportedMethod: When the state carries an unknown method
    """
    try:
        method = Method(state.method)
    except ValueError:
        raise UnsupportedMethod(state.method) from None

    select_body = BODY_RULES[method]
    return method.value, {
        "url": state.path,
        "headers": dict(state.headers),
        "params": state.query_params(),
        "body": select_body(state.body),
        "options": dict(state.options),
    }


@log_performance(logger, "dispatch", expected=(PgRequestError,))
def dispatch(state: RequestState, transport: Transport) -> Response:
    """
    Send ``state`` through ``transport``.

    Transport failures propagate unchanged; nothing is retried.
    """
    method, kwargs = prepare(state)
    logger.debug("Dispatching %s %s with %d query parameters", method, kwargs["url"], len(kwargs["params"]))
    return transport.send(method, **kwargs)


call = dispatch


@log_performance(logger, "async dispatch", expected=(PgRequestError,))
async def adispatch(state: RequestState, transport: AsyncTransport) -> Response:
    """Coroutine counterpart of ``dispatch``."""
    method, kwargs = prepare(state)
    logger.debug("Dispatching %s %s with %d query parameters", method, kwargs["url"], len(kwargs["params"]))
    return await transport.send(method, **kwargs)
