"""
Request builder for PostgREST endpoints.

Every operation is a pure function ``(state, ...) -> RequestState``; the
``RequestBuilder`` class threads a state through the same operations with a
fluent interface.
"""

from typing import Any, Optional, Sequence, Union

from . import filters
from .state import Method, RequestState

DEFAULT_BASE_URL = "http://localhost:3000"
SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def init(schema: str, base_url: str = DEFAULT_BASE_URL) -> RequestState:
    """
    Create the initial request state for ``schema``.

    Args:
        schema: Schema announced through the Accept-Profile/Content-Profile headers
        base_url: Root URL of the PostgREST server

    Returns:
        RequestState: A GET request against ``base_url`` with no filters
    """
    return RequestState(
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Accept-Profile": schema,
            "Content-Profile": schema,
        },
        path=base_url,
        schema_name=schema,
        method=Method.GET,
        negate_next=False,
        body={},
        params={},
    )


def auth(state: RequestState, token: str, username: str = "", password: str = "") -> RequestState:
    """
    Attach credentials.

    With a ``username`` the credentials are handed to the transport as basic
    auth; otherwise ``token`` is sent as a bearer token.
    """
    if username:
        return state.evolve(options={**state.options, "basic_auth": (username, password)})
    return state.with_headers({"Authorization": f"Bearer {token}"})


def schema(state: RequestState, name: str) -> RequestState:
    """Switch to another schema; the request becomes a read again."""
    return state.evolve(
        schema_name=name,
        method=Method.GET,
        headers={**state.headers, "Accept-Profile": name, "Content-Profile": name},
    )


def from_(state: RequestState, table: str) -> RequestState:
    """Target ``table``; each call appends another path segment."""
    return state.evolve(path=f"{state.path}/{table}")


def rpc(state: RequestState, function_name: str, params: Any) -> RequestState:
    """Call the stored procedure ``function_name`` with ``params`` as body."""
    return state.evolve(
        path=f"{state.path}/{function_name}",
        body=params,
        method=Method.POST,
    )


def select(state: RequestState, columns: Union[str, Sequence[str]]) -> RequestState:
    if isinstance(columns, str):
        columns = [columns]
    return state.with_headers({"select": ",".join(columns)}).evolve(method=Method.GET)


def insert(state: RequestState, rows: Any, upsert: bool = False) -> RequestState:
    """Insert ``rows``; with ``upsert`` duplicates are merged."""
    prefer = "resolution=merge-duplicates" if upsert else ""
    return state.with_headers({"Prefer": prefer}).evolve(method=Method.POST, body=rows)


def update(state: RequestState, rows: Any) -> RequestState:
    return state.with_headers({"Prefer": "return=representation"}).evolve(
        method=Method.PATCH, body=rows
    )


def delete(state: RequestState, criteria: Any = None) -> RequestState:
    return state.evolve(method=Method.DELETE, body={} if criteria is None else criteria)


def order(state: RequestState, column: str, desc: bool = False, nulls_first: bool = False) -> RequestState:
    """
    Sort by ``column``.

    The header value keeps both modifier slots, so ``order(s, "age", True)``
    produces ``"age .desc "``.
    """
    direction = ".desc" if desc else ""
    nulls = ".nullsfirst" if nulls_first else ""
    return state.with_headers({"order": f"{column} {direction} {nulls}"})


def limit(state: RequestState, size: int, start: int = 0) -> RequestState:
    """Request ``size`` items beginning at offset ``start``."""
    if size < 1:
        raise ValueError(f"limit size must be positive, got {size}")
    return state.with_headers({"Range": f"{start}-{start + size - 1}", "Range-Unit": "items"})


def range_(state: RequestState, start: int, end: int) -> RequestState:
    """Request the half-open item range ``[start, end)``."""
    if end <= start:
        raise ValueError(f"range end ({end}) must be greater than start ({start})")
    return state.with_headers({"Range": f"{start}-{end - 1}", "Range-Unit": "items"})


def single(state: RequestState) -> RequestState:
    """Ask for a single JSON object instead of an array."""
    return state.with_headers({"Accept": SINGLE_OBJECT})


class RequestBuilder:
    """
    Fluent wrapper around ``RequestState``.

    Each method applies the matching operation and returns the builder, so
    calls can be chained::

        RequestBuilder("public").from_("users").gt("age", 18).order("name")

    The current state is available through ``state``; ``execute()``
    dispatches it through the bound transport.
    """

    def __init__(
        self,
        schema_name: str = "public",
        base_url: str = DEFAULT_BASE_URL,
        transport=None,
        state: Optional[RequestState] = None,
    ):
        self._state = state if state is not None else init(schema_name, base_url)
        self.transport = transport

    @property
    def state(self) -> RequestState:
        return self._state

    def copy(self) -> "RequestBuilder":
        """Fork the chain; the copy shares the transport but not the state."""
        return RequestBuilder(transport=self.transport, state=self._state)

    def _apply(self, operation, *args, **kwargs) -> "RequestBuilder":
        self._state = operation(self._state, *args, **kwargs)
        return self

    def _apply_filter(self, operation, *args) -> "RequestBuilder":
        try:
            return self._apply(operation, *args)
        except Exception:
            # The pending negation belongs to this call even when it fails
            self._state = self._state.evolve(negate_next=False)
            raise

    # Request shape

    def auth(self, token: str, username: str = "", password: str = "") -> "RequestBuilder":
        return self._apply(auth, token, username, password)

    def schema(self, name: str) -> "RequestBuilder":
        return self._apply(schema, name)

    def from_(self, table: str) -> "RequestBuilder":
        return self._apply(from_, table)

    def rpc(self, function_name: str, params: Any) -> "RequestBuilder":
        return self._apply(rpc, function_name, params)

    def select(self, *columns: str) -> "RequestBuilder":
        return self._apply(select, list(columns) or ["*"])

    def insert(self, rows: Any, upsert: bool = False) -> "RequestBuilder":
        return self._apply(insert, rows, upsert)

    def upsert(self, rows: Any) -> "RequestBuilder":
        return self._apply(insert, rows, True)

    def update(self, rows: Any) -> "RequestBuilder":
        return self._apply(update, rows)

    def delete(self, criteria: Any = None) -> "RequestBuilder":
        return self._apply(delete, criteria)

    def order(self, column: str, desc: bool = False, nulls_first: bool = False) -> "RequestBuilder":
        return self._apply(order, column, desc, nulls_first)

    def limit(self, size: int, start: int = 0) -> "RequestBuilder":
        return self._apply(limit, size, start)

    def range(self, start: int, end: int) -> "RequestBuilder":
        return self._apply(range_, start, end)

    def single(self) -> "RequestBuilder":
        return self._apply(single)

    # Filters

    def not_(self) -> "RequestBuilder":
        """Negate the next filter: ``builder.not_().eq("status", "done")``."""
        return self._apply(filters.not_)

    def filter(self, column: str, operator: str, criteria: str) -> "RequestBuilder":
        return self._apply_filter(filters.filter_, column, operator, criteria)

    def eq(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.eq, column, value)

    def neq(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.neq, column, value)

    def gt(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.gt, column, value)

    def gte(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.gte, column, value)

    def lt(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.lt, column, value)

    def lte(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.lte, column, value)

    def is_(self, column: str, value: Any) -> "RequestBuilder":
        return self._apply_filter(filters.is_, column, value)

    def like(self, column: str, pattern: str) -> "RequestBuilder":
        return self._apply_filter(filters.like, column, pattern)

    def ilike(self, column: str, pattern: str) -> "RequestBuilder":
        return self._apply_filter(filters.ilike, column, pattern)

    def fts(self, column: str, query: str) -> "RequestBuilder":
        return self._apply_filter(filters.fts, column, query)

    def plfts(self, column: str, query: str) -> "RequestBuilder":
        return self._apply_filter(filters.plfts, column, query)

    def phfts(self, column: str, query: str) -> "RequestBuilder":
        return self._apply_filter(filters.phfts, column, query)

    def wfts(self, column: str, query: str) -> "RequestBuilder":
        return self._apply_filter(filters.wfts, column, query)

    def in_(self, column: str, values: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.in_, column, values)

    def cs(self, column: str, values: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.cs, column, values)

    def cd(self, column: str, values: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.cd, column, values)

    def ov(self, column: str, values: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.ov, column, values)

    def sl(self, column: str, bounds: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.sl, column, bounds)

    def sr(self, column: str, bounds: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.sr, column, bounds)

    def nxl(self, column: str, bounds: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.nxl, column, bounds)

    def nxr(self, column: str, bounds: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.nxr, column, bounds)

    def adj(self, column: str, bounds: Sequence[Any]) -> "RequestBuilder":
        return self._apply_filter(filters.adj, column, bounds)

    # Dispatch

    def execute(self):
        """
        Dispatch the current state through the bound transport.

        Returns the ``Response`` for a synchronous transport, or a coroutine
        to await for an ``AsyncTransport``.
        """
        # dispatch imports the request package, so bind it late
        from pgrequest.dispatch import adispatch, dispatch
        from pgrequest.transport.base import AsyncTransport

        if self.transport is None:
            raise RuntimeError("No transport bound to this builder")
        if isinstance(self.transport, AsyncTransport):
            return adispatch(self._state, self.transport)
        return dispatch(self._state, self.transport)

    def __repr__(self) -> str:
        method = self._state.method.value if isinstance(self._state.method, Method) else self._state.method
        return f"RequestBuilder(method={method!r}, path={self._state.path!r}, params={self._state.params!r})"
