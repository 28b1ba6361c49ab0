"""
Test configuration and fixtures for the pgrequest test suite.
Provides a recording transport, httpx mock clients and a FastAPI application
standing in for a PostgREST server.
"""

import json
from typing import Any, Callable, List, Tuple

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pgrequest.request import builder as ops
from pgrequest.request.state import RequestState
from pgrequest.transport.base import Response, Transport

TEST_BASE_URL = "http://localhost:3000"
TEST_SCHEMA = "test_schema"

USERS = [
    {"id": 1, "name": "Alice", "age": 31},
    {"id": 2, "name": "Bob", "age": 17},
    {"id": 3, "name": "Carol", "age": 45},
]


class RecordingTransport(Transport):
    """Transport double that records every send() call."""

    def __init__(self, response: Response | None = None):
        self.calls: List[dict] = []
        self.response = response or Response(200, {}, data=[])
        self.closed = False

    def send(self, method, url, headers, params, body, options):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "params": list(params),
                "body": body,
                "options": options,
            }
        )
        return self.response

    def close(self):
        self.closed = True


def create_postgrest_app() -> FastAPI:
    """
    A small PostgREST stand-in.

    ``/users`` honours ``eq`` filters on ``id`` plus the Range and Accept
    headers; ``/missing`` answers like PostgREST does for an unknown relation;
    every other path echoes the request back.
    """
    app = FastAPI()

    @app.get("/users")
    async def users(request: Request):
        rows = list(USERS)
        for key, value in request.query_params.multi_items():
            if key == "id" and value.startswith("eq."):
                rows = [row for row in rows if str(row["id"]) == value[3:]]

        total = len(rows)
        range_header = request.headers.get("range")
        if range_header:
            start, end = (int(part) for part in range_header.split("-"))
            rows = rows[start : end + 1]

        if request.headers.get("accept") == "application/vnd.pgrst.object+json":
            if len(rows) != 1:
                return JSONResponse(
                    {"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"},
                    status_code=406,
                )
            return JSONResponse(rows[0])

        headers = {"Content-Range": f"0-{max(len(rows) - 1, 0)}/{total}"}
        return JSONResponse(rows, headers=headers)

    @app.get("/missing")
    async def missing():
        return JSONResponse(
            {"code": "42P01", "message": 'relation "test_schema.missing" does not exist'},
            status_code=404,
        )

    @app.api_route("/{path:path}", methods=["GET", "POST", "PATCH", "DELETE"])
    async def echo(path: str, request: Request):
        raw = await request.body()
        return JSONResponse(
            {
                "method": request.method,
                "path": "/" + path,
                "query": [list(item) for item in request.query_params.multi_items()],
                "headers": dict(request.headers),
                "body": json.loads(raw) if raw else None,
            }
        )

    return app


@pytest.fixture
def state() -> RequestState:
    """A fresh request state against the test schema."""
    return ops.init(TEST_SCHEMA, TEST_BASE_URL)


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def postgrest_app() -> FastAPI:
    return create_postgrest_app()


@pytest.fixture
def captured_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def mock_client_factory(captured_requests) -> Callable[..., httpx.Client]:
    """
    Build an httpx.Client over MockTransport.

    The handler defaults to an empty JSON array; every request is appended to
    ``captured_requests``.
    """

    def factory(handler: Callable[[httpx.Request], httpx.Response] | None = None) -> httpx.Client:
        def record(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            if handler is not None:
                return handler(request)
            return httpx.Response(200, json=[])

        return httpx.Client(transport=httpx.MockTransport(record))

    return factory


def query_pairs(request: httpx.Request) -> List[Tuple[str, str]]:
    return list(request.url.params.multi_items())


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None
