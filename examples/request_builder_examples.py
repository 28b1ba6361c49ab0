"""
Examples demonstrating the PostgREST request builder.

The first sections only build requests and print what would be sent; the last
one talks to a PostgREST server at PGREQUEST_URL (default localhost:3000).
"""

import asyncio

from pgrequest import AsyncClient, Client, ClientConfig, RequestBuilder, TransportError
from pgrequest.dispatch import prepare
from pgrequest.logging_config import setup_logging
from pgrequest.request import builder as ops
from pgrequest.request import filters


def show(title, state):
    method, kwargs = prepare(state)
    print(f"{title}:\n  {method} {kwargs['url']}\n  params={kwargs['params']}\n  body={kwargs['body']}\n")


def functional_examples():
    """Pure state transformations."""
    print("=== Functional Examples ===\n")

    state = ops.init("public")
    state = ops.from_(state, "users")
    state = filters.gt(state, "age", 18)
    state = filters.lt(state, "age", 65)
    show("Two bounds on one column", state)

    state = filters.eq(filters.not_(ops.from_(ops.init("public"), "todos")), "done", True)
    show("Negated filter", state)


def fluent_examples():
    """The same requests through RequestBuilder."""
    print("=== Fluent Examples ===\n")

    qb = (RequestBuilder("public")
          .from_("users")
          .select("id", "name")
          .in_("id", [1, 2, 3])
          .order("name")
          .limit(10))
    show("Projection with IN filter", qb.state)

    qb = RequestBuilder("public").from_("users").upsert([{"id": 1, "name": "Ann"}])
    show("Upsert", qb.state)

    qb = RequestBuilder("public").rpc("search_users", {"term": "ann"})
    show("Stored procedure", qb.state)


def live_examples():
    """Requests against a running server."""
    print("=== Live Examples ===\n")

    with Client(ClientConfig.from_env()) as client:
        try:
            response = client.from_("users").select("*").limit(5).execute()
            print(f"First page ({response.count} total): {response.data}\n")
        except TransportError as e:
            print(f"Request failed ({e.status_code}): {e}\n")


async def async_examples():
    """The async client returns coroutines from execute()."""
    async with AsyncClient(ClientConfig.from_env()) as client:
        try:
            response = await client.from_("users").eq("id", 1).single().execute()
            print(f"Single row: {response.data}\n")
        except TransportError as e:
            print(f"Request failed ({e.status_code}): {e}\n")


if __name__ == "__main__":
    setup_logging()
    functional_examples()
    fluent_examples()
    live_examples()
    asyncio.run(async_examples())
