"""
Client facade binding configuration and a transport to request builders.
"""

from typing import Any, Optional

from pgrequest.config import ClientConfig
from pgrequest.logging_config import get_logger
from pgrequest.request import builder as ops
from pgrequest.request.builder import RequestBuilder
from pgrequest.request.state import RequestState
from pgrequest.transport.httpx_transport import AsyncHttpxTransport, HttpxTransport

logger = get_logger(__name__)


class _BaseClient:
    def __init__(self, config: Optional[ClientConfig], transport):
        self.config = config or ClientConfig()
        self.transport = transport
        self._token = self.config.token
        self._username = self.config.username or ""
        self._password = self.config.password
        logger.info("Client for %s (schema %s)", self.config.base_url, self.config.schema_name)

    def auth(self, token: str = "", username: str = "", password: str = ""):
        """Use these credentials for every builder created afterwards."""
        self._token = token
        self._username = username
        self._password = password
        return self

    def _base_state(self, schema_name: Optional[str] = None) -> RequestState:
        state = ops.init(schema_name or self.config.schema_name, self.config.base_url)
        if self._username or self._token:
            state = ops.auth(state, self._token or "", self._username, self._password)
        return state.evolve(options={**state.options, "timeout": self.config.timeout})

    def builder(self, schema_name: Optional[str] = None) -> RequestBuilder:
        """A builder on the server root, bound to this client's transport."""
        return RequestBuilder(transport=self.transport, state=self._base_state(schema_name))

    def from_(self, table: str, schema_name: Optional[str] = None) -> RequestBuilder:
        return self.builder(schema_name).from_(table)

    table = from_

    def rpc(self, function_name: str, params: Any = None, schema_name: Optional[str] = None) -> RequestBuilder:
        """A builder calling ``function_name``; filters may still be added."""
        return self.builder(schema_name).rpc(function_name, {} if params is None else params)


class Client(_BaseClient):
    """
    Synchronous client.

    ::

        with Client(ClientConfig(base_url="http://localhost:3000")) as client:
            rows = client.from_("users").select("id", "name").eq("id", 1).execute().data
    """

    def __init__(self, config: Optional[ClientConfig] = None, transport=None):
        config = config or ClientConfig()
        super().__init__(config, transport or HttpxTransport(timeout=config.timeout))

    def close(self) -> None:
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncClient(_BaseClient):
    """Client whose builders return coroutines from ``execute()``."""

    def __init__(self, config: Optional[ClientConfig] = None, transport=None):
        config = config or ClientConfig()
        super().__init__(config, transport or AsyncHttpxTransport(timeout=config.timeout))

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
