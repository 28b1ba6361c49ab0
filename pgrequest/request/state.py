"""
The request state threaded through every builder operation.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import BaseModel, Field


class Method(str, Enum):
    """HTTP verbs a request state may resolve to."""
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


class RequestState(BaseModel):
    """
    Accumulated description of a single PostgREST request.

    States are frozen: builder operations return a new state through
    ``evolve`` and never mutate the containers of an existing one.
    """
    headers: Dict[str, str] = Field(default_factory=dict, description="Outbound headers")
    path: str = Field(..., description="Base URL plus the selected resource segments")
    schema_name: str = Field(..., description="Schema targeted through the profile headers")
    method: Method = Field(Method.GET, description="HTTP verb used on dispatch")
    negate_next: bool = Field(False, description="Wrap the next filter in not.")
    body: Any = Field(default_factory=dict, description="JSON-serializable payload")
    params: Dict[str, List[str]] = Field(
        default_factory=dict, description="Column key -> encoded filters, in application order"
    )
    options: Dict[str, Any] = Field(default_factory=dict, description="Transport hints")

    model_config = {"frozen": True}

    def evolve(self, **changes: Any) -> "RequestState":
        """Return a copy of this state with ``changes`` applied."""
        return self.model_copy(update=changes)

    def with_headers(self, headers: Mapping[str, str]) -> "RequestState":
        """Return a copy with ``headers`` merged over the current headers."""
        return self.evolve(headers={**self.headers, **headers})

    @property
    def url(self) -> str:
        return self.path

    def query_params(self) -> List[Tuple[str, str]]:
        """
        Flatten ``params`` into ordered ``(key, value)`` pairs.

        A column carrying several filters yields one pair per filter, so the
        key repeats in the outbound query string.
        """
        return [(key, value) for key, values in self.params.items() for value in values]

    def snapshot(self) -> Tuple[str, str, Dict[str, str], Dict[str, List[str]], Any]:
        """The ``(method, path, headers, params, body)`` a dispatch would send."""
        method = self.method.value if isinstance(self.method, Method) else self.method
        return (
            method,
            self.path,
            dict(self.headers),
            {key: list(values) for key, values in self.params.items()},
            self.body,
        )
