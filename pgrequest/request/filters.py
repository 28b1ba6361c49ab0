"""
Filter engine: turns column/operator/value triples into query parameters.

Every filter is encoded as ``<operator>.<criteria>`` and appended to the
parameter list of its column, so a column may carry several bounds at once
(``age=gt.18&age=lt.65``).
"""

from enum import Enum
from typing import Any, Sequence

from .state import RequestState

RESERVED_CHARS = frozenset(",.:()")


class Operator(str, Enum):
    """Filter operator tokens understood by PostgREST."""
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IS = "is"
    LIKE = "like"
    ILIKE = "ilike"
    FTS = "fts"
    PLFTS = "plfts"
    PHFTS = "phfts"
    WFTS = "wfts"
    IN = "in"
    CS = "cs"
    CD = "cd"
    OV = "ov"
    SL = "sl"
    SR = "sr"
    NXL = "nxl"
    NXR = "nxr"
    ADJ = "adj"


def render_value(value: Any) -> str:
    """Render a scalar the way PostgREST spells it in a query string."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def sanitize_param(value: Any) -> str:
    """
    Quote a list member that contains a reserved character.

    Inside ``in.(...)`` and ``{...}`` literals, ``,``, ``.``, ``:``, ``(``
    and ``)`` are grammar, so such members are wrapped in double quotes with
    ``\\`` and ``"`` escaped. Anything else, including non-string scalars
    such as ``1.5``, passes through unchanged. Scalar operators read their
    value literally to the end of the string and use ``render_value``.
    """
    text = render_value(value)
    if not isinstance(value, str) or not RESERVED_CHARS.intersection(text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def sanitize_pattern_param(value: Any) -> str:
    """Translate SQL ``%`` wildcards into PostgREST's ``*``."""
    return render_value(value).replace("%", "*")


def sanitize_key(column: str) -> str:
    # Dotted keys address embedded resources and must stay unquoted
    return column.strip()


def filter_(state: RequestState, column: str, operator: str, criteria: str) -> RequestState:
    """
    Append ``<operator>.<criteria>`` to the parameters of ``column``.

    A pending ``not_()`` turns the operator into ``not.<operator>`` and is
    consumed by this call. The request method is left untouched.
    """
    operator = operator.value if isinstance(operator, Operator) else operator
    if state.negate_next:
        operator = f"not.{operator}"

    value = f"{operator}.{criteria}"
    key = sanitize_key(column)

    params = dict(state.params)
    params[key] = [*params.get(key, []), value]

    return state.evolve(params=params, negate_next=False)


def not_(state: RequestState) -> RequestState:
    """Negate the next filter applied to ``state``."""
    return state.evolve(negate_next=True)


# Comparison operators


def eq(state: RequestState, column: str, value: Any) -> RequestState:
    return filter_(state, column, Operator.EQ, render_value(value))


def neq(state: RequestState, column: str, value: Any) -> RequestState:
    return filter_(state, column, Operator.NEQ, render_value(value))


def gt(state: RequestState, column: str, value: Any) -> RequestState:
    return filter_(state, column, Operator.GT, render_value(value))


def gte(state: RequestState, column: str, value: Any) -> RequestState:
    return filter_(state, column, Operator.GTE, render_value(value))


def lt(state: RequestState, column: str, value: Any) -> RequestState:
    return filter_(state, column, Operator.LT, render_value(value))


def lte(state: RequestState, column: str, value: Any) -> RequestState:
    return filter_(state, column, Operator.LTE, render_value(value))


def is_(state: RequestState, column: str, value: Any) -> RequestState:
    """``IS`` check; ``None``, ``True`` and ``False`` render as null/true/false."""
    return filter_(state, column, Operator.IS, render_value(value))


# Pattern matching


def like(state: RequestState, column: str, pattern: str) -> RequestState:
    return filter_(state, column, Operator.LIKE, sanitize_pattern_param(pattern))


def ilike(state: RequestState, column: str, pattern: str) -> RequestState:
    """Case-insensitive ``like``."""
    return filter_(state, column, Operator.ILIKE, sanitize_pattern_param(pattern))


# Full-text search


def fts(state: RequestState, column: str, query: str) -> RequestState:
    return filter_(state, column, Operator.FTS, render_value(query))


def plfts(state: RequestState, column: str, query: str) -> RequestState:
    return filter_(state, column, Operator.PLFTS, render_value(query))


def phfts(state: RequestState, column: str, query: str) -> RequestState:
    return filter_(state, column, Operator.PHFTS, render_value(query))


def wfts(state: RequestState, column: str, query: str) -> RequestState:
    return filter_(state, column, Operator.WFTS, render_value(query))


# Set operators


def _join_values(values: Sequence[Any]) -> str:
    if isinstance(values, (str, bytes)):
        raise ValueError("Expected a sequence of values, got a single string")
    return ",".join(sanitize_param(value) for value in values)


def in_(state: RequestState, column: str, values: Sequence[Any]) -> RequestState:
    return filter_(state, column, Operator.IN, f"({_join_values(values)})")


def cs(state: RequestState, column: str, values: Sequence[Any]) -> RequestState:
    """Column contains every element of ``values``."""
    return filter_(state, column, Operator.CS, f"{{{_join_values(values)}}}")


def cd(state: RequestState, column: str, values: Sequence[Any]) -> RequestState:
    """Column is contained by ``values``."""
    return filter_(state, column, Operator.CD, f"{{{_join_values(values)}}}")


def ov(state: RequestState, column: str, values: Sequence[Any]) -> RequestState:
    """Column overlaps ``values``."""
    return filter_(state, column, Operator.OV, f"{{{_join_values(values)}}}")


# Range operators


def _encode_range(bounds: Sequence[Any]) -> str:
    if isinstance(bounds, (str, bytes)) or len(bounds) != 2:
        raise ValueError(f"A range needs exactly two bounds (lower, upper), got {bounds!r}")
    lower, upper = bounds
    return f"({render_value(lower)},{render_value(upper)})"


def _range_filter(state: RequestState, column: str, operator: Operator, bounds: Sequence[Any]) -> RequestState:
    return filter_(state, column, operator, _encode_range(bounds))


def sl(state: RequestState, column: str, bounds: Sequence[Any]) -> RequestState:
    """Strictly left of the range."""
    return _range_filter(state, column, Operator.SL, bounds)


def sr(state: RequestState, column: str, bounds: Sequence[Any]) -> RequestState:
    """Strictly right of the range."""
    return _range_filter(state, column, Operator.SR, bounds)


def nxl(state: RequestState, column: str, bounds: Sequence[Any]) -> RequestState:
    """Does not extend to the left of the range."""
    return _range_filter(state, column, Operator.NXL, bounds)


def nxr(state: RequestState, column: str, bounds: Sequence[Any]) -> RequestState:
    """Does not extend to the right of the range."""
    return _range_filter(state, column, Operator.NXR, bounds)


def adj(state: RequestState, column: str, bounds: Sequence[Any]) -> RequestState:
    """Adjacent to the range."""
    return _range_filter(state, column, Operator.ADJ, bounds)
