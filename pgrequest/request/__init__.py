"""
Request state, filter engine and builder operations.
"""

from .state import Method, RequestState
from .filters import Operator, sanitize_param, sanitize_pattern_param
from .builder import RequestBuilder, init

__all__ = [
    "Method",
    "RequestState",
    "Operator",
    "sanitize_param",
    "sanitize_pattern_param",
    "RequestBuilder",
    "init",
]
