"""Public API surface for HTTP, MCP and the CLI."""

from __future__ import annotations

from .registry import ApiArgumentError, ApiFunction, acall_api, call_api, get_api_functions, register_api
from .state import api_state

# Import endpoints so decorators run at module import time.
from . import endpoints  # noqa: F401

__all__ = [
    "ApiArgumentError",
    "ApiFunction",
    "acall_api",
    "api_state",
    "call_api",
    "get_api_functions",
    "register_api",
]
