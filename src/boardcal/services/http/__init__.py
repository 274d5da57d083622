"""HTTP surface for the calendar API functions."""

from .server import app, day_items, invoke_api_function, list_api_functions, month_view, run_local_server, shift_item

__all__ = [
    "app",
    "day_items",
    "invoke_api_function",
    "list_api_functions",
    "month_view",
    "run_local_server",
    "shift_item",
]
