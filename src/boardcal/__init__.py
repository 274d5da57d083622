"""boardcal: shared month calendar aggregation and lane layout."""

from __future__ import annotations

from .core import MonthKey, MonthView, layout_month, resolve_day

__all__ = ["MonthKey", "MonthView", "layout_month", "main", "resolve_day"]


def main() -> None:
    from .cli import main as cli_main

    cli_main()
