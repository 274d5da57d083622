"""Tests for the command line entry point."""

from __future__ import annotations

import orjson
import pytest

from boardcal import cli
from boardcal.api import api_state

from .conftest import VIEWER


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, context):
    levels = []
    monkeypatch.setattr(cli, "configure_logging", lambda level: levels.append(level))
    previous = api_state.context
    api_state.reset(context)
    yield levels
    api_state.reset(previous)


def test_month_command_prints_layout(capsys, quiet_cli):
    cli.main(["month", "2024-06", "--viewer", VIEWER])

    payload = orjson.loads(capsys.readouterr().out)
    assert payload["month"] == "2024-06"
    assert len(payload["weeks"]) == 6
    assert len(quiet_cli) == 1


def test_day_command_prints_items(capsys):
    cli.main(["day", "2024-06-04"])

    payload = orjson.loads(capsys.readouterr().out)
    assert [item["display_title"] for item in payload["items"]] == ["[fr***@example.com] Trips · Flight"]


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        cli.main(["calendar"])
