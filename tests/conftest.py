"""Shared pytest fixtures and test helpers for statetransit tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from dataclasses import dataclass
from enum import Enum, StrEnum
from pathlib import Path
from typing import Any

import pytest

from statetransit.config.settings import reset_settings
from statetransit.domain.matcher import Transition

TODO_STATES = ["created", "scheduled", "doing", "overdued", "done", "closed"]

TODO_RULES: dict[Any, Any] = {
    "*": "closed",
    "created": ["scheduled", "doing"],
    "scheduled": ["doing", "overdued"],
    "doing": ["created", "scheduled", "done"],
}


class OrderState(Enum):
    """Primary members with integer stored values."""

    CREATED = 0
    PAID = 1
    IN_DELIVER = 2
    DONE = 3


class TicketState(StrEnum):
    CREATED = "created"
    CONFIRMED = "confirmed"
    CHECKED = "checked"
    CLOSED = "closed"
    CHEATED = "cheated"
    QUEUED = "queued"


@dataclass
class Ticket:
    """Record type owning ``can_transit`` plus two hook-style validators."""

    state: Any = None

    can_transit = Transition(
        on=TicketState,
        rules={
            TicketState.CREATED: [TicketState.CONFIRMED, TicketState.CLOSED],
            TicketState.CONFIRMED: TicketState.CHECKED,
            TicketState.CHECKED: TicketState.CLOSED,
            "*": TicketState.CHEATED,
            TicketState.QUEUED: "*",
        },
    )

    @staticmethod
    def validator_true(changeset: Any, pair: tuple[Any, Any], ex_arg1: str, ex_arg2: Any) -> bool:
        return pair == ("unknown", "undefined") and ex_arg1 == "ex_arg1" and isinstance(
            ex_arg2, tuple
        )

    @staticmethod
    def validator_false(changeset: Any, pair: tuple[Any, Any], ex_arg1: str, ex_arg2: Any) -> bool:
        return False


@pytest.fixture(autouse=True)
def _fresh_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate every test from ambient STATETRANSIT_* env vars and TOML files.

    CWD moves to a temp directory so config walk-up discovery finds nothing
    unless the test writes a statetransit.toml itself.
    """
    for name in list(os.environ):
        if name.startswith("STATETRANSIT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def todo_states() -> list[str]:
    return list(TODO_STATES)


@pytest.fixture
def todo_rules() -> dict[Any, Any]:
    return dict(TODO_RULES)
