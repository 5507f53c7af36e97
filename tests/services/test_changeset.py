"""Tests for Changeset and FieldError."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from statetransit.services.changeset import Changeset, FieldError
from tests.conftest import Ticket, TicketState


class TestChangeset:
    def test_change_keeps_only_differences(self) -> None:
        cs = Changeset.change(Ticket(state="created"), state="created", note="hi")
        assert cs.changes == {"note": "hi"}
        assert not cs.has_change("state")
        assert cs.has_change("note")

    def test_change_merges_mapping_and_kwargs(self) -> None:
        cs = Changeset.change({"state": "a"}, {"state": "b"}, owner="x")
        assert cs.changes == {"state": "b", "owner": "x"}

    def test_get_field_falls_back_to_original(self) -> None:
        cs = Changeset.change(Ticket(state=TicketState.QUEUED))
        assert cs.get_field("state") == TicketState.QUEUED
        assert cs.get_original("state") == TicketState.QUEUED

    def test_get_field_prefers_pending(self) -> None:
        cs = Changeset.change(Ticket(state="created"), state="closed")
        assert cs.get_field("state") == "closed"
        assert cs.get_original("state") == "created"

    def test_mapping_data(self) -> None:
        cs = Changeset({"state": "a"}, {"state": "b"})
        assert cs.get_original("state") == "a"
        assert cs.get_original("missing") is None
        assert cs.schema is dict

    def test_object_data_missing_attribute(self) -> None:
        cs = Changeset(SimpleNamespace(state="a"))
        assert cs.get_original("other") is None

    def test_schema_defaults_to_record_type(self) -> None:
        assert Changeset(Ticket()).schema is Ticket
        assert Changeset({"state": "a"}, schema=Ticket).schema is Ticket

    def test_add_error_returns_self(self) -> None:
        cs = Changeset(Ticket())
        assert cs.valid
        assert cs.add_error("state", "is bad") is cs
        assert not cs.valid

    def test_errors_on_groups_by_field(self) -> None:
        cs = Changeset(Ticket())
        cs.add_error("state", "{old} => {new}", old="a", new="b")
        cs.add_error("state", "second")
        cs.add_error("owner", "missing")
        assert cs.errors_on() == {"state": ["a => b", "second"], "owner": ["missing"]}


class TestFieldError:
    def test_message_renders_keys(self) -> None:
        error = FieldError(field="state", template="from {old} to {new}", keys={"old": 1})
        assert error.message == "from 1 to new"

    def test_frozen(self) -> None:
        error = FieldError(field="state", template="x")
        with pytest.raises(ValidationError):
            error.field = "other"  # type: ignore[misc]
