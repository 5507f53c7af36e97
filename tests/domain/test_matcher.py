"""Tests for TransitionMatcher and the class declaration surface."""

from __future__ import annotations

import dataclasses
import random
from typing import Any

import pytest

from statetransit.domain.matcher import Transition, TransitionMatcher, transit
from statetransit.errors import UnknownStateError
from tests.conftest import OrderState, Ticket, TicketState


@pytest.fixture
def todo_matcher(todo_states: list[str], todo_rules: dict[Any, Any]) -> TransitionMatcher:
    return TransitionMatcher.compile(todo_states, todo_rules)


class TestAllowed:
    def test_todo_scenario(self, todo_matcher: TransitionMatcher) -> None:
        assert todo_matcher.allowed("created", "scheduled")
        assert todo_matcher.allowed("scheduled", "overdued")
        assert todo_matcher.allowed("done", "closed")
        assert todo_matcher.allowed("overdued", "closed")
        assert not todo_matcher.allowed("closed", "created")
        assert not todo_matcher.allowed("unknown", "closed")

    def test_absent_states_never_allowed(self, todo_matcher: TransitionMatcher) -> None:
        assert not todo_matcher.allowed(None, "created")
        assert not todo_matcher.allowed("created", None)
        assert not todo_matcher.allowed(None, None)

    def test_self_transition_needs_a_rule(self, todo_matcher: TransitionMatcher) -> None:
        assert not todo_matcher.allowed("created", "created")
        assert todo_matcher.allowed("closed", "closed")

    def test_unhashable_values(self, todo_matcher: TransitionMatcher) -> None:
        assert not todo_matcher.allowed(["created"], "doing")

    def test_callable_and_container(self, todo_matcher: TransitionMatcher) -> None:
        assert todo_matcher("created", "doing")
        assert ("created", "doing") in todo_matcher
        assert ("doing", "overdued") not in todo_matcher
        assert "created" not in todo_matcher

    def test_len_and_iter(self) -> None:
        matcher = TransitionMatcher.compile(["a", "b"], {"a": "b", "b": "a"})
        assert len(matcher) == 2
        assert set(matcher) == {("a", "b"), ("b", "a")}

    def test_enum_domain(self) -> None:
        matcher = TransitionMatcher.compile(
            OrderState,
            {
                (OrderState.CREATED, OrderState.PAID, OrderState.IN_DELIVER): OrderState.DONE,
                OrderState.CREATED: OrderState.PAID,
                OrderState.PAID: OrderState.IN_DELIVER,
            },
        )
        assert matcher.allowed(OrderState.CREATED, OrderState.PAID)
        assert matcher.allowed(OrderState.PAID, 2)
        assert matcher.allowed(0, 3)
        assert not matcher.allowed(OrderState.DONE, OrderState.CREATED)
        assert not matcher.allowed("created", "paid")


class TestImmutability:
    def test_frozen(self, todo_matcher: TransitionMatcher) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            todo_matcher.pairs = frozenset()  # type: ignore[misc]

    def test_pairs_are_frozenset(self) -> None:
        matcher = TransitionMatcher([("a", "b")])
        assert isinstance(matcher.pairs, frozenset)

    def test_equal_rules_compile_equal(
        self, todo_states: list[str], todo_rules: dict[Any, Any]
    ) -> None:
        first = TransitionMatcher.compile(todo_states, todo_rules)
        second = TransitionMatcher.compile(list(reversed(todo_states)), todo_rules)
        assert first == second
        assert hash(first) == hash(second)


class TestTransitionDescriptor:
    def test_class_and_instance_access(self) -> None:
        assert Ticket.can_transit(TicketState.QUEUED, "checked")
        assert Ticket().can_transit("created", TicketState.CONFIRMED)
        assert Ticket.can_transit(random.choice(list(TicketState)), "cheated")
        assert not Ticket.can_transit("confirmed", TicketState.CREATED)
        assert not Ticket.can_transit(None, None)

    def test_two_rule_sets_on_one_class(self) -> None:
        class X:
            can_atom_transit = Transition(
                on=["a", "b", "c"], rules={"*": "c", "a": "*", "b": "a"}
            )
            can_integer_transit = Transition(on=[1, 2, 3], rules={"*": 3, 1: "*", 2: 1})

        assert X.can_atom_transit("a", "b")
        assert not X.can_atom_transit("c", "b")
        assert not X.can_atom_transit(1, 2)
        assert X.can_integer_transit(1, 2)
        assert not X.can_integer_transit(3, 2)
        assert not X.can_integer_transit("a", "b")
        assert not hasattr(X, "can_transit")

    def test_declaration_fails_at_class_creation(self) -> None:
        with pytest.raises(UnknownStateError):

            class Bad:
                can_transit = Transition(on=["a", "b"], rules={"unknown": "a"})

    def test_repr(self) -> None:
        descriptor = Ticket.__dict__["can_transit"]
        assert repr(descriptor).startswith("<Transition Ticket.can_transit")


class TestTransitDecorator:
    def test_default_name(self, todo_states: list[str], todo_rules: dict[Any, Any]) -> None:
        @transit(on=todo_states, rules=todo_rules)
        class Todo:
            pass

        assert Todo.can_transit("created", "doing")

    def test_custom_name(self) -> None:
        @transit(on=OrderState, rules={OrderState.CREATED: OrderState.PAID}, name="can_continue")
        class Order:
            pass

        assert Order.can_continue(OrderState.CREATED, 1)
        assert not hasattr(Order, "can_transit")

    def test_name_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATETRANSIT_VALIDATOR__NAME", "can_move")

        @transit(on=["a", "b"], rules={"a": "b"})
        class Piece:
            pass

        assert Piece.can_move("a", "b")

    def test_stacked(self) -> None:
        @transit(on=["a", "b"], rules={"a": "b"}, name="can_forward")
        @transit(on=["a", "b"], rules={"b": "a"}, name="can_back")
        class Both:
            pass

        assert Both.can_forward("a", "b")
        assert Both.can_back("b", "a")
        assert not Both.can_back("a", "b")
