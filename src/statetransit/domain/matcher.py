"""Transition matcher and the class-level declaration surface.

A :class:`TransitionMatcher` is an immutable set of allowed pairs. It is
compiled once and then only read, so one instance can be shared freely
across threads.

Declaring rules on a class::

    class Todo:
        can_transit = Transition(
            on=["created", "doing", "done", "closed"],
            rules={"*": "closed", "created": "doing", "doing": "done"},
        )

    Todo.can_transit("created", "doing")  # True

or, with the default name taken from settings::

    @transit(on=OrderState, rules={OrderState.CREATED: OrderState.PAID})
    class Order: ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypeVar

from statetransit.config.settings import get_settings
from statetransit.domain.rules import RuleSpec, expand_rules
from statetransit.domain.states import Pair, StateDomain, build_domain

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class TransitionMatcher:
    """Membership test over compiled ``(from, to)`` pairs.

    Anything not listed is refused, including pairs with ``None`` on
    either side. Allowing "no previous state" has to be declared
    explicitly like any other pair.
    """

    pairs: frozenset[Pair]
    domain: StateDomain | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pairs", frozenset(self.pairs))

    @classmethod
    def compile(cls, on: Any, rules: RuleSpec) -> TransitionMatcher:
        """Expand *rules* over the domain *on* and freeze the result."""
        domain = build_domain(on)
        return cls(expand_rules(domain, rules), domain)

    def allowed(self, from_: Any, to: Any) -> bool:
        try:
            return (from_, to) in self.pairs
        except TypeError:
            # unhashable values are never states
            return False

    def __call__(self, from_: Any, to: Any) -> bool:
        return self.allowed(from_, to)

    def __contains__(self, pair: object) -> bool:
        return isinstance(pair, tuple) and len(pair) == 2 and self.allowed(*pair)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


class Transition:
    """Descriptor exposing a compiled matcher under its attribute name.

    Rules compile when the owning class body executes, so a bad rule
    fails at declaration time. Both ``Owner.name(old, new)`` and
    ``instance.name(old, new)`` query the same matcher.
    """

    def __init__(self, *, on: Any, rules: RuleSpec) -> None:
        self.matcher = TransitionMatcher.compile(on, rules)
        self.name: str | None = None
        self.owner: type | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> TransitionMatcher:
        return self.matcher

    def __repr__(self) -> str:
        owner = self.owner.__name__ if self.owner is not None else "?"
        return f"<Transition {owner}.{self.name} ({len(self.matcher)} pairs)>"


def transit(*, on: Any, rules: RuleSpec, name: str | None = None) -> Callable[[T], T]:
    """Class decorator installing a :class:`Transition` named *name*.

    *name* defaults to ``validator.name`` from settings (``can_transit``).
    Stack the decorator with different names to declare several rule
    sets on one class.
    """
    descriptor = Transition(on=on, rules=rules)

    def decorate(cls: T) -> T:
        attr = name or get_settings().validator.name
        setattr(cls, attr, descriptor)
        descriptor.__set_name__(cls, attr)
        return cls

    return decorate
