"""Validation strategies: how a changeset's ``(old, new)`` pair is judged.

The ``using`` option accepts several shapes, resolved once into one of
these variants:

- ``None`` or a method name: :class:`RecordMethod`, calls
  ``schema.<name>(old, new)`` on the changeset's schema.
- a :class:`TransitionMatcher`: :class:`MatcherStrategy`.
- ``(target, operation, extra_args)``: :class:`ExternalOperation`, calls
  ``target.<operation>(changeset, (old, new), *extra_args)``.
- any other callable: :class:`Predicate`, calls
  ``func(changeset, (old, new))``.

A strategy that cannot be resolved or invoked is a programmer error and
raises :class:`InvalidStrategyError`. It is never turned into a field
error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from statetransit.config.settings import get_settings
from statetransit.domain.matcher import TransitionMatcher
from statetransit.errors import InvalidStrategyError
from statetransit.services.changeset import ChangeTracker


def _lookup(target: Any, name: str) -> Callable[..., Any]:
    func = getattr(target, name, None)
    if func is None or not callable(func):
        label = target.__name__ if isinstance(target, type) else type(target).__name__
        raise InvalidStrategyError(f"{label} has no callable {name!r} to validate transitions")
    return func


class TransitionStrategy(ABC):
    """Decides whether ``old -> new`` is allowed for a changeset."""

    @abstractmethod
    def evaluate(self, changeset: ChangeTracker, old: Any, new: Any) -> bool: ...


@dataclass(frozen=True)
class RecordMethod(TransitionStrategy):
    """Named two-argument query on the record's schema."""

    name: str

    def evaluate(self, changeset: ChangeTracker, old: Any, new: Any) -> bool:
        return bool(_lookup(changeset.schema, self.name)(old, new))


@dataclass(frozen=True)
class MatcherStrategy(TransitionStrategy):
    """A compiled matcher used directly."""

    matcher: TransitionMatcher

    def evaluate(self, changeset: ChangeTracker, old: Any, new: Any) -> bool:
        return self.matcher.allowed(old, new)


@dataclass(frozen=True)
class Predicate(TransitionStrategy):
    """Callable taking the changeset and the ``(old, new)`` pair."""

    func: Callable[[ChangeTracker, tuple[Any, Any]], Any]

    def evaluate(self, changeset: ChangeTracker, old: Any, new: Any) -> bool:
        return bool(self.func(changeset, (old, new)))


@dataclass(frozen=True)
class ExternalOperation(TransitionStrategy):
    """Operation on another object, with extra trailing arguments."""

    target: Any
    operation: str
    extra_args: tuple[Any, ...] = ()

    def evaluate(self, changeset: ChangeTracker, old: Any, new: Any) -> bool:
        func = _lookup(self.target, self.operation)
        return bool(func(changeset, (old, new), *self.extra_args))


def resolve_strategy(spec: Any = None) -> TransitionStrategy:
    """Resolve a ``using`` option into a :class:`TransitionStrategy`."""
    if spec is None:
        return RecordMethod(get_settings().validator.name)
    if isinstance(spec, TransitionStrategy):
        return spec
    if isinstance(spec, TransitionMatcher):
        return MatcherStrategy(spec)
    if isinstance(spec, str):
        return RecordMethod(spec)
    if isinstance(spec, tuple):
        if len(spec) != 3 or not isinstance(spec[1], str):
            raise InvalidStrategyError(
                f"expected a (target, operation, extra_args) strategy, got {spec!r}"
            )
        target, operation, extra_args = spec
        return ExternalOperation(target, operation, tuple(extra_args))
    if callable(spec):
        return Predicate(spec)
    raise InvalidStrategyError(f"cannot validate transitions with {spec!r}")
