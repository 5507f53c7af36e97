"""Exception hierarchy for statetransit.

Two families:
- Declaration-time errors, raised while a rule set compiles. They are
  fatal and abort the whole declaration.
- Programmer errors surfaced during validation (a malformed strategy).

A rejected transition is never an exception. It is recorded as a field
error on the changeset (see :mod:`statetransit.services.validate`).
"""

from __future__ import annotations

from typing import Any


class TransitError(Exception):
    """Base class for every error raised by statetransit."""


class ConfigError(TransitError, ValueError):
    """statetransit.toml exists but cannot be parsed."""


# --- Declaration time ---


class DomainError(TransitError):
    """The state domain declaration is unusable."""


class DomainKindError(DomainError, TypeError):
    """The domain is neither a collection of states nor a representation provider."""

    def __init__(self, on: Any) -> None:
        self.on = on
        shape = on.__name__ if isinstance(on, type) else type(on).__name__
        super().__init__(
            f"cannot create transition validator on {shape} {on!r}, "
            f"expected a collection of states, an Enum or a RepresentationProvider"
        )


class DuplicateAlternateError(DomainError, ValueError):
    """Two primary states share one alternate representation."""

    def __init__(self, alternate: Any, primaries: tuple[Any, Any]) -> None:
        self.alternate = alternate
        self.primaries = primaries
        super().__init__(
            f"alternate representation {alternate!r} is shared by "
            f"{primaries[0]!r} and {primaries[1]!r}"
        )


class RuleSpecError(TransitError, TypeError):
    """A raw rule entry is not a ``(source, target)`` pair."""


class UnknownStateError(TransitError, ValueError):
    """A rule references a state that is not in the domain."""

    def __init__(self, from_: Any, to: Any) -> None:
        self.from_ = from_
        self.to = to
        super().__init__(f"unknown transition state in {from_!r} => {to!r}")


class InvalidRepresentationError(TransitError, TypeError):
    """A rule uses a value that is not the domain's primary representation."""

    def __init__(self, from_: Any, to: Any, *, side: str) -> None:
        self.from_ = from_
        self.to = to
        self.side = side
        super().__init__(
            f"invalid transition state, expected a primary state on the "
            f"{side!r} side, in: {from_!r} => {to!r}"
        )


# --- Validation time ---


class InvalidStrategyError(TransitError, TypeError):
    """The ``using`` strategy cannot be resolved or invoked."""


# --- Persistence ---


class InvalidChangesetError(TransitError):
    """Refusing to persist a changeset that carries validation errors."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(f"changeset is invalid: {errors}")


class StaleRecordError(TransitError):
    """The row changed (or vanished) since the changeset's original was read."""
