"""State domains: the universe of valid states for one rule set.

Two kinds:
- Flat: a plain collection of states, no aliasing.
- Dual: every state has a primary form (an Enum member, a symbolic key)
  and exactly one alternate form (the stored value). Rules are written
  against primaries; compiled pairs accept either form.

The domain kind is resolved once, in :func:`build_domain`, from the
declaration's type. Dual domains require an explicit
:class:`RepresentationProvider`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from enum import Enum, StrEnum
from typing import Any

from statetransit.errors import (
    DomainKindError,
    DuplicateAlternateError,
    InvalidRepresentationError,
    UnknownStateError,
)

WILDCARD = "*"

Pair = tuple[Any, Any]


class DomainKind(StrEnum):
    """How a domain resolves membership and wildcards."""

    FLAT = "flat"
    DUAL = "dual"


def is_wildcard(value: Any) -> bool:
    """True only for the literal ``"*"`` string."""
    return isinstance(value, str) and value == WILDCARD


# ---------------------------------------------------------------------------
# Representation providers
# ---------------------------------------------------------------------------


class RepresentationProvider(ABC):
    """Capability interface for dual-representation domains."""

    @abstractmethod
    def representation_map(self) -> Mapping[Any, Any]:
        """Ordered mapping of primary state to its alternate representation."""
        ...

    @abstractmethod
    def is_primary_type(self, value: Any) -> bool:
        """Whether *value* has the primary representation's type."""
        ...

    @abstractmethod
    def is_valid_primary(self, value: Any) -> bool:
        """Whether *value* names a known primary state."""
        ...


class EnumProvider(RepresentationProvider):
    """Enum members are primaries, member values are alternates."""

    def __init__(self, enum_cls: type[Enum]) -> None:
        self.enum_cls = enum_cls

    def representation_map(self) -> Mapping[Any, Any]:
        return {member: member.value for member in self.enum_cls}

    def is_primary_type(self, value: Any) -> bool:
        return isinstance(value, self.enum_cls)

    def is_valid_primary(self, value: Any) -> bool:
        return isinstance(value, self.enum_cls)

    def __repr__(self) -> str:
        return f"EnumProvider({self.enum_cls.__name__})"


class MappingProvider(RepresentationProvider):
    """Mapping keys are primaries, mapping values are alternates.

    The primary type is the set of key types, so ``{"created": 0}``
    rejects ``0`` as a rule state but accepts any string key. When keys
    and values share a type, a value that is not also a key is still
    an alternate and is rejected the same way.
    """

    def __init__(self, mapping: Mapping[Any, Any]) -> None:
        self._mapping = dict(mapping)
        self._key_types = tuple({type(key) for key in self._mapping})
        self._alternate_only = frozenset(self._mapping.values()) - self._mapping.keys()

    def representation_map(self) -> Mapping[Any, Any]:
        return self._mapping

    def is_primary_type(self, value: Any) -> bool:
        if not isinstance(value, self._key_types):
            return False
        try:
            return value not in self._alternate_only
        except TypeError:
            return True

    def is_valid_primary(self, value: Any) -> bool:
        try:
            return value in self._mapping
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"MappingProvider({self._mapping!r})"


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------


class StateDomain(ABC):
    """Answers membership and wildcard enumeration for one rule set."""

    kind: DomainKind

    @abstractmethod
    def __contains__(self, value: object) -> bool: ...

    @abstractmethod
    def enumerate(self) -> tuple[Any, ...]:
        """States substituted for a wildcard, in stable order."""
        ...

    @abstractmethod
    def concrete_pairs(self, from_: Any, to: Any) -> list[Pair]:
        """Validate a wildcard-free candidate and return the pairs it yields."""
        ...


class FlatDomain(StateDomain):
    """A plain collection of distinct states."""

    kind = DomainKind.FLAT

    def __init__(self, states: Iterable[Any]) -> None:
        try:
            self._states = tuple(dict.fromkeys(states))
        except TypeError as exc:
            raise DomainKindError(states) from exc
        self._members = frozenset(self._states)

    def __contains__(self, value: object) -> bool:
        try:
            return value in self._members
        except TypeError:
            return False

    def enumerate(self) -> tuple[Any, ...]:
        return self._states

    def concrete_pairs(self, from_: Any, to: Any) -> list[Pair]:
        if from_ in self and to in self:
            return [(from_, to)]
        raise UnknownStateError(from_, to)

    def __repr__(self) -> str:
        return f"FlatDomain({list(self._states)!r})"


class DualDomain(StateDomain):
    """Primary states with one alternate representation each."""

    kind = DomainKind.DUAL

    def __init__(self, provider: RepresentationProvider) -> None:
        self.provider = provider
        self._alternates: dict[Any, Any] = dict(provider.representation_map())

        owners: dict[Any, Any] = {}
        for primary, alternate in self._alternates.items():
            if alternate in owners:
                raise DuplicateAlternateError(alternate, (owners[alternate], primary))
            owners[alternate] = primary
        self._alternate_values = frozenset(owners)

    def __contains__(self, value: object) -> bool:
        try:
            return value in self._alternates or value in self._alternate_values
        except TypeError:
            return False

    def enumerate(self) -> tuple[Any, ...]:
        return tuple(self._alternates)

    def alternate(self, primary: Any) -> Any:
        """The alternate representation of *primary*."""
        return self._alternates[primary]

    def concrete_pairs(self, from_: Any, to: Any) -> list[Pair]:
        for side, value in (("from", from_), ("to", to)):
            if not self.provider.is_primary_type(value):
                raise InvalidRepresentationError(from_, to, side=side)

        if not (self.provider.is_valid_primary(from_) and self.provider.is_valid_primary(to)):
            raise UnknownStateError(from_, to)

        alt_from = self.alternate(from_)
        alt_to = self.alternate(to)
        return [
            (from_, to),
            (alt_from, to),
            (from_, alt_to),
            (alt_from, alt_to),
        ]

    def __repr__(self) -> str:
        return f"DualDomain({self.provider!r})"


def build_domain(on: Any) -> StateDomain:
    """Resolve a domain declaration into a :class:`StateDomain`.

    Accepts an existing domain, an ``Enum`` subclass, a
    :class:`RepresentationProvider`, a mapping of primary to alternate,
    or any non-string iterable of states.
    """
    if isinstance(on, StateDomain):
        return on
    if isinstance(on, type):
        if issubclass(on, Enum):
            return DualDomain(EnumProvider(on))
        raise DomainKindError(on)
    if isinstance(on, RepresentationProvider):
        return DualDomain(on)
    if isinstance(on, Mapping):
        return DualDomain(MappingProvider(on))
    if isinstance(on, (str, bytes)) or not isinstance(on, Iterable):
        raise DomainKindError(on)
    return FlatDomain(on)
