"""Rule expansion: raw rule declarations into concrete ``(from, to)`` pairs.

A rule maps a source spec to a target spec. Each spec is a single state,
a list/tuple/set of states, or the wildcard ``"*"``. Rules are given as
a mapping or, when a source spec must repeat, as an iterable of
``(source, target)`` entries. Repeated entries accumulate.

Expansion is pure and runs once per declaration. Any unknown state
aborts the whole rule set; there is no partially compiled result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from itertools import product
from typing import Any

from statetransit.domain.states import Pair, StateDomain, build_domain, is_wildcard
from statetransit.errors import RuleSpecError

logger = logging.getLogger(__name__)

RuleSpec = Mapping[Any, Any] | Iterable[tuple[Any, Any]]

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def unwrap(spec: Any) -> list[Any]:
    """Turn a single state into a one-element list; sequences pass through.

    Examples:
        >>> unwrap("done")
        ['done']
        >>> unwrap(("created", "paid"))
        ['created', 'paid']
    """
    if isinstance(spec, _SEQUENCE_TYPES):
        return list(spec)
    return [spec]


def iter_rule_entries(rules: RuleSpec) -> Iterator[tuple[Any, Any]]:
    """Yield ``(source_spec, target_spec)`` entries from either rule shape."""
    if isinstance(rules, Mapping):
        yield from rules.items()
        return
    if isinstance(rules, (str, bytes)) or not isinstance(rules, Iterable):
        raise RuleSpecError(f"expected a mapping or pairs of rules, got {rules!r}")
    for entry in rules:
        if not isinstance(entry, (tuple, list)) or len(entry) != 2:
            raise RuleSpecError(f"expected a (source, target) rule entry, got {entry!r}")
        yield entry[0], entry[1]


def expand_transition(domain: StateDomain, from_: Any, to: Any) -> list[Pair]:
    """Resolve wildcards in one candidate, then validate it against *domain*.

    The source wildcard is expanded first; each resulting candidate keeps
    the literal target, which is resolved on the recursive call. ``* => *``
    therefore yields the full domain cross product.
    """
    if is_wildcard(from_):
        return [
            pair
            for state in domain.enumerate()
            for pair in expand_transition(domain, state, to)
        ]
    if is_wildcard(to):
        return [
            pair
            for state in domain.enumerate()
            for pair in expand_transition(domain, from_, state)
        ]
    return domain.concrete_pairs(from_, to)


def expand_rules(on: Any, rules: RuleSpec) -> frozenset[Pair]:
    """Compile *rules* over the domain declared by *on* into unique pairs."""
    domain = build_domain(on)
    pairs: list[Pair] = []
    entries = 0
    for source_spec, target_spec in iter_rule_entries(rules):
        entries += 1
        for from_, to in product(unwrap(source_spec), unwrap(target_spec)):
            pairs.extend(expand_transition(domain, from_, to))

    compiled = frozenset(pairs)
    logger.debug(
        "Compiled %d transition pairs from %d rule entries over %r",
        len(compiled),
        entries,
        domain,
    )
    return compiled
