"""statetransit — declarative state-transition rules and change validation.

Declare which ``(from, to)`` state changes are allowed, compile them once
into an immutable matcher, and validate pending changes on a record::

    from statetransit import Changeset, Transition, validate_transition

    class Todo:
        can_transit = Transition(
            on=["created", "scheduled", "doing", "overdued", "done", "closed"],
            rules={
                "*": "closed",
                "created": ["scheduled", "doing"],
                "scheduled": ["doing", "overdued"],
                "doing": ["created", "scheduled", "done"],
            },
        )

        def __init__(self, state):
            self.state = state

    cs = validate_transition(Changeset.change(Todo("done"), state="doing"), "state")
    cs.errors_on()  # {"state": ["cannot transit from done to doing"]}
"""

from statetransit.domain.matcher import Transition, TransitionMatcher, transit
from statetransit.domain.rules import expand_rules
from statetransit.domain.states import (
    WILDCARD,
    DualDomain,
    EnumProvider,
    FlatDomain,
    MappingProvider,
    RepresentationProvider,
    StateDomain,
    build_domain,
)
from statetransit.errors import (
    DomainKindError,
    InvalidRepresentationError,
    InvalidStrategyError,
    TransitError,
    UnknownStateError,
)
from statetransit.services.changeset import Changeset, ChangeTracker, FieldError
from statetransit.services.strategies import resolve_strategy
from statetransit.services.validate import (
    TransitionOutcome,
    TransitOptions,
    check_transition,
    validate_transition,
)

__all__ = [
    "WILDCARD",
    "ChangeTracker",
    "Changeset",
    "DomainKindError",
    "DualDomain",
    "EnumProvider",
    "FieldError",
    "FlatDomain",
    "InvalidRepresentationError",
    "InvalidStrategyError",
    "MappingProvider",
    "RepresentationProvider",
    "StateDomain",
    "TransitError",
    "TransitOptions",
    "Transition",
    "TransitionMatcher",
    "TransitionOutcome",
    "UnknownStateError",
    "build_domain",
    "check_transition",
    "expand_rules",
    "resolve_strategy",
    "transit",
    "validate_transition",
]
