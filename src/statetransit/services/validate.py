"""Change validation — apply transition rules to a pending field change.

Pipeline: DETECT → RESOLVE → CHECK → ANNOTATE

``validate_transition`` cannot guarantee consistency under concurrent
updates: another writer may change the stored value between the read
that produced ``old`` and the write that commits ``new``. Callers that
need this guarantee persist through an optimistic lock, for example
:func:`statetransit.infrastructure.locking.apply_changeset`.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from statetransit.config.settings import get_settings
from statetransit.services.changeset import ChangeTracker
from statetransit.services.strategies import resolve_strategy

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=ChangeTracker)


def _default_required() -> bool:
    return get_settings().validator.required


def _default_message() -> str:
    return get_settings().validator.message


class TransitOptions(BaseModel):
    """Options recognised by :func:`validate_transition`.

    Attributes:
        required: When False, a field without a pending change is not
            checked at all.
        message: Rejection template with ``{old}``/``{new}`` placeholders.
        using: Strategy spec, see :func:`resolve_strategy`. ``None`` uses
            the schema's default query (``can_transit``).
    """

    model_config = {"frozen": True, "extra": "forbid", "arbitrary_types_allowed": True}

    required: bool = Field(default_factory=_default_required)
    message: str = Field(default_factory=_default_message)
    using: Any = None


class TransitionOutcome(BaseModel):
    """Result of checking one field: allowed, or rejected with its values."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    field: str
    allowed: bool
    skipped: bool = False
    old: Any = None
    new: Any = None


def check_transition(
    changeset: ChangeTracker,
    field: str,
    options: TransitOptions | None = None,
) -> TransitionOutcome:
    """Decide whether the change on *field* is allowed, without annotating."""
    opts = options or TransitOptions()
    strategy = resolve_strategy(opts.using)

    # ── DETECT ───────────────────────────────────────────────
    has_change = changeset.has_change(field)
    if not has_change and not opts.required:
        return TransitionOutcome(field=field, allowed=True, skipped=True)

    # ── RESOLVE ──────────────────────────────────────────────
    # Without a pending change get_field falls back to the original,
    # so the strategy sees (v, v).
    new = changeset.get_field(field)
    old = changeset.get_original(field)

    # ── CHECK ────────────────────────────────────────────────
    allowed = strategy.evaluate(changeset, old, new)
    return TransitionOutcome(field=field, allowed=allowed, old=old, new=new)


def validate_transition(changeset: C, field: str, **options: Any) -> C:
    """Validate the change on *field* and record a field error on rejection.

    Options: ``required`` (default True), ``message`` (default
    ``"cannot transit from {old} to {new}"``) and ``using`` (default: the
    schema's ``can_transit``).

    Returns the same changeset. A rejected transition is recorded with
    ``add_error``, never raised. A malformed ``using`` raises
    :class:`~statetransit.errors.InvalidStrategyError`.

    Usage::

        cs = Changeset.change(todo, state="done")
        validate_transition(cs, "state")
        validate_transition(cs, "state", using=Todo.can_close, required=False)
    """
    opts = TransitOptions(**options)
    outcome = check_transition(changeset, field, opts)

    # ── ANNOTATE ─────────────────────────────────────────────
    if not outcome.allowed:
        logger.debug(
            "Rejected transition on %s: %r -> %r",
            field,
            outcome.old,
            outcome.new,
        )
        changeset.add_error(field, opts.message, old=outcome.old, new=outcome.new)
    return changeset
