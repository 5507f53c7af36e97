"""Changeset: the mutation-tracking record consumed by the validator.

A changeset pairs a record's original data with pending assignments
and accumulates per-field errors. Validation never raises on bad data;
callers check :attr:`Changeset.valid` before persisting.

Any object implementing :class:`ChangeTracker` can be validated. The
:class:`Changeset` here is the in-memory implementation and works over
plain objects, mappings and SQLAlchemy ``Row`` results.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, Field

from statetransit.services.messages import render_message


class FieldError(BaseModel):
    """One validation error attached to a field.

    The template and its keys are kept apart so callers can re-render
    or translate the message.
    """

    model_config = {"frozen": True}

    field: str
    template: str
    keys: dict[str, Any] = Field(default_factory=dict)

    @property
    def message(self) -> str:
        return render_message(self.template, self.keys)


class ChangeTracker(Protocol):
    """What the validator needs from a mutation-tracking object."""

    @property
    def schema(self) -> type | None: ...

    def has_change(self, field: str) -> bool: ...

    def get_field(self, field: str) -> Any: ...

    def get_original(self, field: str) -> Any: ...

    def add_error(self, field: str, message: str, **keys: Any) -> Any: ...


@dataclass
class Changeset:
    """Original data plus pending changes and accumulated errors.

    Attributes:
        data: The record as last read (object, mapping or Row).
        changes: Pending assignments keyed by field name.
        schema: Type owning the record's transition rules. Defaults to
            ``type(data)``.
        errors: Field errors in the order they were added.
    """

    data: Any
    changes: dict[str, Any] = field(default_factory=dict)
    schema: type | None = None
    errors: list[FieldError] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.schema is None:
            self.schema = type(self.data)

    @classmethod
    def change(
        cls,
        data: Any,
        changes: Mapping[str, Any] | None = None,
        *,
        schema: type | None = None,
        **kwargs: Any,
    ) -> Changeset:
        """Build a changeset keeping only values that differ from *data*."""
        pending = {**(changes or {}), **kwargs}
        cs = cls(data, schema=schema)
        cs.changes = {
            name: value for name, value in pending.items() if value != cs.get_original(name)
        }
        return cs

    @property
    def valid(self) -> bool:
        return not self.errors

    def has_change(self, field: str) -> bool:
        return field in self.changes

    def get_original(self, field: str) -> Any:
        if isinstance(self.data, Mapping):
            return self.data.get(field)
        return getattr(self.data, field, None)

    def get_field(self, field: str) -> Any:
        """Pending value if there is one, else the original."""
        if field in self.changes:
            return self.changes[field]
        return self.get_original(field)

    def add_error(self, field: str, message: str, **keys: Any) -> Changeset:
        self.errors.append(FieldError(field=field, template=message, keys=keys))
        return self

    def errors_on(self) -> dict[str, list[str]]:
        """Rendered error messages grouped by field."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped
