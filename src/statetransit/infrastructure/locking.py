"""Optimistic-lock persistence for validated changesets.

Transition checks compare against the ``old`` value the changeset was
built from. Writing through :func:`apply_changeset` makes the UPDATE
conditional on that read still being current: the row must keep its
key and its version counter, otherwise :class:`StaleRecordError` is
raised and nothing is written.

SQLAlchemy Core only; the helper never opens its own transaction.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Table, select, update
from sqlalchemy.engine import Connection

from statetransit.errors import InvalidChangesetError, StaleRecordError
from statetransit.services.changeset import Changeset

logger = logging.getLogger(__name__)


def apply_changeset(
    conn: Connection,
    table: Table,
    changeset: Changeset,
    *,
    key: str = "id",
    lock_column: str | None = "lock_version",
) -> int | None:
    """Write *changeset*'s pending changes to *table*.

    Returns the new lock version, or None when *lock_column* is None. With
    no lock column and no pending changes nothing is written, but the row
    must still exist.

    Raises :class:`InvalidChangesetError` if the changeset has errors and
    :class:`StaleRecordError` if no row matched.
    """
    if not changeset.valid:
        raise InvalidChangesetError(changeset.errors_on())

    key_value = changeset.get_original(key)
    values: dict[str, Any] = dict(changeset.changes)
    stmt = update(table).where(table.c[key] == key_value)

    new_version: int | None = None
    if lock_column is not None:
        current = changeset.get_original(lock_column)
        new_version = (current or 0) + 1
        stmt = stmt.where(table.c[lock_column] == current)
        values[lock_column] = new_version

    if values:
        matched = conn.execute(stmt.values(**values)).rowcount
    else:
        # Nothing to write; still confirm the row is there.
        exists = select(table.c[key]).where(table.c[key] == key_value)
        matched = len(conn.execute(exists).all())

    if matched == 0:
        raise StaleRecordError(
            f"{table.name} row {key}={key_value!r} changed since it was read"
        )

    logger.debug("Applied %s to %s row %r", sorted(changeset.changes), table.name, key_value)
    return new_version
