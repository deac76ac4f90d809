"""Store — the durable keyed store with per-request transactions.

The Store is the single dependency injected into every service. It owns
the SQLAlchemy engine and hands out :class:`StoreTransaction` objects
bound to one connection, with both repositories attached:

- Write transactions start with ``BEGIN IMMEDIATE`` so the uniqueness
  checks and the inserts that follow them see the same database state.
- Read transactions use a deferred ``BEGIN`` and never block writers
  (WAL mode).

SQLite lock timeouts surface as :class:`WriteConflictError`, the same
error a failed version compare-and-set raises, so callers retry both the
same way.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy.exc import OperationalError

from notealias.infrastructure.database.engine import init_database
from notealias.infrastructure.repositories.aliases import AliasStore
from notealias.infrastructure.repositories.documents import DocumentStore, WriteConflictError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from notealias.config.settings import NoteAliasSettings

logger = logging.getLogger(__name__)


def _is_lock_error(exc: OperationalError) -> bool:
    message = str(exc.orig) if exc.orig is not None else str(exc)
    return "database is locked" in message or "database is busy" in message


@dataclass
class StoreTransaction:
    """Active transaction with its connection and repositories."""

    conn: Connection
    aliases: AliasStore = field(init=False)
    documents: DocumentStore = field(init=False)

    def __post_init__(self) -> None:
        self.aliases = AliasStore(self.conn)
        self.documents = DocumentStore(self.conn, self.aliases)


class Store:
    """Repository root encapsulating database access.

    Constructed once per process from :class:`NoteAliasSettings`. Holds no
    per-request state: everything a request reads or writes goes through
    :meth:`transaction`.
    """

    def __init__(self, settings: NoteAliasSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.db_path, busy_timeout=settings.store.busy_timeout
        )

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> NoteAliasSettings:
        return self._settings

    @contextmanager
    def transaction(self, *, write: bool = True) -> Iterator[StoreTransaction]:
        """Run one unit of work in a single database transaction.

        Commits when the block exits normally, rolls back on any exception.

        Usage::

            with store.transaction() as txn:
                doc = txn.documents.find_by_public_id(public_id)
                txn.aliases.create(public_id, "my-alias", primary=True, created=now)

        Raises:
            WriteConflictError: SQLite could not take the lock in time.
        """
        try:
            with self._engine.connect() as conn:
                conn.execution_options(sqlite_immediate=write)
                with conn.begin():
                    yield StoreTransaction(conn=conn)
        except OperationalError as exc:
            if _is_lock_error(exc):
                logger.debug("Store transaction hit a lock timeout: %s", exc)
                raise WriteConflictError(str(exc)) from exc
            raise

    def close(self) -> None:
        """Dispose of pooled connections."""
        self._engine.dispose()
