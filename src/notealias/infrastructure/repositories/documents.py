"""DocumentStore — persistence for documents joined with their aliases.

Documents carry a ``version`` counter. Every alias mutation bumps it with
a compare-and-set, so a writer holding a stale read fails loudly with
:class:`WriteConflictError` instead of overwriting a concurrent change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from notealias.infrastructure.database.schema import (
    NAME_KIND_PUBLIC_ID,
    aliases,
    documents,
    names,
)
from notealias.infrastructure.repositories.aliases import AliasStore

if TYPE_CHECKING:
    from sqlalchemy import Connection


class WriteConflictError(Exception):
    """A transactional write lost a race and may be retried."""


class DocumentStore:
    """Encapsulates SQL for documents and the shared name index."""

    def __init__(self, conn: Connection, alias_store: AliasStore) -> None:
        self._conn = conn
        self._aliases = alias_store

    def create(self, public_id: str, *, created: str) -> None:
        """Insert a document and claim its public ID's name slot.

        Raises:
            sqlalchemy.exc.IntegrityError: *public_id* is already taken.
        """
        self._conn.execute(
            insert(documents).values(public_id=public_id, version=1, created=created, modified=created)
        )
        self._conn.execute(
            insert(names).values(name=public_id, kind=NAME_KIND_PUBLIC_ID, document_id=public_id)
        )

    def find_by_public_id(self, public_id: str) -> dict[str, Any] | None:
        """Return the document with its aliases, or None."""
        row = self._conn.execute(
            select(documents).where(documents.c.public_id == public_id)
        ).first()
        if row is None:
            return None
        return {
            "public_id": str(row.public_id),
            "version": int(row.version),
            "created": row.created,
            "modified": row.modified,
            "aliases": self._aliases.list_for_document(str(row.public_id)),
        }

    def find_by_alias(self, name: str) -> dict[str, Any] | None:
        """Return the document owning the alias *name*, or None."""
        row = self._conn.execute(
            select(aliases.c.document_id).where(aliases.c.name == name)
        ).first()
        if row is None:
            return None
        return self.find_by_public_id(str(row.document_id))

    def name_taken(self, name: str) -> str | None:
        """Return the kind of the name slot holding *name*, or None if free."""
        row = self._conn.execute(select(names.c.kind).where(names.c.name == name)).first()
        return str(row.kind) if row is not None else None

    def save(self, public_id: str, *, expected_version: int, modified: str) -> int:
        """Bump the document version if it still equals *expected_version*.

        Returns the new version.

        Raises:
            WriteConflictError: The stored version moved on since it was read.
        """
        result = self._conn.execute(
            update(documents)
            .where(
                documents.c.public_id == public_id,
                documents.c.version == expected_version,
            )
            .values(version=expected_version + 1, modified=modified)
        )
        if result.rowcount != 1:
            msg = f"Document {public_id} changed concurrently (expected version {expected_version})"
            raise WriteConflictError(msg)
        return expected_version + 1
