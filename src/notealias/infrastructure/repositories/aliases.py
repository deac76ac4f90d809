"""AliasStore — persistence for alias records and their name slots.

The caller owns the transaction: pass a ``Connection`` from an active
``Store.transaction()`` so alias writes commit or roll back together with
the owning document's version bump.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from notealias.infrastructure.database.schema import NAME_KIND_ALIAS, aliases, names

if TYPE_CHECKING:
    from sqlalchemy import Connection


def _alias_row(row: Any) -> dict[str, Any]:
    return {
        "id": int(row.id),
        "name": str(row.name),
        "primary": bool(row.is_primary),
        "document_id": str(row.document_id),
        "created": row.created,
    }


class AliasStore:
    """Encapsulates SQL for alias records."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def find_by_name(self, name: str) -> dict[str, Any] | None:
        """Return the alias called *name* on any document, or None."""
        row = self._conn.execute(select(aliases).where(aliases.c.name == name)).first()
        return _alias_row(row) if row is not None else None

    def list_for_document(self, document_id: str) -> list[dict[str, Any]]:
        """All aliases of *document_id* in insertion order."""
        rows = self._conn.execute(
            select(aliases).where(aliases.c.document_id == document_id).order_by(aliases.c.id)
        ).fetchall()
        return [_alias_row(row) for row in rows]

    def create(
        self,
        document_id: str,
        name: str,
        *,
        primary: bool,
        created: str,
    ) -> dict[str, Any]:
        """Claim the name slot for *name* and insert the alias record.

        Raises:
            sqlalchemy.exc.IntegrityError: *name* is already taken by an
                alias or a public ID.
        """
        self._conn.execute(
            insert(names).values(name=name, kind=NAME_KIND_ALIAS, document_id=document_id)
        )
        result = self._conn.execute(
            insert(aliases).values(
                name=name,
                is_primary=1 if primary else 0,
                document_id=document_id,
                created=created,
            )
        )
        alias_id = result.inserted_primary_key[0]
        return {
            "id": int(alias_id),
            "name": name,
            "primary": primary,
            "document_id": document_id,
            "created": created,
        }

    def save(self, alias_id: int, *, primary: bool) -> None:
        """Persist the primary flag of one alias."""
        self._conn.execute(
            update(aliases).where(aliases.c.id == alias_id).values(is_primary=1 if primary else 0)
        )

    def delete(self, alias_id: int) -> None:
        """Delete the alias record and release its name slot."""
        row = self._conn.execute(select(aliases.c.name).where(aliases.c.id == alias_id)).first()
        if row is None:
            return
        self._conn.execute(delete(aliases).where(aliases.c.id == alias_id))
        self._conn.execute(
            delete(names).where(names.c.name == row.name, names.c.kind == NAME_KIND_ALIAS)
        )
