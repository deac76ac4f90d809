"""SQLAlchemy Core table definitions for the notealias database.

``names`` is the single uniqueness index over both namespaces: every
document's public ID and every alias name owns exactly one row there, so
a collision between any two of them fails at insert time regardless of
which process wins the race.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

NAME_KIND_PUBLIC_ID = "public_id"
NAME_KIND_ALIAS = "alias"

documents = Table(
    "documents",
    metadata,
    Column("public_id", Text, primary_key=True),
    Column("version", Integer, nullable=False, default=1, server_default="1"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

names = Table(
    "names",
    metadata,
    Column("name", Text, primary_key=True),
    Column("kind", Text, nullable=False),  # public_id | alias
    Column(
        "document_id",
        Text,
        ForeignKey("documents.public_id", ondelete="CASCADE"),
        nullable=False,
    ),
)

aliases = Table(
    "aliases",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "name",
        Text,
        ForeignKey("names.name", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("is_primary", Integer, nullable=False, default=0, server_default="0"),
    Column(
        "document_id",
        Text,
        ForeignKey("documents.public_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("created", Text, nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

Index("ix_aliases_document", aliases.c.document_id)
Index("ix_names_document", names.c.document_id)

# At most one primary alias per document, enforced by SQLite on every write.
Index(
    "ux_aliases_one_primary",
    aliases.c.document_id,
    unique=True,
    sqlite_where=aliases.c.is_primary == 1,
)
