"""SQLite database engine and schema via SQLAlchemy Core."""

from notealias.infrastructure.database.engine import create_db_engine, init_database
from notealias.infrastructure.database.schema import aliases, documents, metadata, names

__all__ = [
    "aliases",
    "create_db_engine",
    "documents",
    "init_database",
    "metadata",
    "names",
]
