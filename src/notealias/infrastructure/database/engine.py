"""Database engine setup for SQLite with WAL mode.

SQLite is the durable store: WAL mode for concurrent readers, foreign
keys for alias cascade, unique indexes for name collisions.

pysqlite's implicit transaction handling is disabled so the engine can
emit its own ``BEGIN``. Connections carrying the ``sqlite_immediate``
execution option start with ``BEGIN IMMEDIATE``, which takes the write
lock up front and serializes read-check-write sequences across processes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import Connection, create_engine, event
from sqlalchemy.engine import Engine

from notealias.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path, *, busy_timeout: float = 5.0) -> Engine:
    """Create a SQLite engine with WAL mode, foreign keys, and explicit BEGIN."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": busy_timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        if conn.get_execution_options().get("sqlite_immediate"):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


def init_database(db_path: Path, *, busy_timeout: float = 5.0) -> Engine:
    """Initialize the notealias database at *db_path*.

    Creates the parent directory and all tables from :data:`schema.metadata`.
    Idempotent on an existing workspace.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, busy_timeout=busy_timeout)
    metadata.create_all(engine)
    return engine
