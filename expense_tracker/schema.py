"""
Local SQLite Schema Initialization.

Defines the schema of the local database and provides a single
entry-point -- :func:`initialize_schema` -- that creates all required
tables idempotently.  A ``schema_version`` table records the applied
version so later changes can be rolled forward.

Usage::

    from expense_tracker.database import DatabaseManager
    from expense_tracker.schema import initialize_schema

    initialize_schema(db.sqlite, logger)
"""

from __future__ import annotations

import sqlite3

from expense_tracker.logger import StructuredLogger

__all__ = ["CURRENT_SCHEMA_VERSION", "initialize_schema"]

CURRENT_SCHEMA_VERSION: int = 1

_TABLE_DEFINITIONS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER NOT NULL
    )
    """,
    # One row per storage key; the token is the only value stored today.
    """
    CREATE TABLE IF NOT EXISTS encrypted_tokens (
        storage_key TEXT PRIMARY KEY,
        encrypted_payload BLOB NOT NULL,
        nonce BLOB NOT NULL,
        tag BLOB NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
)


def _current_version(conn: sqlite3.Connection) -> int:
    try:
        row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    return int(row[0]) if row and row[0] is not None else 0


def initialize_schema(conn: sqlite3.Connection, logger: StructuredLogger) -> None:
    """Create every table and stamp the schema version.

    Idempotent: running it against an up-to-date database is a no-op.

    Raises:
        sqlite3.Error: If a DDL statement fails; the transaction is
            rolled back first.
    """
    version = _current_version(conn)
    if version >= CURRENT_SCHEMA_VERSION:
        logger.debug("Local schema already at version %d.", version)
        return

    try:
        for ddl in _TABLE_DEFINITIONS:
            conn.execute(ddl)
        conn.execute("DELETE FROM schema_version")
        conn.execute(
            "INSERT INTO schema_version (version) VALUES (?)",
            (CURRENT_SCHEMA_VERSION,),
        )
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        logger.exception("Local schema initialization failed.")
        raise

    logger.info(
        "Local schema initialized (version %d -> %d).",
        version,
        CURRENT_SCHEMA_VERSION,
    )
