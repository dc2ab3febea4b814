"""
Local Database Connection.

The client keeps exactly one piece of state on disk: the encrypted
authentication token (see ``EncryptedTokenStore``).  This module only
manages the raw SQLite *connection*; it contains no query logic.

Usage (dependency injection at app startup)::

    from expense_tracker.database import DatabaseManager
    from expense_tracker.logger import StructuredLogger

    db = DatabaseManager(
        sqlite_path=Path(config.TOKEN_DB_PATH),
        logger=StructuredLogger(name="expense_tracker.database"),
    )
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from expense_tracker.logger import StructuredLogger


class DatabaseManager:
    """Owns the local SQLite connection.

    Parameters
    ----------
    sqlite_path:
        Filesystem path for the SQLite database file, or ``":memory:"``.
        Parent directories are created when missing.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    """

    def __init__(self, sqlite_path: Path | str, logger: StructuredLogger) -> None:
        self._logger: StructuredLogger = logger
        self._sqlite_conn: Optional[sqlite3.Connection] = self._connect_sqlite(sqlite_path)

    @property
    def sqlite(self) -> sqlite3.Connection:
        """Return the open SQLite connection.

        Raises
        ------
        RuntimeError
            If :meth:`close` has already been called.
        """
        if self._sqlite_conn is None:
            raise RuntimeError("The local database connection is closed.")
        return self._sqlite_conn

    def close(self) -> None:
        """Close the local SQLite connection.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        if self._sqlite_conn is None:
            return
        try:
            self._sqlite_conn.close()
            self._logger.info("SQLite connection closed.")
        except sqlite3.ProgrammingError:
            pass
        self._sqlite_conn = None

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _connect_sqlite(self, path: Path | str) -> sqlite3.Connection:
        """Open (or create) a SQLite database.

        Raises
        ------
        PermissionError
            If the OS denies access to the database file or its directory.
        """
        target = str(path)
        try:
            if target != ":memory:":
                Path(target).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(target)
            conn.row_factory = sqlite3.Row
            if target != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL;")
            self._logger.info("SQLite database opened at %s", target)
            return conn
        except PermissionError as exc:
            msg = (
                f"Cannot open the local database at '{target}'. "
                "The file or its directory may be read-only or locked by "
                "another process.  Please check file permissions and try again."
            )
            self._logger.error(msg)
            raise PermissionError(msg) from exc
