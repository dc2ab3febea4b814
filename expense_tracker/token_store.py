"""
Authentication Token Persistence.

The bearer token is the only piece of session state that survives a
restart.  ``SessionManager`` writes it through a ``TokenStore`` whenever
it is set, removes it whenever it is cleared, and reads it once at
startup.

Two implementations:

- ``EncryptedTokenStore`` keeps the token in the local SQLite
  ``encrypted_tokens`` table, encrypted with AES-256-GCM.
- ``MemoryTokenStore`` keeps it in process memory only.

Security model
--------------
The AES key is derived at runtime from machine identity (hostname + OS
username) via PBKDF2-HMAC-SHA256 with a per-installation random salt.
The key is never persisted.  A copied database file is useless on a
different machine or account; decryption failures are treated as "no
token" so a corrupted row can never half-authenticate the client.
"""

from __future__ import annotations

import getpass
import os
import socket
import sqlite3
import stat
from pathlib import Path
from typing import Optional, Protocol

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2

from expense_tracker.database import DatabaseManager
from expense_tracker.logger import StructuredLogger


class TokenStore(Protocol):
    """Persistence contract used by ``SessionManager``."""

    def load(self) -> Optional[str]: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """Process-local token storage; nothing touches the disk."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token: Optional[str] = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class EncryptedTokenStore:
    """AES-256-GCM encrypted token row in the local SQLite database.

    Parameters
    ----------
    db:
        An initialised ``DatabaseManager`` whose schema contains the
        ``encrypted_tokens`` table.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    storage_key:
        Fixed key the token is stored under.
    salt_path:
        File holding the per-installation 32-byte random salt.  Created
        with owner-only permissions on first use.
    kdf_iterations:
        PBKDF2 iteration count.
    """

    _KEY_LENGTH: int = 32  # 256 bits
    _SALT_LENGTH: int = 32

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        storage_key: str,
        salt_path: Path,
        kdf_iterations: int = 600_000,
    ) -> None:
        self._db: DatabaseManager = db
        self._logger: StructuredLogger = logger
        self._storage_key: str = storage_key
        self._salt_path: Path = salt_path
        self._kdf_iterations: int = kdf_iterations
        self._key: Optional[bytes] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> Optional[str]:
        """Return the decrypted token, or ``None``.

        ``None`` is returned when no row exists, when the row cannot be
        read, or when decryption fails (corrupted data or machine
        identity changed).
        """
        try:
            row = self._db.sqlite.execute(
                "SELECT encrypted_payload, nonce, tag FROM encrypted_tokens "
                "WHERE storage_key = ?",
                (self._storage_key,),
            ).fetchone()
        except (sqlite3.Error, RuntimeError) as exc:
            self._logger.warning("Failed to read persisted token: %s", exc)
            return None

        if row is None:
            self._logger.debug("No persisted token found.")
            return None

        try:
            cipher = AES.new(self._derive_key(), AES.MODE_GCM, nonce=row["nonce"])
            plaintext: bytes = cipher.decrypt_and_verify(row["encrypted_payload"], row["tag"])
            return plaintext.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            self._logger.warning(
                "Decryption of persisted token failed (corrupted data or "
                "machine identity changed): %s",
                exc,
            )
            return None
        except OSError as exc:
            self._logger.warning("Token key derivation failed: %s", exc)
            return None

    def save(self, token: str) -> None:
        """Encrypt and upsert *token*.

        Failures are logged, not raised: the in-memory session stays
        valid, it just will not survive a restart.
        """
        try:
            cipher = AES.new(self._derive_key(), AES.MODE_GCM)
            ciphertext, tag = cipher.encrypt_and_digest(token.encode("utf-8"))
            nonce: bytes = cipher.nonce
        except (ValueError, OSError) as exc:
            self._logger.warning("Failed to encrypt token: %s", exc)
            return

        try:
            self._db.sqlite.execute(
                """
                INSERT INTO encrypted_tokens (storage_key, encrypted_payload, nonce, tag)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(storage_key) DO UPDATE SET
                    encrypted_payload = excluded.encrypted_payload,
                    nonce             = excluded.nonce,
                    tag               = excluded.tag,
                    updated_at        = CURRENT_TIMESTAMP
                """,
                (self._storage_key, ciphertext, nonce, tag),
            )
            self._db.sqlite.commit()
            self._logger.debug("Token persisted under '%s'.", self._storage_key)
        except (sqlite3.Error, RuntimeError) as exc:
            self._logger.warning("Failed to persist token: %s", exc)

    def clear(self) -> None:
        """Delete the persisted token.  Safe when none exists."""
        try:
            self._db.sqlite.execute(
                "DELETE FROM encrypted_tokens WHERE storage_key = ?",
                (self._storage_key,),
            )
            self._db.sqlite.commit()
            self._logger.debug("Persisted token cleared.")
        except (sqlite3.Error, RuntimeError) as exc:
            self._logger.error("Failed to clear persisted token: %s", exc)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _derive_key(self) -> bytes:
        """Derive (once) the 256-bit AES key from machine identity.

        Raises
        ------
        OSError
            If the salt file cannot be created or read, or the current
            user has no resolvable login name.
        """
        if self._key is None:
            try:
                user = getpass.getuser()
            except KeyError as exc:
                # No LOGNAME/USER env var and no passwd entry for the uid.
                raise OSError(f"Cannot determine the login name: {exc}") from exc
            identity: str = f"{socket.gethostname()}:{user}"
            self._key = PBKDF2(
                password=identity,
                salt=self._get_or_create_salt(),
                dkLen=self._KEY_LENGTH,
                count=self._kdf_iterations,
                hmac_hash_module=SHA256,
            )
        return self._key

    def _get_or_create_salt(self) -> bytes:
        """Return the per-installation salt, creating it on first run."""
        if self._salt_path.exists():
            data: bytes = self._salt_path.read_bytes()
            if len(data) == self._SALT_LENGTH:
                return data
            self._logger.warning(
                "Salt file has unexpected length (%d); regenerating.",
                len(data),
            )
        salt: bytes = os.urandom(self._SALT_LENGTH)
        self._salt_path.parent.mkdir(parents=True, exist_ok=True)
        self._salt_path.write_bytes(salt)
        try:
            self._salt_path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0o600
        except OSError as exc:
            self._logger.warning("Could not restrict salt file permissions: %s", exc)
        self._logger.info("Token encryption salt created at %s.", self._salt_path)
        return salt
