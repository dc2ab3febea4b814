"""
Expense Tracker Client Entry Point.

Bootstraps the dependency graph via constructor injection, initialises
the local SQLite schema that holds the encrypted token, restores the
persisted session and, when it resolves, performs the dashboard's
initial load of categories and transactions.  Every subsystem is wired
here; there are no module-level globals.

Usage::

    python main.py
"""

from __future__ import annotations

import asyncio
import atexit
import sys
from pathlib import Path

from expense_tracker.api_client import ApiClient
from expense_tracker.auth import SessionManager
from expense_tracker.config import AppConfig, get_config
from expense_tracker.database import DatabaseManager
from expense_tracker.errors import ApiError
from expense_tracker.logger import StructuredLogger, get_logger
from expense_tracker.models.enums import Route
from expense_tracker.schema import initialize_schema
from expense_tracker.services import ServiceContainer, create_services
from expense_tracker.token_store import EncryptedTokenStore


async def run(
    config: AppConfig,
    session: SessionManager,
    logger: StructuredLogger,
) -> int:
    """Restore the session and load the dashboard data.

    Returns the process exit code.
    """
    async with ApiClient(config=config, session=session, logger=get_logger("api")) as api:
        services: ServiceContainer = create_services(config=config, session=session, api=api)

        user = await services["auth_service"].initialize()
        if user is None:
            logger.info("No active session; sign in to continue.")
            return 0

        try:
            await asyncio.gather(
                services["category_store"].load(),
                services["transaction_store"].load(),
            )
        except ApiError as exc:
            logger.error("Initial dashboard load failed: %s", exc.message)
            return 1

        summary = services["transaction_store"].summary().formatted()
        logger.info(
            "Dashboard ready for %s: %d transaction(s), %d categories, balance %s.",
            user.display_name,
            len(services["transaction_store"]),
            len(services["category_store"]),
            summary["balance"],
            extra={"event": "DASHBOARD_READY", "user_id": user.id},
        )
        return 0


def main() -> int:
    """Application entry point; wire dependencies and run the bootstrap."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting Expense Tracker client...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Local database (token persistence only)
    # ------------------------------------------------------------------
    db = DatabaseManager(
        sqlite_path=Path(config.TOKEN_DB_PATH),
        logger=StructuredLogger(name="database"),
    )
    # close() is idempotent; this covers exits that skip the finally below.
    atexit.register(db.close)

    initialize_schema(db.sqlite, StructuredLogger(name="schema"))

    # ------------------------------------------------------------------
    # 3. Session (encrypted token store + navigation hook)
    # ------------------------------------------------------------------
    token_store = EncryptedTokenStore(
        db=db,
        logger=StructuredLogger(name="token_store"),
        storage_key=config.TOKEN_STORAGE_KEY,
        salt_path=Path(config.TOKEN_SALT_PATH),
        kdf_iterations=config.TOKEN_KDF_ITERATIONS,
    )

    def navigate(route: Route) -> None:
        logger.info("Showing %s", route.value, extra={"event": "NAVIGATE"})

    session = SessionManager(
        token_store=token_store,
        logger=StructuredLogger(name="session"),
        navigator=navigate,
    )

    # ------------------------------------------------------------------
    # 4. Run
    # ------------------------------------------------------------------
    try:
        return asyncio.run(run(config, session, logger))
    finally:
        db.close()
        logger.info("Expense Tracker client shut down.")


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
