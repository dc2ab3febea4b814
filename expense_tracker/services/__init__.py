"""
Business Logic Services Package.

Services depend on the Repository layer for remote access and on the
injected ``SessionManager`` for session state.

The ``create_services()`` factory wires every repository and service
together, returning a typed dict that the application layer can consume
without knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from expense_tracker.api_client import ApiClient
from expense_tracker.auth import SessionManager
from expense_tracker.config import AppConfig
from expense_tracker.logger import get_logger
from expense_tracker.repositories.category_repository import CategoryRepository
from expense_tracker.repositories.transaction_repository import TransactionRepository
from expense_tracker.repositories.user_repository import UserRepository
from expense_tracker.services.auth_service import AuthService
from expense_tracker.services.category_store import CategoryStore
from expense_tracker.services.transaction_store import TransactionStore


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    auth_service: AuthService
    transaction_store: TransactionStore
    category_store: CategoryStore


def create_services(
    config: AppConfig,
    session: SessionManager,
    api: ApiClient,
) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    entry-point calls it once at startup, after the ``ApiClient`` has
    been bound to *session*.

    Args:
        config: Application configuration.
        session: The one session every service shares.
        api: Authenticated request facade.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = get_logger("services")

    # ------------------------------------------------------------------
    # 1. Repositories (remote access layer)
    # ------------------------------------------------------------------
    user_repo = UserRepository(api=api, logger=logger)
    transaction_repo = TransactionRepository(api=api, logger=logger)
    category_repo = CategoryRepository(api=api, logger=logger)

    # ------------------------------------------------------------------
    # 2. Services
    # ------------------------------------------------------------------
    auth_service = AuthService(session=session, user_repo=user_repo, logger=logger)
    transaction_store = TransactionStore(repo=transaction_repo, logger=logger)
    category_store = CategoryStore(
        repo=category_repo,
        logger=logger,
        default_limit=config.CATEGORY_LOAD_LIMIT,
    )

    return ServiceContainer(
        auth_service=auth_service,
        transaction_store=transaction_store,
        category_store=category_store,
    )


__all__ = [
    "AuthService",
    "CategoryStore",
    "ServiceContainer",
    "TransactionStore",
    "create_services",
]
