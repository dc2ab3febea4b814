"""
Repository Layer Package.

Provides typed access to the remote API resources.  All network traffic
flows through repositories; services never build paths or parse
envelopes themselves.

Usage:
    from expense_tracker.repositories.transaction_repository import TransactionRepository
    from expense_tracker.repositories.user_repository import UserRepository
"""

from expense_tracker.repositories.base_repository import BaseRepository
from expense_tracker.repositories.category_repository import CategoryRepository
from expense_tracker.repositories.transaction_repository import TransactionRepository
from expense_tracker.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "TransactionRepository",
    "UserRepository",
]
