"""
Data Models Package.

Re-exports all Pydantic models:
    from expense_tracker.models import Transaction, Category, UserProfile
    from expense_tracker.models import TransactionType, SessionStatus, Route
"""

from __future__ import annotations

from expense_tracker.models.enums import Route, SessionStatus, TransactionType, TypeFilter
from expense_tracker.models.user import UserProfile
from expense_tracker.models.category import Category
from expense_tracker.models.transaction import (
    Transaction,
    TransactionInput,
    TransactionPayload,
    TransactionQuery,
)
from expense_tracker.models.auth_models import (
    AuthErrorCode,
    AuthPayload,
    AuthResult,
    RegisterProfile,
    ValidationResult,
)
from expense_tracker.models.service_models import ApiEnvelope, TransactionSummary

__all__ = [
    "Route",
    "SessionStatus",
    "TransactionType",
    "TypeFilter",
    "UserProfile",
    "Category",
    "Transaction",
    "TransactionInput",
    "TransactionPayload",
    "TransactionQuery",
    "AuthErrorCode",
    "AuthPayload",
    "AuthResult",
    "RegisterProfile",
    "ValidationResult",
    "ApiEnvelope",
    "TransactionSummary",
]
