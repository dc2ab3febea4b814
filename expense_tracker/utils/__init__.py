"""Shared utility functions for the Expense Tracker client.

Convenience re-exports so that consumers can import directly from
``expense_tracker.utils`` (e.g. ``from expense_tracker.utils import
to_minor_units``).
"""

from expense_tracker.utils.value_codec import (
    format_currency,
    format_date,
    from_wire_date,
    to_display_amount,
    to_minor_units,
    to_wire_date,
)

__all__ = [
    "format_currency",
    "format_date",
    "from_wire_date",
    "to_display_amount",
    "to_minor_units",
    "to_wire_date",
]
