"""Session and data-synchronization client for the Expense Tracker API."""

__version__ = "1.0.0"
