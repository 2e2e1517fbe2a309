"""Errors raised by the ledger engine.

All of them are deterministic functions of the input: retrying the same call
gives the same error, so nothing here is ever retried.
"""
from typing import Optional


class LedgerError(Exception):
    """Base class for every engine error."""


class InvalidSplit(LedgerError):
    """An expense's split policy and data cannot reconcile to its amount."""

    def __init__(self, message: str, expense_id: Optional[int] = None):
        super().__init__(message)
        self.expense_id = expense_id

    def __str__(self) -> str:
        message = super().__str__()
        if self.expense_id is None:
            return message
        return f"Expense {self.expense_id}: {message}"


class UnbalancedLedger(LedgerError):
    """Balances handed to the settlement minimizer do not sum to zero."""

    def __init__(self, total: int):
        super().__init__(f"Balances must sum to zero, got {total}")
        self.total = total


class InvalidQuery(LedgerError):
    """Malformed aggregation parameters."""
