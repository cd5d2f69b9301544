"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class UnbalancedEntryError(ValidationError):
    """Ledger entry whose debits and credits do not match."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.difference = total_debit - total_credit
        super().__init__(unbalanced_entry(total_debit, total_credit))


class MalformedMovementError(ValidationError):
    """Movement line with both or neither of debit/credit, or a bad amount."""


class InvalidRangeError(ValidationError):
    """Date range whose start falls after its end."""

    def __init__(self, date_from: date, date_to: date):
        self.date_from = date_from
        self.date_to = date_to
        super().__init__(invalid_range(date_from, date_to))


class UnknownAccountError(NotFoundError):
    """Account code missing from the chart of accounts."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(account_not_found(code))


class InvalidLineItemError(ValidationError):
    """Quotation line item with a non-positive quantity or price."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class StorageError(DomainError):
    """Failure in the storage layer; the write was not applied."""


def account_not_found(code: str) -> str:
    """Return message for an account code missing from the chart."""
    return f"Account '{code}' is not defined in the chart of accounts"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def unbalanced_entry(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for an entry whose sides do not match."""
    return (
        f"Entry is not balanced: debit {total_debit} != credit {total_credit} "
        f"(difference {total_debit - total_credit})"
    )


def invalid_range(date_from: date, date_to: date) -> str:
    """Return message for a reversed date range."""
    return f"Invalid date range: {date_from} is after {date_to}"


def invalid_line_item(index: int, field: str, value: Decimal) -> str:
    """Return message for an invalid quotation line."""
    return f"Line item {index + 1}: {field} must be greater than zero (got {value})"
