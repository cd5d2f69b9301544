"""Abstract database interface.

The ledger is append-only: the interface offers no update or delete for
entries or movements.
"""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from obraledger.domain.entities import (
    AccountTotals,
    LedgerEntry,
    Movement,
    MovementRecord,
    ReferenceType,
)


class Database(ABC):
    """Abstract database interface for obraledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entry(
        self,
        date: date,
        description: str,
        movements: list[Movement],
        reference_type: Optional[ReferenceType] = None,
        reference_id: Optional[int] = None,
    ) -> int:
        """Create an entry and its movements atomically. Returns entry ID.

        Either every row is written or none is.

        Raises:
            StorageError: If the write fails; nothing is persisted
        """
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID, with its movements."""
        pass

    @abstractmethod
    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[ReferenceType] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries with optional filters, newest first."""
        pass

    @abstractmethod
    def count_entries(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> int:
        """Count ledger entries dated within the optional bounds."""
        pass

    # Movement operations
    @abstractmethod
    def list_movements(
        self,
        account_code: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[ReferenceType] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[MovementRecord]:
        """List movements joined to their entries, newest entry first.

        Args:
            account_code: Optional exact account code filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            reference_type: Optional reference type filter
            limit: Optional maximum number of rows
            offset: Number of rows to skip
        """
        pass

    @abstractmethod
    def count_movements(
        self,
        account_code: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[ReferenceType] = None,
    ) -> int:
        """Count movements matching the same filters as list_movements."""
        pass

    @abstractmethod
    def get_account_totals(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_prefix: Optional[str] = None,
    ) -> list[AccountTotals]:
        """Sum debits and credits per account, ordered by account code.

        Only accounts with at least one movement in range are returned.

        Args:
            start_date: Optional start date filter on the entry date (inclusive)
            end_date: Optional end date filter on the entry date (inclusive)
            account_prefix: Optional account code prefix filter
        """
        pass
