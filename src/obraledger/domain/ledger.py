"""Ledger domain service: recording balanced entries and reading the journal."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from obraledger.domain.chart import DEFAULT_CHART, AccountType, ChartOfAccounts
from obraledger.domain.entities import (
    EntryDraft,
    LedgerEntry,
    LedgerStats,
    Movement,
    MovementPage,
    ReferenceType,
)
from obraledger.domain.errors import (
    InvalidRangeError,
    MalformedMovementError,
    NotFoundError,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
    entry_not_found,
)
from obraledger.domain.money import sum_money

if TYPE_CHECKING:
    from obraledger.database.base import Database

logger = logging.getLogger(__name__)

MIN_MOVEMENTS = 2
MAX_PAGE_SIZE = 100


def coerce_reference_type(
    reference_type: Union[ReferenceType, str, None],
) -> Optional[ReferenceType]:
    """Convert a reference type name into a ReferenceType.

    Raises:
        ValidationError: If the name is not a known reference type
    """
    if reference_type is None or isinstance(reference_type, ReferenceType):
        return reference_type
    try:
        return ReferenceType(reference_type)
    except ValueError:
        allowed = ", ".join(t.value for t in ReferenceType)
        raise ValidationError(
            f"Invalid reference type '{reference_type}'. Allowed: {allowed}"
        ) from None


def check_date_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    """Reject ranges whose start falls after their end."""
    if start_date is not None and end_date is not None and start_date > end_date:
        raise InvalidRangeError(start_date, end_date)


class LedgerService:
    """Service for recording and reading ledger entries."""

    def __init__(self, db: Database, chart: ChartOfAccounts = DEFAULT_CHART):
        """Initialize ledger service.

        Args:
            db: Database instance
            chart: Chart of accounts used to flag unknown codes
        """
        self.db = db
        self.chart = chart

    def validate_movements(self, movements: Sequence[Movement]) -> None:
        """Check the double-entry invariant for a set of movement lines.

        Raises:
            ValidationError: If fewer than two lines are given
            MalformedMovementError: If an item is not a Movement
            UnbalancedEntryError: If total debit differs from total credit
        """
        if len(movements) < MIN_MOVEMENTS:
            raise ValidationError(
                f"An entry needs at least {MIN_MOVEMENTS} movements (got {len(movements)})"
            )

        for index, movement in enumerate(movements):
            if not isinstance(movement, Movement):
                raise MalformedMovementError(
                    f"Movement {index + 1} is not a movement line: {movement!r}"
                )

        total_debit = sum_money(m.debit for m in movements)
        total_credit = sum_money(m.credit for m in movements)
        if total_debit != total_credit:
            raise UnbalancedEntryError(total_debit, total_credit)

    def record_entry(
        self,
        date: date,
        description: str,
        movements: Sequence[Movement],
        reference_type: Union[ReferenceType, str, None] = None,
        reference_id: Optional[int] = None,
    ) -> LedgerEntry:
        """Record a balanced ledger entry.

        Args:
            date: Entry date
            description: Free-text description
            movements: Movement lines (at least two)
            reference_type: Optional kind of source document
            reference_id: Optional ID of the source document

        Returns:
            The recorded LedgerEntry with its generated ID

        Raises:
            ValidationError: If the description is empty or the reference is invalid
            MalformedMovementError: If a movement line is malformed
            UnbalancedEntryError: If debits and credits differ
            StorageError: If the write fails; nothing is recorded
        """
        description = (description or "").strip()
        if not description:
            raise ValidationError("Entry description must not be empty")

        reference = coerce_reference_type(reference_type)
        if reference_id is not None and reference is None:
            raise ValidationError("reference_id requires a reference_type")

        movements = list(movements)
        self.validate_movements(movements)
        self._warn_unknown_accounts(movements)

        entry_id = self.db.create_entry(
            date=date,
            description=description,
            movements=movements,
            reference_type=reference,
            reference_id=reference_id,
        )
        logger.info(
            "Recorded ledger entry %s on %s (%s movements, %s)",
            entry_id,
            date,
            len(movements),
            sum_money(m.debit for m in movements),
        )
        return self.require_entry(entry_id)

    def record_draft(self, draft: EntryDraft) -> LedgerEntry:
        """Record an entry built by a posting rule."""
        return self.record_entry(
            date=draft.date,
            description=draft.description,
            movements=draft.movements,
            reference_type=draft.reference_type,
            reference_id=draft.reference_id,
        )

    def reverse_entry(
        self, entry_id: int, date: date, description: Optional[str] = None
    ) -> LedgerEntry:
        """Record an offsetting entry that cancels an existing one.

        Entries are never edited; corrections go through a new entry with
        every movement on the opposite side.

        Raises:
            NotFoundError: If the entry does not exist
        """
        original = self.require_entry(entry_id)
        reversal = self.record_entry(
            date=date,
            description=description or f"Reversal of entry {original.id}: {original.description}",
            movements=[m.reversed() for m in original.movements],
            reference_type=original.reference_type,
            reference_id=original.reference_id,
        )
        logger.info("Entry %s reversed by entry %s", original.id, reversal.id)
        return reversal

    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get entry by ID, or None if not found."""
        return self.db.get_entry(entry_id)

    def require_entry(self, entry_id: int) -> LedgerEntry:
        """Get entry by ID or raise NotFoundError."""
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Union[ReferenceType, str, None] = None,
    ) -> list[LedgerEntry]:
        """List entries, newest first."""
        check_date_range(start_date, end_date)
        return self.db.list_entries(
            start_date=start_date,
            end_date=end_date,
            reference_type=coerce_reference_type(reference_type),
        )

    def list_movements(
        self,
        account_code: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Union[ReferenceType, str, None] = None,
        page: int = 1,
        limit: int = 10,
    ) -> MovementPage:
        """List one page of journal movements.

        Args:
            account_code: Optional exact account code filter
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            reference_type: Optional reference type filter
            page: Page number, starting at 1
            limit: Page size, between 1 and 100

        Raises:
            ValidationError: If page or limit is out of bounds
            InvalidRangeError: If start_date is after end_date
        """
        if page < 1:
            raise ValidationError(f"Page must be 1 or greater (got {page})")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE} (got {limit})")
        check_date_range(start_date, end_date)
        reference = coerce_reference_type(reference_type)

        total = self.db.count_movements(
            account_code=account_code,
            start_date=start_date,
            end_date=end_date,
            reference_type=reference,
        )
        records = self.db.list_movements(
            account_code=account_code,
            start_date=start_date,
            end_date=end_date,
            reference_type=reference,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return MovementPage(records=tuple(records), page=page, limit=limit, total=total)

    def get_stats(self, as_of: date) -> LedgerStats:
        """Entry counts and revenue/expense figures for the month of ``as_of``."""
        month_start = as_of.replace(day=1)
        month_end = month_start + relativedelta(months=1, days=-1)

        revenue = self.db.get_account_totals(
            start_date=month_start, end_date=month_end, account_prefix=AccountType.REVENUE.prefix
        )
        expenses = self.db.get_account_totals(
            start_date=month_start, end_date=month_end, account_prefix=AccountType.EXPENSE.prefix
        )

        return LedgerStats(
            as_of=as_of,
            total_entries=self.db.count_entries(),
            month_entries=self.db.count_entries(start_date=month_start, end_date=month_end),
            month_revenue=sum_money(t.balance_for(AccountType.REVENUE.normal_side) for t in revenue),
            month_expenses=sum_money(
                t.balance_for(AccountType.EXPENSE.normal_side) for t in expenses
            ),
        )

    def _warn_unknown_accounts(self, movements: Sequence[Movement]) -> None:
        for movement in movements:
            code = movement.account_code
            if code not in self.chart:
                logger.warning("Entry uses account %s which is not in the chart of accounts", code)
            try:
                self.chart.classify(code)
            except UnknownAccountError:
                logger.warning("Account %s does not belong to any account class", code)
