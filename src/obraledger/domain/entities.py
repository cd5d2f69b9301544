"""Domain model entities for obraledger.

These are pure data classes representing accounting concepts, independent of
the database schema. Reports are derived values and are never stored.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from obraledger.domain.errors import MalformedMovementError
from obraledger.domain.money import ZERO, MoneyLike, is_whole_cents, to_decimal, to_money


class Side(str, Enum):
    """Side of a movement line."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "Side":
        return Side.CREDIT if self is Side.DEBIT else Side.DEBIT


class ReferenceType(str, Enum):
    """Kind of business document a ledger entry was recorded for."""

    INVOICE = "invoice"
    PURCHASE_ORDER = "purchase_order"
    PURCHASE_INVOICE = "purchase_invoice"
    PAYMENT = "payment"
    EXPENSE = "expense"
    INVENTORY = "inventory"


@dataclass(frozen=True)
class Movement:
    """One debit or credit line against an account.

    The side is a tag, so a line can never carry both a debit and a credit.
    """

    account_code: str
    amount: Decimal
    side: Side

    def __post_init__(self) -> None:
        code = str(self.account_code).strip()
        if not code:
            raise MalformedMovementError("Movement requires an account code")
        if not is_whole_cents(self.amount):
            raise MalformedMovementError(
                f"Movement amount {self.amount} for account {code} has fractions of a cent"
            )
        amount = to_money(self.amount)
        if amount <= ZERO:
            raise MalformedMovementError(
                f"Movement amount for account {code} must be greater than zero"
            )
        object.__setattr__(self, "account_code", code)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "side", Side(self.side))

    @classmethod
    def debit_line(cls, account_code: str, amount: MoneyLike) -> "Movement":
        return cls(account_code=account_code, amount=amount, side=Side.DEBIT)

    @classmethod
    def credit_line(cls, account_code: str, amount: MoneyLike) -> "Movement":
        return cls(account_code=account_code, amount=amount, side=Side.CREDIT)

    @classmethod
    def from_amounts(
        cls,
        account_code: str,
        debit: Optional[MoneyLike] = None,
        credit: Optional[MoneyLike] = None,
    ) -> "Movement":
        """Build a movement from the two-column debit/credit representation.

        A missing or zero value counts as "not set".

        Raises:
            MalformedMovementError: If both or neither side is set
        """
        debit_amount = to_decimal(debit) if debit is not None else ZERO
        credit_amount = to_decimal(credit) if credit is not None else ZERO

        if debit_amount != ZERO and credit_amount != ZERO:
            raise MalformedMovementError(
                f"Account {account_code} cannot have both a debit and a credit"
            )
        if debit_amount == ZERO and credit_amount == ZERO:
            raise MalformedMovementError(
                f"Account {account_code} must have either a debit or a credit"
            )
        if debit_amount != ZERO:
            return cls.debit_line(account_code, debit)
        return cls.credit_line(account_code, credit)

    @property
    def debit(self) -> Decimal:
        return self.amount if self.side is Side.DEBIT else ZERO

    @property
    def credit(self) -> Decimal:
        return self.amount if self.side is Side.CREDIT else ZERO

    def reversed(self) -> "Movement":
        """Return the offsetting movement (same account and amount, other side)."""
        return Movement(
            account_code=self.account_code, amount=self.amount, side=self.side.opposite
        )


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry domain entity. Append-only: never updated or deleted."""

    id: int
    date: date
    description: str
    movements: tuple[Movement, ...]
    reference_type: Optional[ReferenceType]
    reference_id: Optional[int]
    created_at: datetime

    @property
    def total_debit(self) -> Decimal:
        return sum((m.debit for m in self.movements), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((m.credit for m in self.movements), ZERO)


@dataclass(frozen=True)
class EntryDraft:
    """An entry that has been built but not yet recorded."""

    date: date
    description: str
    movements: tuple[Movement, ...]
    reference_type: Optional[ReferenceType] = None
    reference_id: Optional[int] = None


@dataclass(frozen=True)
class MovementRecord:
    """A movement joined with its parent entry, as listed in the journal."""

    id: int
    entry_id: int
    date: date
    description: str
    account_code: str
    debit: Decimal
    credit: Decimal
    reference_type: Optional[ReferenceType]
    reference_id: Optional[int]


@dataclass(frozen=True)
class MovementPage:
    """One page of a movement listing."""

    records: tuple[MovementRecord, ...]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit


@dataclass(frozen=True)
class AccountTotals:
    """Debit and credit sums for one account over a set of movements."""

    account_code: str
    total_debit: Decimal
    total_credit: Decimal

    def balance_for(self, side: Side) -> Decimal:
        """Balance seen from an account's normal side."""
        if side is Side.DEBIT:
            return self.total_debit - self.total_credit
        return self.total_credit - self.total_debit


@dataclass(frozen=True)
class TrialBalanceLine:
    """Per-account row of a trial balance."""

    account_code: str
    account_name: str
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal
    normal_balance: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance as of a date."""

    as_of: date
    lines: tuple[TrialBalanceLine, ...]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class StatementLine:
    """One account row of an income statement or balance sheet."""

    account_code: str
    account_name: str
    amount: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Revenue, costs and expenses over an inclusive period."""

    date_from: date
    date_to: date
    revenue: tuple[StatementLine, ...]
    costs: tuple[StatementLine, ...]
    expenses: tuple[StatementLine, ...]
    total_revenue: Decimal
    total_costs: Decimal
    total_operating_expenses: Decimal

    @property
    def gross_profit(self) -> Decimal:
        return self.total_revenue - self.total_costs

    @property
    def total_expenses(self) -> Decimal:
        """Every expense-class account, costs of sales included."""
        return self.total_costs + self.total_operating_expenses

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses


@dataclass(frozen=True)
class BalanceSheet:
    """Assets against liabilities and equity as of a date.

    ``current_earnings`` is the cumulative result of revenue and expense
    accounts that have not been closed into equity yet; it is part of
    ``total_equity``.
    """

    as_of: date
    assets: tuple[StatementLine, ...]
    liabilities: tuple[StatementLine, ...]
    equity: tuple[StatementLine, ...]
    current_earnings: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_assets == self.total_liabilities + self.total_equity


@dataclass(frozen=True)
class LedgerStats:
    """Headline figures for the month containing ``as_of``."""

    as_of: date
    total_entries: int
    month_entries: int
    month_revenue: Decimal
    month_expenses: Decimal

    @property
    def month_net_income(self) -> Decimal:
        return self.month_revenue - self.month_expenses
