"""Financial statement derivation from ledger movements."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Sequence

from obraledger.domain.chart import DEFAULT_CHART, AccountType, ChartOfAccounts
from obraledger.domain.entities import (
    AccountTotals,
    BalanceSheet,
    IncomeStatement,
    Side,
    StatementLine,
    TrialBalance,
    TrialBalanceLine,
)
from obraledger.domain.errors import InvalidRangeError, UnknownAccountError
from obraledger.domain.money import ZERO, Money, sum_money

if TYPE_CHECKING:
    from obraledger.database.base import Database

logger = logging.getLogger(__name__)


class StatementService:
    """Service deriving trial balance, income statement and balance sheet."""

    def __init__(self, db: Database, chart: ChartOfAccounts = DEFAULT_CHART):
        """Initialize statement service.

        Args:
            db: Database instance
            chart: Chart of accounts used for names and classification
        """
        self.db = db
        self.chart = chart

    def trial_balance(self, as_of: date) -> TrialBalance:
        """Build the trial balance of every account with movements up to ``as_of``.

        ``balance`` is always debit minus credit; ``normal_balance`` is seen
        from the account's normal side (credit minus debit for liability,
        equity and revenue accounts).
        """
        totals = self.db.get_account_totals(end_date=as_of)

        lines = tuple(
            TrialBalanceLine(
                account_code=t.account_code,
                account_name=self.chart.display_name(t.account_code),
                total_debit=t.total_debit,
                total_credit=t.total_credit,
                balance=t.balance_for(Side.DEBIT),
                normal_balance=t.balance_for(self._normal_side(t.account_code)),
            )
            for t in totals
        )
        report = TrialBalance(
            as_of=as_of,
            lines=lines,
            total_debit=sum_money(line.total_debit for line in lines),
            total_credit=sum_money(line.total_credit for line in lines),
        )
        if not report.is_balanced:
            logger.error(
                "Trial balance as of %s is not balanced: debit %s, credit %s",
                as_of,
                report.total_debit,
                report.total_credit,
            )
        return report

    def income_statement(self, date_from: date, date_to: date) -> IncomeStatement:
        """Build the income statement for an inclusive period.

        Revenue accounts report credit minus debit; expense accounts report
        debit minus credit. Expense accounts under a cost prefix of the chart
        are listed separately as cost of sales.

        Raises:
            InvalidRangeError: If date_from is after date_to
        """
        if date_from > date_to:
            raise InvalidRangeError(date_from, date_to)

        revenue = self._lines(
            self.db.get_account_totals(
                start_date=date_from, end_date=date_to, account_prefix=AccountType.REVENUE.prefix
            ),
            AccountType.REVENUE,
        )
        expense_lines = self._lines(
            self.db.get_account_totals(
                start_date=date_from, end_date=date_to, account_prefix=AccountType.EXPENSE.prefix
            ),
            AccountType.EXPENSE,
        )
        costs = tuple(line for line in expense_lines if self.chart.is_cost(line.account_code))
        expenses = tuple(
            line for line in expense_lines if not self.chart.is_cost(line.account_code)
        )

        return IncomeStatement(
            date_from=date_from,
            date_to=date_to,
            revenue=revenue,
            costs=costs,
            expenses=expenses,
            total_revenue=sum_money(line.amount for line in revenue),
            total_costs=sum_money(line.amount for line in costs),
            total_operating_expenses=sum_money(line.amount for line in expenses),
        )

    def balance_sheet(self, as_of: date, positive_only: bool = False) -> BalanceSheet:
        """Build the balance sheet as of a date.

        Revenue and expense accounts are not closed into equity by any entry,
        so their cumulative result is reported as ``current_earnings`` and
        counted in total equity; this keeps the accounting identity intact.

        Args:
            as_of: Balance date (inclusive)
            positive_only: If True, only list accounts whose normal balance is
                positive. Contra and overdrawn accounts are then left out and
                the sheet may not balance.
        """
        assets = self._section(AccountType.ASSET, as_of, positive_only)
        liabilities = self._section(AccountType.LIABILITY, as_of, positive_only)
        equity = self._section(AccountType.EQUITY, as_of, positive_only)
        current_earnings = self._current_earnings(as_of)

        report = BalanceSheet(
            as_of=as_of,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            current_earnings=current_earnings,
            total_assets=sum_money(line.amount for line in assets),
            total_liabilities=sum_money(line.amount for line in liabilities),
            total_equity=sum_money(line.amount for line in equity) + current_earnings,
        )
        if not report.is_balanced:
            logger.error(
                "Balance sheet as of %s is not balanced: assets %s, liabilities %s, equity %s",
                as_of,
                report.total_assets,
                report.total_liabilities,
                report.total_equity,
            )
        return report

    def _section(
        self, account_type: AccountType, as_of: date, positive_only: bool
    ) -> tuple[StatementLine, ...]:
        lines = self._lines(
            self.db.get_account_totals(end_date=as_of, account_prefix=account_type.prefix),
            account_type,
        )
        if positive_only:
            return tuple(line for line in lines if line.amount > ZERO)
        return tuple(line for line in lines if line.amount != ZERO)

    def _current_earnings(self, as_of: date) -> Money:
        revenue = self.db.get_account_totals(
            end_date=as_of, account_prefix=AccountType.REVENUE.prefix
        )
        expenses = self.db.get_account_totals(
            end_date=as_of, account_prefix=AccountType.EXPENSE.prefix
        )
        return sum_money(t.balance_for(Side.CREDIT) for t in revenue) - sum_money(
            t.balance_for(Side.DEBIT) for t in expenses
        )

    def _lines(
        self, totals: Sequence[AccountTotals], account_type: AccountType
    ) -> tuple[StatementLine, ...]:
        return tuple(
            StatementLine(
                account_code=t.account_code,
                account_name=self.chart.display_name(t.account_code),
                amount=t.balance_for(account_type.normal_side),
            )
            for t in totals
        )

    def _normal_side(self, account_code: str) -> Side:
        try:
            return self.chart.normal_side(account_code)
        except UnknownAccountError:
            logger.warning(
                "Account %s has no account class; reporting its balance as debit-normal",
                account_code,
            )
            return Side.DEBIT
