"""Domain layer for obraledger application."""

from obraledger.domain.chart import DEFAULT_CHART, AccountType, ChartOfAccounts, load_chart
from obraledger.domain.ledger import LedgerService
from obraledger.domain.statements import StatementService
from obraledger.domain.calculators import (
    calculate_loan,
    calculate_payroll_net,
    calculate_quotation_total,
    quote,
)

__all__ = [
    "DEFAULT_CHART",
    "AccountType",
    "ChartOfAccounts",
    "load_chart",
    "LedgerService",
    "StatementService",
    "calculate_loan",
    "calculate_payroll_net",
    "calculate_quotation_total",
    "quote",
]
