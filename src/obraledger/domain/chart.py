"""Chart of accounts.

Account codes are hierarchical by numeric prefix and classified by their
leading digit. The chart is an immutable value handed to the services that
need it, so tests and deployments can swap in a different one.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from obraledger.domain.entities import Side
from obraledger.domain.errors import UnknownAccountError, ValidationError

logger = logging.getLogger(__name__)

UNDEFINED_ACCOUNT_NAME = "Cuenta no definida"


class AccountType(str, Enum):
    """Account classes with the side on which their balance normally sits."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def normal_side(self) -> Side:
        if self in (AccountType.ASSET, AccountType.EXPENSE):
            return Side.DEBIT
        return Side.CREDIT

    @property
    def prefix(self) -> str:
        return _TYPE_PREFIXES[self]


_TYPE_PREFIXES = {
    AccountType.ASSET: "1",
    AccountType.LIABILITY: "2",
    AccountType.EQUITY: "3",
    AccountType.REVENUE: "4",
    AccountType.EXPENSE: "5",
}
_PREFIX_TYPES = {prefix: account_type for account_type, prefix in _TYPE_PREFIXES.items()}


# Construction company chart (Chile). Sub-prefix 51 is cost of sales, the
# rest of class 5 are operating expenses.
DEFAULT_ACCOUNTS: dict[str, str] = {
    "110000": "Caja",
    "120000": "Bancos",
    "130000": "Cuentas por Cobrar",
    "140000": "Inventario de Materiales",
    "150000": "Equipos y Maquinaria",
    "160000": "Depreciación Acumulada Equipos",
    "210000": "Cuentas por Pagar",
    "220000": "Impuestos por Pagar",
    "230000": "IVA Crédito Fiscal",
    "240000": "IVA Débito Fiscal",
    "310000": "Capital",
    "320000": "Utilidades Retenidas",
    "410000": "Ingresos por Servicios",
    "420000": "Ingresos por Ventas",
    "430000": "Otros Ingresos",
    "510000": "Costo de Ventas",
    "520000": "Gastos Operacionales",
    "530000": "Gastos Administrativos",
    "540000": "Gastos de Venta",
    "550000": "Gastos Financieros",
    "560000": "Otros Gastos",
}

DEFAULT_COST_PREFIXES: tuple[str, ...] = ("51",)


class ChartOfAccounts:
    """Immutable registry of account codes and names."""

    def __init__(
        self,
        accounts: Mapping[str, str],
        cost_prefixes: tuple[str, ...] = DEFAULT_COST_PREFIXES,
    ):
        """Initialize chart of accounts.

        Args:
            accounts: Mapping of account code to account name
            cost_prefixes: Code prefixes of expense accounts reported as
                cost of sales rather than operating expenses
        """
        cleaned: dict[str, str] = {}
        for code, name in accounts.items():
            code = str(code).strip()
            if not code.isdigit():
                raise ValidationError(f"Account code '{code}' must be numeric")
            cleaned[code] = str(name)
        self._accounts = MappingProxyType(dict(sorted(cleaned.items())))
        self._cost_prefixes = tuple(cost_prefixes)

    def __contains__(self, code: object) -> bool:
        return code in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._accounts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChartOfAccounts):
            return NotImplemented
        return (
            dict(self._accounts) == dict(other._accounts)
            and self._cost_prefixes == other._cost_prefixes
        )

    def __repr__(self) -> str:
        return f"ChartOfAccounts({len(self)} accounts)"

    @property
    def cost_prefixes(self) -> tuple[str, ...]:
        return self._cost_prefixes

    def codes(self) -> list[str]:
        return list(self._accounts)

    def items(self) -> list[tuple[str, str]]:
        return list(self._accounts.items())

    def classify(self, code: str) -> AccountType:
        """Classify an account code by its leading digit.

        Classification does not require the code to be in the chart, so
        retired codes in historical data still land in the right class.

        Raises:
            UnknownAccountError: If the leading digit is not a known class
        """
        account_type = _PREFIX_TYPES.get(code[:1]) if code else None
        if account_type is None:
            raise UnknownAccountError(code)
        return account_type

    def normal_side(self, code: str) -> Side:
        return self.classify(code).normal_side

    def name(self, code: str) -> str:
        """Get the name of an account.

        Raises:
            UnknownAccountError: If the code is not in the chart
        """
        try:
            return self._accounts[code]
        except KeyError:
            raise UnknownAccountError(code) from None

    def display_name(self, code: str) -> str:
        """Get the name of an account, or a placeholder for unknown codes."""
        try:
            return self.name(code)
        except UnknownAccountError:
            logger.warning("Account %s is not defined in the chart of accounts", code)
            return UNDEFINED_ACCOUNT_NAME

    def is_cost(self, code: str) -> bool:
        """Whether an expense account is reported as cost of sales."""
        return any(code.startswith(prefix) for prefix in self._cost_prefixes)

    def with_accounts(self, accounts: Mapping[str, str]) -> "ChartOfAccounts":
        """Return a new chart with the given accounts added or renamed."""
        merged = dict(self._accounts)
        merged.update(accounts)
        return ChartOfAccounts(merged, cost_prefixes=self._cost_prefixes)


DEFAULT_CHART = ChartOfAccounts(DEFAULT_ACCOUNTS)


def load_chart(
    path: Union[str, Path], cost_prefixes: Optional[tuple[str, ...]] = None
) -> ChartOfAccounts:
    """Load a chart of accounts from a JSON object of code to name.

    Args:
        path: Path to the JSON file
        cost_prefixes: Optional override of the cost-of-sales prefixes

    Returns:
        ChartOfAccounts instance

    Raises:
        ValidationError: If the file cannot be read or is not a JSON object
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Could not load chart of accounts '{path}': {e}")

    if not isinstance(data, dict) or not data:
        raise ValidationError(
            f"Chart of accounts '{path}' must be a non-empty JSON object of code to name"
        )

    return ChartOfAccounts(
        data, cost_prefixes=cost_prefixes if cost_prefixes is not None else DEFAULT_COST_PREFIXES
    )
