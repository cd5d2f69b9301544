"""Quotation, payroll and loan calculators.

These are pure functions over Money values. The quotation and payroll
calculators assume validated input; ``quote`` and ``calculate_payroll_net``
are the boundary entry points that reject bad input before calculating.
Every intermediate figure is rounded to cents so that the reported parts
always add up to the reported totals.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from obraledger.domain.errors import (
    InvalidLineItemError,
    ValidationError,
    invalid_line_item,
)
from obraledger.domain.money import ZERO, Money, MoneyLike, round_money, sum_money, to_money

IVA_RATE = Decimal("0.19")
DEFAULT_MARGIN = Decimal("3")
DEFAULT_UNIT = "unidades"

PENSION_RATE = Decimal("0.10")
HEALTH_RATE = Decimal("0.07")
OVERTIME_PREMIUM = Decimal("1.5")
DAYS_PER_MONTH = 30
HOURS_PER_DAY = 8

INCOME_TAX_THRESHOLD = Decimal("1500000")
INCOME_TAX_RATE = Decimal("0.08")

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class LineItem:
    """Quotation line: a quantity of some material at a unit price."""

    quantity: Decimal
    unit_price: Decimal
    description: str = ""
    unit: str = DEFAULT_UNIT
    group: Optional[str] = None

    @property
    def total(self) -> Money:
        quantity = _decimal(self.quantity, "quantity")
        return round_money(quantity * _decimal(self.unit_price, "unit price"))


@dataclass(frozen=True)
class QuotationCalculation:
    """Quotation totals, from materials down to the taxed total."""

    materials_total: Money
    labor_cost: Money
    margin_percentage: Decimal
    subtotal: Money
    margin_amount: Money
    net_total: Money
    tax: Money
    total: Money


@dataclass(frozen=True)
class PayrollCalculation:
    """Monthly payroll breakdown for one employee."""

    base_salary: Money
    overtime_hours: Decimal
    overtime_rate: Money
    overtime_amount: Money
    bonuses: Money
    allowances: Money
    gross_salary: Money
    pension_deduction: Money
    health_deduction: Money
    taxable_income: Money
    income_tax: Money
    other_deductions: Money
    total_deductions: Money
    net_salary: Money


@dataclass(frozen=True)
class LoanCalculation:
    """Interest and installment figures for a fixed-rate loan."""

    principal: Money
    rate_percentage: Decimal
    periods: int
    simple_interest: Money
    compound_interest: Money
    periodic_payment: Money
    total_payment: Money

    @property
    def total_interest(self) -> Money:
        return self.total_payment - self.principal


def _decimal(value: MoneyLike, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (ArithmeticError, TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}") from None
    if not result.is_finite():
        raise ValidationError(f"Invalid {field}: {value!r}")
    return result


def _non_negative(value: MoneyLike, field: str) -> Decimal:
    result = _decimal(value, field)
    if result < 0:
        raise ValidationError(f"{field.capitalize()} must not be negative (got {value})")
    return result


# Quotations


def validate_line_items(
    items: Sequence[LineItem],
    labor_cost: MoneyLike = 0,
    margin_percentage: MoneyLike = DEFAULT_MARGIN,
) -> None:
    """Reject quotation input that the calculator cannot price.

    Amounts are never clamped: a non-positive quantity or price is an error.

    Raises:
        InvalidLineItemError: If an item has quantity or unit price <= 0
        ValidationError: If labor cost or margin is negative
    """
    for index, item in enumerate(items):
        for field in ("quantity", "unit_price"):
            value = getattr(item, field)
            if _decimal(value, field.replace("_", " ")) <= 0:
                raise InvalidLineItemError(invalid_line_item(index, field, value), index=index)
    _non_negative(labor_cost, "labor cost")
    _non_negative(margin_percentage, "margin percentage")


def calculate_quotation_total(
    items: Iterable[LineItem],
    labor_cost: MoneyLike,
    margin_percentage: MoneyLike,
    tax_rate: Decimal = IVA_RATE,
) -> QuotationCalculation:
    """Price a quotation: materials plus labor, then margin, then IVA."""
    materials_total = sum_money(item.total for item in items)
    labor = to_money(labor_cost)
    margin = _decimal(margin_percentage, "margin percentage")

    subtotal = materials_total + labor
    margin_amount = round_money(subtotal * margin / HUNDRED)
    net_total = subtotal + margin_amount
    tax = round_money(net_total * tax_rate)

    return QuotationCalculation(
        materials_total=materials_total,
        labor_cost=labor,
        margin_percentage=margin,
        subtotal=subtotal,
        margin_amount=margin_amount,
        net_total=net_total,
        tax=tax,
        total=net_total + tax,
    )


def quote(
    items: Sequence[LineItem],
    labor_cost: MoneyLike = 0,
    margin_percentage: MoneyLike = DEFAULT_MARGIN,
) -> QuotationCalculation:
    """Validate quotation input, then price it."""
    validate_line_items(items, labor_cost, margin_percentage)
    return calculate_quotation_total(items, labor_cost, margin_percentage)


def group_subtotals(items: Iterable[LineItem]) -> dict[Optional[str], Money]:
    """Materials subtotal per item group, in the order groups first appear."""
    subtotals: dict[Optional[str], Money] = {}
    for item in items:
        subtotals[item.group] = subtotals.get(item.group, ZERO) + item.total
    return subtotals


# Payroll


class IncomeTaxPolicy(ABC):
    """Monthly income tax as a function of taxable income."""

    @abstractmethod
    def tax_for(self, taxable_income: Money) -> Money:
        pass


class FlatThresholdIncomeTax(IncomeTaxPolicy):
    """Single flat rate on the income above a threshold.

    This is a simplified approximation, not a statutory tax table; use
    BracketedIncomeTax with real brackets where compliance matters.
    """

    def __init__(
        self, threshold: MoneyLike = INCOME_TAX_THRESHOLD, rate: MoneyLike = INCOME_TAX_RATE
    ):
        self.threshold = to_money(threshold)
        self.rate = _non_negative(rate, "tax rate")

    def tax_for(self, taxable_income: Money) -> Money:
        if taxable_income <= self.threshold:
            return ZERO
        return round_money((taxable_income - self.threshold) * self.rate)

    def __repr__(self) -> str:
        return f"FlatThresholdIncomeTax(threshold={self.threshold}, rate={self.rate})"


class BracketedIncomeTax(IncomeTaxPolicy):
    """Progressive tax: each rate applies to the slice of income in its bracket.

    Brackets are ``(lower_bound, rate)`` pairs. Income below the lowest bound
    is untaxed.
    """

    def __init__(self, brackets: Iterable[tuple[MoneyLike, MoneyLike]]):
        parsed = sorted(
            (to_money(lower), _non_negative(rate, "tax rate")) for lower, rate in brackets
        )
        if not parsed:
            raise ValidationError("At least one tax bracket is required")
        bounds = [lower for lower, _ in parsed]
        if len(set(bounds)) != len(bounds):
            raise ValidationError("Tax bracket lower bounds must be distinct")
        self.brackets: tuple[tuple[Money, Decimal], ...] = tuple(parsed)

    def tax_for(self, taxable_income: Money) -> Money:
        tax = ZERO
        uppers = [lower for lower, _ in self.brackets[1:]] + [None]
        for (lower, rate), upper in zip(self.brackets, uppers):
            if taxable_income <= lower:
                break
            top = taxable_income if upper is None else min(taxable_income, upper)
            tax += (top - lower) * rate
        return round_money(tax)

    def __repr__(self) -> str:
        return f"BracketedIncomeTax({list(self.brackets)!r})"


DEFAULT_TAX_POLICY = FlatThresholdIncomeTax()


def calculate_payroll_net(
    base_salary: MoneyLike,
    overtime_hours: MoneyLike = 0,
    bonuses: MoneyLike = 0,
    allowances: MoneyLike = 0,
    other_deductions: MoneyLike = 0,
    tax_policy: Optional[IncomeTaxPolicy] = None,
) -> PayrollCalculation:
    """Compute gross salary, statutory deductions and net pay.

    Overtime is paid at 1.5 times the hourly rate of a 30-day, 8-hour month.
    Pension (10%) and health (7%) are withheld from gross salary; income tax
    is computed on what remains by ``tax_policy``.

    Raises:
        ValidationError: If any input is negative or not numeric
    """
    base = to_money(_non_negative(base_salary, "base salary"))
    hours = _non_negative(overtime_hours, "overtime hours")
    bonus = to_money(_non_negative(bonuses, "bonuses"))
    allowance = to_money(_non_negative(allowances, "allowances"))
    extra_deductions = to_money(_non_negative(other_deductions, "other deductions"))
    policy = tax_policy or DEFAULT_TAX_POLICY

    hourly_premium = base / DAYS_PER_MONTH / HOURS_PER_DAY * OVERTIME_PREMIUM
    overtime_amount = round_money(hours * hourly_premium)
    gross = base + overtime_amount + bonus + allowance

    pension = round_money(gross * PENSION_RATE)
    health = round_money(gross * HEALTH_RATE)
    taxable = gross - pension - health
    income_tax = policy.tax_for(taxable)
    total_deductions = pension + health + income_tax + extra_deductions

    return PayrollCalculation(
        base_salary=base,
        overtime_hours=hours,
        overtime_rate=round_money(hourly_premium),
        overtime_amount=overtime_amount,
        bonuses=bonus,
        allowances=allowance,
        gross_salary=gross,
        pension_deduction=pension,
        health_deduction=health,
        taxable_income=taxable,
        income_tax=income_tax,
        other_deductions=extra_deductions,
        total_deductions=total_deductions,
        net_salary=gross - total_deductions,
    )


# Loans


def calculate_loan(principal: MoneyLike, rate_percentage: MoneyLike, periods: int) -> LoanCalculation:
    """Interest and fixed installment for a loan.

    ``rate_percentage`` is the interest rate per period. A zero rate spreads
    the principal evenly over the periods.

    Raises:
        ValidationError: If principal or periods is not positive, or the rate is negative
    """
    p = to_money(principal)
    if p <= 0:
        raise ValidationError(f"Principal must be greater than zero (got {principal})")
    if isinstance(periods, bool) or not isinstance(periods, int) or periods <= 0:
        raise ValidationError(f"Periods must be a positive whole number (got {periods!r})")
    rate_pct = _non_negative(rate_percentage, "rate")
    r = rate_pct / HUNDRED

    growth = (1 + r) ** periods
    if r == 0:
        payment = round_money(p / periods)
    else:
        payment = round_money(p * r * growth / (growth - 1))

    return LoanCalculation(
        principal=p,
        rate_percentage=rate_pct,
        periods=periods,
        simple_interest=round_money(p * r * periods),
        compound_interest=round_money(p * growth - p),
        periodic_payment=payment,
        total_payment=round_money(payment * periods),
    )
