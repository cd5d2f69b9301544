"""Fixed-point money helpers.

All monetary values are ``Decimal`` quantized to cents, so sums compare
exactly and repeated aggregation does not drift.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

from obraledger.domain.errors import ValidationError

Money = Decimal
MoneyLike = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: MoneyLike) -> Decimal:
    """Convert a number-like value into an unrounded Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.

    Raises:
        ValidationError: If the value is not numeric or not finite
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount


def to_money(value: MoneyLike) -> Money:
    """Convert a number-like value into a Money amount, rounded to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def is_whole_cents(value: MoneyLike) -> bool:
    """True if converting ``value`` to Money loses nothing."""
    amount = to_decimal(value)
    return amount == amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Money:
    """Round an intermediate Decimal result to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Money:
    """Sum amounts, returning ``ZERO`` for an empty iterable."""
    return round_money(sum(values, ZERO))
