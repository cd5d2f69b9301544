"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from obraledger.domain.money import Money, round_money

_CURRENCY = re.compile(r"(?i)^(clp|\$)|(clp|\$)$")
_DOT_THOUSANDS = re.compile(r"^[1-9]\d{0,2}(\.\d{3})+$")


def _normalize(text: str) -> tuple[str, bool]:
    """Strip currency and grouping; return a plain decimal string and its sign."""
    text = text.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1].strip()
    if text.startswith("-"):
        negative = not negative
        text = text[1:]
    text = _CURRENCY.sub("", text).strip().replace(" ", "")

    if "," in text and "." in text:
        # Whichever separator comes last is the decimal one
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        head, _, tail = text.rpartition(",")
        if len(tail) == 3 and head not in ("", "0"):
            text = text.replace(",", "")
        else:
            text = f"{head.replace(',', '')}.{tail}"
    elif _DOT_THOUSANDS.match(text):
        text = text.replace(".", "")
    return text, negative


def parse_number(number_str: str) -> Decimal:
    """Parse a quantity, rate or percentage without rounding it.

    Accepts the same separators as ``parse_amount``.

    Raises:
        ValueError: If the string is not a finite number
    """
    if not number_str or not number_str.strip():
        raise ValueError("Empty number string")

    text, negative = _normalize(number_str)
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse number '{number_str}'") from None
    if not number.is_finite():
        raise ValueError(f"Could not parse number '{number_str}'")
    return -number if negative else number


def parse_amount(amount_str: str) -> Money:
    """Parse an amount string into Money.

    Handles peso formats as well as plain decimals:
    - "150000", "$150.000", "CLP 1.234.567" (dots group thousands)
    - "1.234,56" (comma decimal)
    - "1,234.56" (comma thousands)
    - "(5000)" (negative in parentheses)

    A single dot followed by exactly three digits is read as a thousands
    separator, so "1.500" is fifteen hundred.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")
    try:
        return round_money(parse_number(amount_str))
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e
