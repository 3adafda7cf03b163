"""Money codec: converting between user-entered strings and cents.

Parsing is forgiving on purpose: anything that cannot be read as a number
becomes zero rather than an error.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

from fireledger.domain.models import Money

CENTS_PER_UNIT = 100

_NOT_NUMERIC = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer, halves away from zero.

    Args:
        value: Number to round. Floats are converted exactly.

    Returns:
        Rounded integer.
    """
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_amount(text: str) -> Money:
    """Parse a currency string into cents.

    Currency symbols, thousands separators and whitespace are stripped first,
    then the leading number is read (so "1.2.3" reads as 1.2).

    Args:
        text: Amount as entered by the user (e.g., "$1,234.56").

    Returns:
        Amount in cents, or 0 if nothing numeric could be read.
    """
    clean = _NOT_NUMERIC.sub("", text)
    match = _LEADING_NUMBER.match(clean)
    if not match:
        return Money(0)

    value = Decimal(match.group(0))
    return Money(round_half_up(value * CENTS_PER_UNIT))


def format_amount(cents: Money, symbol: str = "$") -> str:
    """Format cents as a currency string.

    Args:
        cents: Amount in cents.
        symbol: Currency symbol to prefix.

    Returns:
        Formatted string (e.g., "$1,234.56" or "-$1,234.56").
    """
    units = Decimal(abs(cents)) / CENTS_PER_UNIT
    formatted = f"{symbol}{units:,.2f}"
    if cents < 0:
        return f"-{formatted}"
    return formatted
