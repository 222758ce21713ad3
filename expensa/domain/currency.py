"""Pure functions for money display and parsing."""

import re
from decimal import Decimal, InvalidOperation

from expensa.domain.models import Money

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

_NON_NUMERIC = re.compile(r"[^\d.-]")


def format_money(amount: Money, currency: str = "INR") -> str:
    """Format money amount for display.

    Args:
        amount: Amount to format.
        currency: ISO currency code.

    Returns:
        Formatted string (e.g., "₹1,234.50" or "-$12.00"). Unknown codes are
        used as a prefix ("CHF 10.00").
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    prefix = symbol if symbol else f"{currency.upper()} "
    formatted = f"{prefix}{abs(amount):,.2f}"
    return f"-{formatted}" if amount < 0 else formatted


def parse_money(text: str) -> Money:
    """Parse user-entered money, ignoring symbols and separators.

    Args:
        text: Text such as "₹1,250.00".

    Returns:
        Parsed amount, or 0 when nothing numeric remains.
    """
    cleaned = _NON_NUMERIC.sub("", text)
    try:
        return Money(Decimal(cleaned))
    except InvalidOperation:
        return Money(Decimal("0"))
