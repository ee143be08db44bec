"""
Currency display helpers.

Amounts are formatted as symbol + grouped digits, e.g. "$1,234.56" or
"-€75.50". Unknown codes fall back to the code itself as the symbol.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Union


class Currency(NamedTuple):
    code: str
    name: str
    symbol: str


CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "US Dollar", "$"),
    Currency("EUR", "Euro", "€"),
    Currency("JPY", "Japanese Yen", "¥"),
    Currency("GBP", "British Pound", "£"),
    Currency("INR", "Indian Rupee", "₹"),
    Currency("AUD", "Australian Dollar", "$"),
    Currency("CAD", "Canadian Dollar", "$"),
    Currency("CHF", "Swiss Franc", "Fr"),
    Currency("CNY", "Chinese Yuan", "¥"),
    Currency("SEK", "Swedish Krona", "kr"),
    Currency("NZD", "New Zealand Dollar", "$"),
)

_BY_CODE = {c.code: c for c in CURRENCIES}

# Currencies displayed without minor units
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY"})


def get_currency_symbol(currency_code: str) -> str:
    currency = _BY_CODE.get(currency_code.upper())
    return currency.symbol if currency else currency_code.upper()


def format_currency(value: Union[Decimal, float, int], currency_code: str = "USD") -> str:
    """Format an amount for display in the given currency."""
    code = currency_code.upper()
    places = 0 if code in ZERO_DECIMAL_CURRENCIES else 2
    quantum = Decimal(1).scaleb(-places)

    amount = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.{places}f}"
    return f"{sign}{get_currency_symbol(code)}{digits}"
