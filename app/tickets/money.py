"""Currency display helpers.

Amounts are integer minor units everywhere; these helpers are the only
place they are divided by 100, at render time.
"""
from decimal import Decimal

CURRENCY_SYMBOLS = {
    "usd": "$",
    "gbp": "£",
    "eur": "€",
    "thb": "฿",
}


def currency_symbol(code: str | None) -> str | None:
    """Symbol for a currency code, or None if unknown."""
    if not code:
        return None
    return CURRENCY_SYMBOLS.get(code.lower())


def to_major_units(amount: int) -> Decimal:
    return Decimal(amount) / 100


def format_price(amount: int | None, currency: str = "USD") -> str:
    """
    Format a minor-unit amount for display.

    Whole amounts drop the decimals ("$25"), others keep two ("$12.50").
    Unknown currencies are prefixed with their code ("CHF 12.50").
    """
    if amount is None:
        return ""

    major = to_major_units(amount)
    text = f"{major:,.0f}" if amount % 100 == 0 else f"{major:,.2f}"
    sign = "-" if amount < 0 else ""
    text = text.lstrip("-")

    symbol = currency_symbol(currency)
    if symbol:
        return f"{sign}{symbol}{text}"
    return f"{sign}{currency.upper()} {text}"
