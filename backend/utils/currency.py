"""Currency-related utilities: exchange rates, formatting, and conversion."""

from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional

import schemas


# Static exchange rates, units per 1 USD (the reference unit)
EXCHANGE_RATES = {
    "USD": Decimal("1.0"),
    "EUR": Decimal("0.92"),
    "GBP": Decimal("0.79"),
    "CAD": Decimal("1.36"),
    "AUD": Decimal("1.52"),
    "SGD": Decimal("1.34"),
    "INR": Decimal("83.12"),
    "JPY": Decimal("149.5"),
    "CNY": Decimal("7.23"),
    "KRW": Decimal("1320.0"),
    "MYR": Decimal("4.67"),
    "THB": Decimal("35.8"),
    "PHP": Decimal("56.5"),
    "VND": Decimal("24500.0"),
    "MVR": Decimal("15.42"),
}

# Currency symbols for formatting
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
    "SGD": "S$",
    "INR": "₹",
    "JPY": "¥",
    "CNY": "¥",
    "KRW": "₩",
    "MYR": "RM",
    "THB": "฿",
    "PHP": "₱",
    "VND": "₫",
    "MVR": "RF",
}

CURRENCY_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "SGD": "Singapore Dollar",
    "INR": "Indian Rupee",
    "JPY": "Japanese Yen",
    "CNY": "Chinese Yuan",
    "KRW": "South Korean Won",
    "MYR": "Malaysian Ringgit",
    "THB": "Thai Baht",
    "PHP": "Philippine Peso",
    "VND": "Vietnamese Dong",
    "MVR": "Maldivian Rufiyaa",
}

# Currencies without a fractional unit in everyday use
WHOLE_UNIT_CURRENCIES = {"JPY", "KRW", "VND"}


def get_currency_symbol(currency: str) -> str:
    """Symbol for a currency code, falling back to the code itself."""
    return CURRENCY_SYMBOLS.get(currency, currency)


def list_currencies() -> list[schemas.CurrencyInfo]:
    return [
        schemas.CurrencyInfo(
            code=code,
            symbol=CURRENCY_SYMBOLS[code],
            name=CURRENCY_NAMES[code],
            rate=rate
        )
        for code, rate in EXCHANGE_RATES.items()
    ]


def _round(amount: Decimal, exponent: Decimal) -> Decimal:
    """Half-up rounding that works for amounts wider than the default 28-digit context."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return amount.quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, currency: str) -> str:
    """
    Format an amount as a currency string with symbol.

    Args:
        amount: Amount in major units (e.g., Decimal("12.34") for $12.34)
        currency: Currency code (e.g., "USD", "JPY")

    Returns:
        Formatted string with symbol (e.g., "$12.34", "¥1,235")
    """
    symbol = get_currency_symbol(currency)
    amount = Decimal(amount)

    # For currencies like JPY that don't use decimal places
    if currency in WHOLE_UNIT_CURRENCIES:
        whole = int(_round(amount, Decimal("1")))
        return f"{symbol}{whole:,}"

    return f"{symbol}{_round(amount, Decimal('0.01'))}"


def convert_currency(
    amount: Decimal,
    from_currency: str,
    to_currency: Optional[str],
    custom_rate: Optional[Decimal] = None,
    base_currency: Optional[str] = None
) -> Decimal:
    """
    Convert an amount from one currency to another using static rates.
    Converts through USD as an intermediary.

    A custom rate, when set and positive, replaces the table lookup for
    amounts expressed in the bill's base currency.

    Args:
        amount: Amount in source currency
        from_currency: Source currency code (e.g., "EUR")
        to_currency: Target currency code; empty or None means no conversion
        custom_rate: Optional override (target units per source unit)
        base_currency: Currency the custom rate applies to

    Returns:
        Amount in target currency
    """
    if not to_currency or from_currency == to_currency:
        return amount

    if custom_rate is not None and custom_rate > 0 and from_currency == base_currency:
        return amount * custom_rate

    # Unknown currencies are treated as already being in USD
    from_rate = EXCHANGE_RATES.get(from_currency, Decimal("1"))
    to_rate = EXCHANGE_RATES.get(to_currency, Decimal("1"))

    amount_in_usd = amount / from_rate
    return amount_in_usd * to_rate


def convert_for_bill(state: schemas.BillState, amount: Decimal) -> Optional[Decimal]:
    """Convert a bill-currency amount to the bill's conversion target, if any."""
    settings = state.settings
    if not settings.convert_to or settings.convert_to == settings.currency:
        return None

    return convert_currency(
        amount,
        settings.currency,
        settings.convert_to,
        custom_rate=settings.custom_rate,
        base_currency=settings.currency
    )
