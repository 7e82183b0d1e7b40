"""
Monetary helpers for bill computation.

Rules:
1. NEVER use float for money
2. Quantize every stored amount to the currency's minor unit
3. Round half up (12.345 -> 12.35), the convention guests expect on a receipt
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple, Union

from django.conf import settings

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "JPY": 0,
    "KWD": 3,
}

Number = Union[Decimal, int, str]


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    >>> currency_exponent("USD")
    2
    >>> currency_exponent("JPY")
    0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize(amount: Number, currency: str = None) -> Decimal:
    """
    Round an amount to the currency's minor unit using round-half-up.

    >>> quantize(Decimal("5.097"))
    Decimal('5.10')
    >>> quantize("0.005")
    Decimal('0.01')
    """
    currency = currency or getattr(settings, "RESTAURANT_CURRENCY", "USD")
    exponent = currency_exponent(currency)
    step = Decimal(1).scaleb(-exponent)
    return Decimal(str(amount)).quantize(step, rounding=ROUND_HALF_UP)


def get_tax_rate() -> Decimal:
    """Configured tax rate, e.g. Decimal('0.10')."""
    return Decimal(str(getattr(settings, "RESTAURANT_TAX_RATE", "0.10")))


def line_total(unit_price: Number, quantity: int) -> Decimal:
    return quantize(Decimal(str(unit_price)) * quantity)


def compute_totals(lines: Iterable[Tuple[Number, int]], tax_rate: Decimal = None):
    """
    Compute (subtotal, tax, total) for (unit_price, quantity) pairs.

    tax = round(subtotal * rate) and total = subtotal + tax, so the three
    amounts always reconcile to the cent.

    >>> compute_totals([("12.99", 2), ("24.99", 1)], Decimal("0.10"))
    (Decimal('50.97'), Decimal('5.10'), Decimal('56.07'))
    """
    rate = get_tax_rate() if tax_rate is None else Decimal(str(tax_rate))
    subtotal = quantize(sum((line_total(price, qty) for price, qty in lines), Decimal("0")))
    tax = quantize(subtotal * rate)
    total = subtotal + tax
    return subtotal, tax, total
