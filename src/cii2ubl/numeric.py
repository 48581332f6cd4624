"""
Decimal handling for amounts, quantities and percentages.

Values are never rounded: formatting only strips trailing zeros and avoids
scientific notation.
"""

from decimal import Decimal, InvalidOperation


def parse_decimal(value: str | None) -> Decimal | None:
    """Parse a CII decimal string, returning None when absent or invalid."""
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        result = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def format_decimal(value: Decimal | int | str) -> str:
    """Format a decimal without trailing zeros and without exponent.

    >>> format_decimal(Decimal("19.00"))
    '19'
    >>> format_decimal(Decimal("1E+2"))
    '100'
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    if value == 0:
        return "0"
    normalized = value.normalize()
    return format(normalized, "f")


def reconcile_sign(
    quantity: Decimal | None,
    price: Decimal | None,
    extension_amount: Decimal | None,
    swap_enabled: bool,
) -> tuple[Decimal | None, Decimal | None]:
    """Make quantity × price carry the sign of the line extension amount.

    UBL rules require a non-negative price, so a negative line amount must be
    expressed through a negative quantity. When the line amount is negative
    and the quantity positive, the quantity is negated; a negative price is
    made positive.

    Returns:
        The (quantity, price) pair, unchanged when swapping is disabled or
        not needed.
    """
    if not swap_enabled or extension_amount is None or extension_amount >= 0:
        return quantity, price

    if quantity is not None and quantity > 0:
        quantity = -quantity
    if price is not None and price < 0:
        price = -price

    return quantity, price
