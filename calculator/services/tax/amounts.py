from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")

# Amounts at or above 10**1000 are treated as invalid input. Below that,
# rate arithmetic stays well inside the decimal context's exponent range.
MAX_AMOUNT_EXPONENT = 999


def to_amount(value) -> Decimal:
    """
    Coerce user input to a non-negative Decimal.

    Missing, blank, non-numeric, non-finite, negative and absurdly large
    values all become 0. Calculators never reject an amount.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return ZERO
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    if amount and amount.adjusted() > MAX_AMOUNT_EXPONENT:
        return ZERO
    return amount


def round_amount(value: Decimal) -> int:
    """Round to the nearest naira, halves away from zero."""
    # to_integral_value is not bound by the context precision, unlike quantize
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def round_percent(value: Decimal) -> Decimal:
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
