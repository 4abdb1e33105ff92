from decimal import Decimal, ROUND_HALF_UP, localcontext

from django import template
from django.conf import settings

from calculator.services.tax.amounts import to_amount

register = template.Library()


def format_naira(value) -> str:
    """
    Currency symbol plus thousands separators, e.g. ₦1,234,567.

    Whole amounts print without decimals; fractional ones keep up to 2.
    """
    symbol = getattr(settings, 'CURRENCY_SYMBOL', '₦')
    amount = to_amount(value)
    if amount == amount.to_integral_value():
        return f"{symbol}{int(amount):,}"
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        amount = amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return f"{symbol}{amount:,}"


register.filter('naira', format_naira)
