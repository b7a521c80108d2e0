from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template
from django.conf import settings

from orders.status import badge_class

register = template.Library()


def _group_indian(digits):
    """
    Группировка разрядов по-индийски: 1234567 -> 12,34,567
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ','.join(groups + [tail])


@register.filter
def format_price(value):
    """Цена в рупиях без копеек: 7999 -> ₹7,999"""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ''
    amount = amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if amount < 0 else ''
    return f'{sign}{settings.CURRENCY_SYMBOL}{_group_indian(str(abs(int(amount))))}'


@register.filter
def status_badge(status):
    return badge_class(status)


@register.simple_tag
def rating_stars(rating, total=5):
    """
    Список флагов для отрисовки звёзд: True - закрашенная.
    """
    try:
        filled = int(float(rating))
    except (TypeError, ValueError):
        filled = 0
    filled = max(0, min(filled, total))
    return [i < filled for i in range(total)]

