"""
Утилиты и helper функции для views модуля storefront.

Содержит работу с корзиной в сессии и расчёт итогов заказа.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

cart_logger = logging.getLogger('storefront.cart')

CART_SESSION_KEY = 'cart'


# ==================== CART ====================

def get_cart_from_session(request):
    """
    Извлекает корзину из сессии.

    Returns:
        dict: {product_id: {name, price, image, quantity, stock}}
    """
    return request.session.get(CART_SESSION_KEY, {})


def save_cart_to_session(request, cart):
    request.session[CART_SESSION_KEY] = cart
    request.session.modified = True


def _cap_quantity(quantity, stock):
    # stock=None - остаток неизвестен, не ограничиваем
    if stock is not None and stock >= 0:
        return min(quantity, stock)
    return quantity


def add_item(request, product, quantity=1):
    """
    Добавляет товар в корзину или увеличивает количество.

    Цена, название и картинка сохраняются снимком на момент добавления.

    Returns:
        int: Итоговое количество товара в корзине (0 - товара нет в наличии)
    """
    if not product.in_stock:
        return 0

    quantity = max(int(quantity), 1)
    cart = get_cart_from_session(request)
    key = str(product.id)
    line = cart.get(key)
    if line:
        new_qty = int(line.get('quantity', 0)) + quantity
    else:
        new_qty = quantity

    new_qty = _cap_quantity(new_qty, product.stock)
    cart[key] = {
        'name': product.name,
        'price': str(product.price),
        'image': product.image,
        'quantity': new_qty,
        'stock': product.stock,
    }
    save_cart_to_session(request, cart)
    cart_logger.info('Cart add: product=%s qty=%s', key, new_qty)
    return new_qty


def update_quantity(request, product_id, quantity):
    """
    Меняет количество; quantity < 1 удаляет позицию.

    Returns:
        int | None: Новое количество, 0 если удалено, None если позиции не было
    """
    cart = get_cart_from_session(request)
    key = str(product_id)
    if key not in cart:
        return None

    if quantity < 1:
        del cart[key]
        save_cart_to_session(request, cart)
        cart_logger.info('Cart remove (qty<1): product=%s', key)
        return 0

    line = cart[key]
    line['quantity'] = _cap_quantity(quantity, line.get('stock'))
    save_cart_to_session(request, cart)
    return line['quantity']


def remove_item(request, product_id):
    cart = get_cart_from_session(request)
    key = str(product_id)
    if key in cart:
        del cart[key]
        save_cart_to_session(request, cart)
        cart_logger.info('Cart remove: product=%s', key)
        return True
    return False


def clear_cart(request):
    save_cart_to_session(request, {})


def cart_items(cart):
    """
    Позиции корзины для шаблонов и оформления заказа.

    Returns:
        list[dict]: product_id, name, image, price, quantity, stock, line_total
    """
    items = []
    for product_id, line in cart.items():
        price = Decimal(str(line.get('price', '0')))
        quantity = int(line.get('quantity', 1))
        items.append({
            'product_id': product_id,
            'name': line.get('name', ''),
            'image': line.get('image', ''),
            'price': price,
            'quantity': quantity,
            'stock': line.get('stock'),
            'line_total': price * quantity,
        })
    return items


def cart_count(cart):
    """Общее количество единиц товара в корзине."""
    return sum(int(line.get('quantity', 0)) for line in cart.values())


def cart_subtotal(cart):
    return sum((item['line_total'] for item in cart_items(cart)), Decimal('0'))


def _round_currency(value):
    return Decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def cart_totals(subtotal):
    """
    Итоги корзины: доставка бесплатная, налог TAX_RATE (GST) сверху.

    Returns:
        dict: subtotal, shipping, tax, total, tax_rate_percent
    """
    tax_rate = Decimal(settings.TAX_RATE)
    subtotal = Decimal(subtotal)
    tax = subtotal * tax_rate
    return {
        'subtotal': _round_currency(subtotal),
        'shipping': Decimal('0'),
        'tax': _round_currency(tax),
        'total': _round_currency(subtotal + tax),
        'tax_rate_percent': _round_currency(tax_rate * 100),
    }


def parse_positive_int(value, default=1):
    try:
        return max(int(value), 1)
    except (TypeError, ValueError):
        return default
