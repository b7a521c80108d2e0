"""
Клиент orders-сервиса.

Основные функции:
- get_orders(request, user_id=None) - заказы пользователя или все (админ)
- create_order(request, ...) - оформить заказ из корзины
- update_order_status(request, order_id, status) - сменить статус (админ)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.utils.dateparse import parse_datetime

from storefront.services.api_client import ApiClient, ApiNotFoundError

from .status import OrderStatus, is_valid_status

logger = logging.getLogger('orders.service')

ORDERS_PATH = '/api/v1/orders'


def _to_decimal(value):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal('0')


def _json_number(value):
    value = Decimal(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass
class OrderItem:
    product_id: str
    quantity: int
    price: Decimal

    @property
    def line_total(self):
        return self.price * self.quantity

    @classmethod
    def from_payload(cls, data):
        return cls(
            product_id=str(data.get('productId', '')),
            quantity=int(data.get('quantity') or 0),
            price=_to_decimal(data.get('price')),
        )

    def to_payload(self):
        return {
            'productId': self.product_id,
            'quantity': self.quantity,
            'price': _json_number(self.price),
        }


@dataclass
class Order:
    id: str
    user_id: str
    total: Decimal
    status: str
    items: list = field(default_factory=list)
    created_at: datetime = None
    shipping_address: str = ''

    @property
    def status_label(self):
        if is_valid_status(self.status):
            return OrderStatus(self.status).label
        return self.status.title() if self.status else 'Unknown'

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    @classmethod
    def from_payload(cls, data):
        created_at = data.get('createdAt')
        return cls(
            id=str(data.get('id', '')),
            user_id=str(data.get('userId', '')),
            total=_to_decimal(data.get('total')),
            status=data.get('status') or '',
            items=[OrderItem.from_payload(item) for item in data.get('items') or []],
            created_at=parse_datetime(created_at) if created_at else None,
            shipping_address=data.get('shippingAddress') or '',
        )


def _client(request):
    return ApiClient.for_request(request, settings.ORDERS_SERVICE_URL)


def get_orders(request, user_id=None):
    """
    Args:
        user_id: Если указан - только заказы этого пользователя

    Returns:
        list[Order]
    """
    params = {'userId': user_id} if user_id is not None else None
    data = _client(request).get(ORDERS_PATH, params=params) or []
    # Сервис может отдать как список, так и {"orders": [...]}
    if isinstance(data, dict):
        data = data.get('orders', [])
    return [Order.from_payload(item) for item in data]


def create_order(request, user_id, items, total, shipping_address, status=OrderStatus.PENDING):
    """
    Создаёт заказ в orders-сервисе.

    Args:
        user_id: id пользователя auth-сервиса
        items (list[OrderItem]): Позиции заказа
        total (Decimal): Итог с налогом
        shipping_address (str): Адрес одной строкой

    Returns:
        Order
    """
    payload = {
        'userId': str(user_id),
        'items': [item.to_payload() for item in items],
        'total': _json_number(total),
        'status': str(status),
        'shippingAddress': shipping_address,
    }
    order = Order.from_payload(_client(request).post(ORDERS_PATH, json=payload) or {})
    logger.info('Order %s created for user %s: total=%s items=%s', order.id, user_id, total, len(items))
    return order


def update_order_status(request, order_id, status):
    """
    Raises:
        ValueError: Неизвестный статус (запрос не отправляется)
        ApiNotFoundError: Заказ не найден
    """
    if not is_valid_status(status):
        raise ValueError(f'Unknown order status: {status!r}')

    try:
        data = _client(request).patch(f'{ORDERS_PATH}/{order_id}/status', json={'status': status})
    except ApiNotFoundError as exc:
        raise ApiNotFoundError('Order not found', status_code=404, payload=exc.payload) from exc

    logger.info('Order %s status changed to %s', order_id, status)
    return Order.from_payload(data or {})
