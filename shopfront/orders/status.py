"""
Статусы заказа.

Жизненный цикл заказа короткий: pending -> shipped -> delivered,
либо cancelled на любом шаге. Переходы решает orders-сервис.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    SHIPPED = 'shipped', 'Shipped'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'


STATUS_BADGE_CLASSES = {
    OrderStatus.PENDING.value: 'badge-pending',
    OrderStatus.SHIPPED.value: 'badge-shipped',
    OrderStatus.DELIVERED.value: 'badge-delivered',
    OrderStatus.CANCELLED.value: 'badge-cancelled',
}

DEFAULT_BADGE_CLASS = 'badge-neutral'


def is_valid_status(value):
    return value in OrderStatus.values


def badge_class(status):
    """CSS класс бейджа; неизвестный статус получает нейтральный."""
    return STATUS_BADGE_CLASSES.get(status, DEFAULT_BADGE_CLASS)
