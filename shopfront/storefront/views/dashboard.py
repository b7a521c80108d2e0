"""
Dashboard views - Кабинет пользователя.

Статистика по заказам, последние заказы и быстрые ссылки.
"""

import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import render
from django.urls import reverse

from accounts.decorators import remote_login_required
from orders import services as orders_service
from orders.status import OrderStatus

from ..services.api_client import ApiAuthenticationError, ApiError

logger = logging.getLogger(__name__)


def _quick_actions():
    """
    Быстрые ссылки кабинета. Профиль, избранное и помощь живут вне витрины:
    без настроенного URL ссылка показывается как неактивная.
    """
    return [
        {'title': 'Browse Products', 'description': 'Discover new items', 'url': reverse('product_list')},
        {'title': 'Update Profile', 'description': 'Manage your account', 'url': settings.PROFILE_URL},
        {'title': 'Wishlist', 'description': 'View saved items', 'url': settings.WISHLIST_URL},
        {'title': 'Help Center', 'description': 'Get support', 'url': settings.HELP_URL},
    ]


def build_order_stats(orders):
    """Счётчики заказов пользователя по статусам."""
    return {
        'total': len(orders),
        'pending': sum(1 for o in orders if o.status == OrderStatus.PENDING),
        'shipped': sum(1 for o in orders if o.status == OrderStatus.SHIPPED),
        'delivered': sum(1 for o in orders if o.status == OrderStatus.DELIVERED),
    }


@remote_login_required
def dashboard(request):
    user = request.remote_user
    orders = []
    try:
        orders = orders_service.get_orders(request, user_id=user.id)
    except ApiAuthenticationError:
        raise
    except ApiError as e:
        logger.warning('Orders unavailable for user %s: %s', user.id, e)
        messages.error(request, e.user_message)

    return render(request, 'storefront/dashboard.html', {
        'stats': build_order_stats(orders),
        'recent_orders': orders[:settings.RECENT_ORDERS_LIMIT],
        'quick_actions': _quick_actions(),
    })
