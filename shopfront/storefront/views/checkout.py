"""
Checkout views - Оформление заказа.

Заказ создаётся в orders-сервисе; корзина очищается только после
успешного ответа сервиса.
"""

import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.cache import never_cache

from accounts.decorators import remote_login_required
from orders import services as orders_service
from orders.services import OrderItem
from orders.status import OrderStatus

from ..forms import CheckoutForm
from ..services.api_client import ApiAuthenticationError, ApiError
from .utils import cart_count, cart_items, cart_subtotal, cart_totals, clear_cart, get_cart_from_session

logger = logging.getLogger('storefront.checkout')


@never_cache
@remote_login_required
def checkout(request):
    """
    GET - форма доставки/оплаты и сводка заказа.
    POST - создание заказа.

    Context:
        form: CheckoutForm
        cart_items, total_items, totals: Сводка корзины
    """
    cart = get_cart_from_session(request)
    if not cart:
        return redirect('cart')

    user = request.remote_user
    items = cart_items(cart)
    totals = cart_totals(cart_subtotal(cart))

    if request.method == 'POST':
        form = CheckoutForm(request.POST)
        if form.is_valid():
            order_items = [
                OrderItem(product_id=item['product_id'], quantity=item['quantity'], price=item['price'])
                for item in items
            ]
            try:
                order = orders_service.create_order(
                    request,
                    user_id=user.id,
                    items=order_items,
                    total=totals['total'],
                    shipping_address=form.shipping_address(),
                    status=OrderStatus.PENDING,
                )
            except ApiAuthenticationError:
                # Обработает ApiErrorMiddleware: выход и редирект на вход
                raise
            except ApiError as e:
                logger.error('Order creation failed for user %s: %s', user.id, e)
                form.add_error(None, e.user_message)
            else:
                clear_cart(request)
                logger.info('Checkout completed: order=%s user=%s', order.id, user.id)
                messages.success(
                    request,
                    'Order placed successfully! Thank you for your purchase. '
                    'You will receive a confirmation email shortly.'
                )
                return redirect('dashboard')
    else:
        form = CheckoutForm(initial={'email': user.email})

    return render(request, 'storefront/checkout.html', {
        'form': form,
        'cart_items': items,
        'total_items': cart_count(cart),
        'totals': totals,
    })
