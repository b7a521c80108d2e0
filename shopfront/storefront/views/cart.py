"""
Cart views - Корзина покупок.

Содержит views для:
- Просмотра корзины
- Добавления товаров
- Обновления количества
- Удаления товаров
- Очистки корзины
"""

import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import remote_login_required

from ..services import products_api
from ..services.api_client import ApiError, ApiNotFoundError
from .utils import (
    add_item,
    cart_count,
    cart_items,
    cart_subtotal,
    cart_totals,
    clear_cart,
    get_cart_from_session,
    parse_positive_int,
    remove_item,
    update_quantity,
)

# Logger для корзины
cart_logger = logging.getLogger('storefront.cart')


def _wants_json(request):
    return (
        request.headers.get('x-requested-with') == 'XMLHttpRequest'
        or 'application/json' in request.headers.get('accept', '')
    )


def _redirect_back(request, fallback='cart'):
    next_url = request.POST.get('next') or request.META.get('HTTP_REFERER')
    if next_url and url_has_allowed_host_and_scheme(
        next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return redirect(next_url)
    return redirect(fallback)


# ==================== CART VIEWS ====================

@never_cache
@remote_login_required
def view_cart(request):
    """
    Страница просмотра корзины.

    Context:
        cart_items: Список позиций с line_total
        total_items: Количество единиц товара
        totals: subtotal / shipping / tax / total
    """
    cart = get_cart_from_session(request)
    return render(request, 'storefront/cart.html', {
        'cart_items': cart_items(cart),
        'total_items': cart_count(cart),
        'totals': cart_totals(cart_subtotal(cart)),
    })


@require_POST
def add_to_cart(request):
    """
    Добавляет товар в корзину.

    Цена и остаток берутся из products-сервиса, а не из формы.

    POST params:
        product_id: id товара
        quantity: Количество (по умолчанию 1)
    """
    product_id = (request.POST.get('product_id') or '').strip()
    quantity = parse_positive_int(request.POST.get('quantity'), 1)

    if not product_id:
        if _wants_json(request):
            return JsonResponse({'success': False, 'error': 'Product is required'}, status=400)
        messages.error(request, 'Product is required')
        return _redirect_back(request, 'product_list')

    try:
        product = products_api.get_product(request, product_id)
    except ApiNotFoundError as e:
        if _wants_json(request):
            return JsonResponse({'success': False, 'error': e.user_message}, status=404)
        messages.error(request, e.user_message)
        return _redirect_back(request, 'product_list')
    except ApiError as e:
        cart_logger.warning('Add to cart failed for product %s: %s', product_id, e)
        if _wants_json(request):
            return JsonResponse({'success': False, 'error': e.user_message}, status=502)
        messages.error(request, e.user_message)
        return _redirect_back(request, 'product_list')

    added_qty = add_item(request, product, quantity)
    if not added_qty:
        message = f'{product.name} is out of stock.'
        if _wants_json(request):
            return JsonResponse({'success': False, 'error': message}, status=409)
        messages.error(request, message)
        return _redirect_back(request, 'product_list')

    message = f'{product.name} has been added to your cart.'
    count = cart_count(get_cart_from_session(request))
    if _wants_json(request):
        return JsonResponse({
            'success': True,
            'message': message,
            'quantity': added_qty,
            'cart_count': count,
        })

    messages.success(request, message)
    return _redirect_back(request, 'product_list')


@require_POST
@remote_login_required
def update_cart(request):
    """
    Меняет количество позиции. quantity < 1 удаляет позицию.
    """
    product_id = (request.POST.get('product_id') or '').strip()
    try:
        quantity = int(request.POST.get('quantity', 1))
    except (TypeError, ValueError):
        quantity = 1

    new_qty = update_quantity(request, product_id, quantity)

    if _wants_json(request):
        if new_qty is None:
            return JsonResponse({'success': False, 'error': 'Item not in cart'}, status=404)
        cart = get_cart_from_session(request)
        return JsonResponse({
            'success': True,
            'quantity': new_qty,
            'cart_count': cart_count(cart),
            'totals': {key: str(value) for key, value in cart_totals(cart_subtotal(cart)).items()},
        })

    if new_qty is None:
        messages.error(request, 'Item not in cart')
    return redirect('cart')


@require_POST
@remote_login_required
def remove_from_cart(request):
    product_id = (request.POST.get('product_id') or '').strip()
    removed = remove_item(request, product_id)

    if _wants_json(request):
        return JsonResponse({
            'success': removed,
            'cart_count': cart_count(get_cart_from_session(request)),
        }, status=200 if removed else 404)

    if not removed:
        messages.error(request, 'Item not in cart')
    return redirect('cart')


@require_POST
@remote_login_required
def clear_cart_view(request):
    clear_cart(request)
    if _wants_json(request):
        return JsonResponse({'success': True, 'cart_count': 0})
    return redirect('cart')


@require_GET
def get_cart_count(request):
    """AJAX: количество товаров для бейджа в шапке."""
    return JsonResponse({'count': cart_count(get_cart_from_session(request))})
