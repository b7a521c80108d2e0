"""
Admin views - Административная панель.

Содержит views для:
- Статистики (товары, заказы, выручка, покупатели)
- Управления товарами (поиск, создание, редактирование, удаление)
- Управления заказами (смена статуса)

Доступ только для пользователей с is_admin.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from accounts.decorators import admin_required
from orders import services as orders_service

from ..forms import OrderStatusForm, ProductForm
from ..services import products_api
from ..services.api_client import ApiAuthenticationError, ApiError, ApiNotFoundError, ApiValidationError
from ..services.products_api import Product

logger = logging.getLogger('storefront.admin')

ADMIN_TABS = ('products', 'orders')


# ==================== HELPERS ====================

def build_admin_stats(total_products, orders):
    """Собирает метрики для дашборда админки."""
    return {
        'total_products': total_products,
        'total_orders': len(orders),
        'revenue': sum((order.total for order in orders), Decimal('0')),
        'customers': len({order.user_id for order in orders}),
    }


def _product_payload(form):
    data = form.cleaned_data
    return Product(
        id='',
        name=data['name'],
        price=data['price'],
        description=data['description'],
        image=data['image'],
        category=data['category'],
        stock=data['stock'],
    ).to_payload()


# ==================== ADMIN PANEL ====================

@admin_required
def admin_panel(request):
    """
    Консоль администратора: статистика + вкладки товаров и заказов.

    Query params:
        tab: products | orders
        search: Поиск товаров
    """
    tab = request.GET.get('tab')
    if tab not in ADMIN_TABS:
        tab = 'products'
    search = (request.GET.get('search') or '').strip()

    errors = []
    stats_total_products = 0
    products = []
    orders = []

    try:
        stats_total_products = products_api.list_products(
            request, limit=settings.ADMIN_STATS_PRODUCTS_LIMIT
        ).total
        products = products_api.list_products(
            request, search=search or None, limit=settings.ADMIN_PRODUCTS_LIMIT
        ).products
    except ApiAuthenticationError:
        raise
    except ApiError as e:
        logger.warning('Admin products unavailable: %s', e)
        errors.append(e.user_message)

    try:
        orders = orders_service.get_orders(request)
    except ApiAuthenticationError:
        raise
    except ApiError as e:
        logger.warning('Admin orders unavailable: %s', e)
        errors.append(e.user_message)

    for error in dict.fromkeys(errors):
        messages.error(request, error)

    return render(request, 'storefront/admin/panel.html', {
        'tab': tab,
        'search': search,
        'stats': build_admin_stats(stats_total_products, orders),
        'products': products,
        'orders': orders,
        'status_form': OrderStatusForm(),
    })


# ==================== PRODUCTS ====================

@admin_required
def admin_product_new(request):
    form = ProductForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        try:
            products_api.create_product(request, _product_payload(form))
        except ApiValidationError as e:
            form.add_error(None, e.user_message)
        else:
            messages.success(request, 'Product created. Product has been successfully created.')
            return redirect('admin_panel')

    return render(request, 'storefront/admin/product_form.html', {
        'form': form,
        'product': None,
    })


@admin_required
def admin_product_edit(request, product_id):
    try:
        product = products_api.get_product(request, product_id)
    except ApiNotFoundError:
        raise Http404('Product not found')

    form = ProductForm(request.POST or None, initial=ProductForm.initial_for(product))

    if request.method == 'POST' and form.is_valid():
        try:
            products_api.update_product(request, product_id, _product_payload(form))
        except ApiValidationError as e:
            form.add_error(None, e.user_message)
        else:
            messages.success(request, 'Product updated. Product has been successfully updated.')
            return redirect('admin_panel')

    return render(request, 'storefront/admin/product_form.html', {
        'form': form,
        'product': product,
    })


@require_POST
@admin_required
def admin_product_delete(request, product_id):
    try:
        products_api.delete_product(request, product_id)
    except ApiNotFoundError as e:
        messages.error(request, e.user_message)
    else:
        messages.success(request, 'Product deleted. Product has been successfully deleted.')
    return redirect('admin_panel')


# ==================== ORDERS ====================

@require_POST
@admin_required
def admin_order_update_status(request, order_id):
    form = OrderStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Invalid order status.')
        return redirect(f"{reverse('admin_panel')}?tab=orders")

    try:
        orders_service.update_order_status(request, order_id, form.cleaned_data['status'])
    except ApiNotFoundError as e:
        messages.error(request, e.user_message)
    else:
        messages.success(request, 'Order updated. Order status has been successfully updated.')
    return redirect(f"{reverse('admin_panel')}?tab=orders")
