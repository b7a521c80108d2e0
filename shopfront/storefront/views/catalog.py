"""
Catalog views - Каталог товаров.

Содержит views для:
- Главной страницы с избранными товарами
- Списка товаров с поиском, фильтром по категории и пагинацией
- Страницы товара
"""

import logging

from django.conf import settings
from django.contrib import messages
from django.http import Http404
from django.shortcuts import render

from ..services import products_api
from ..services.api_client import ApiError, ApiNotFoundError
from .utils import parse_positive_int

logger = logging.getLogger(__name__)

VIEW_MODES = ('grid', 'list')


def category_label(category_id):
    """
    Название категории по её id из PRODUCT_CATEGORIES.

    Товары хранят категорию названием (так её сохраняет админ-форма),
    поэтому в products-сервис уходит название. Неизвестный id - None.
    """
    for cat_id, label in settings.PRODUCT_CATEGORIES:
        if str(cat_id) == str(category_id):
            return label
    return None


def home(request):
    """
    Главная страница.

    Сбой products-сервиса не ломает страницу: товары просто не показываются.
    """
    featured = []
    try:
        featured = products_api.list_products(
            request, page=1, limit=settings.HOME_FEATURED_PRODUCTS
        ).products
    except ApiError as e:
        logger.warning('Featured products unavailable: %s', e)
        messages.error(request, e.user_message)

    return render(request, 'storefront/home.html', {'featured_products': featured})


def product_list(request):
    """
    Список товаров.

    Query params:
        search: Строка поиска
        category: id категории (пусто - все)
        page: Номер страницы
        view: grid | list

    Context:
        product_page: ProductPage или None при ошибке сервиса
        error: Текст ошибки для пользователя
    """
    search = (request.GET.get('search') or '').strip()
    category = (request.GET.get('category') or '').strip()
    label = category_label(category) if category else None
    if label is None:
        # Неизвестная категория - без фильтра
        category = ''
    page = parse_positive_int(request.GET.get('page'), 1)
    view_mode = request.GET.get('view')
    if view_mode not in VIEW_MODES:
        view_mode = 'grid'

    product_page = None
    error = None
    try:
        product_page = products_api.list_products(
            request,
            search=search or None,
            category=label,
            page=page,
            limit=settings.PRODUCTS_PER_PAGE,
        )
    except ApiError as e:
        logger.warning('Product list failed: %s', e)
        error = e.user_message

    return render(request, 'storefront/product_list.html', {
        'product_page': product_page,
        'error': error,
        'search': search,
        'category': category,
        'categories': settings.PRODUCT_CATEGORIES,
        'view_mode': view_mode,
    })


def product_detail(request, product_id):
    try:
        product = products_api.get_product(request, product_id)
    except ApiNotFoundError:
        raise Http404('Product not found')

    return render(request, 'storefront/product_detail.html', {'product': product})
