"""
Клиент products-сервиса.

Каталог целиком живёт в удалённом сервисе; здесь только
преобразование JSON <-> Product и вызовы эндпоинтов.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings

from .api_client import ApiClient, ApiNotFoundError

logger = logging.getLogger('storefront.api')

PRODUCTS_PATH = '/api/v1/products'
DEFAULT_LIMIT = 10


def _to_decimal(value, default='0'):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(default)


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Product:
    id: str
    name: str
    price: Decimal
    description: str = ''
    image: str = ''
    category: str = ''
    stock: int = 0
    rating: float = 0.0

    @property
    def in_stock(self):
        return self.stock > 0

    @classmethod
    def from_payload(cls, data):
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name') or '',
            price=_to_decimal(data.get('price')),
            description=data.get('description') or '',
            image=data.get('image') or '',
            category=str(data.get('category') or ''),
            stock=_to_int(data.get('stock')),
            rating=float(data.get('rating') or 0),
        )

    def to_payload(self):
        # Сервис принимает цену числом
        if self.price == self.price.to_integral_value():
            price = int(self.price)
        else:
            price = float(self.price)
        return {
            'name': self.name,
            'price': price,
            'description': self.description,
            'image': self.image,
            'category': self.category,
            'stock': self.stock,
        }


@dataclass
class ProductPage:
    products: list
    total: int
    page: int
    total_pages: int

    @property
    def has_previous(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page < self.total_pages


def _client(request):
    return ApiClient.for_request(request, settings.PRODUCTS_SERVICE_URL)


def _product_path(product_id):
    return f'{PRODUCTS_PATH}/{product_id}'


def list_products(request, search=None, category=None, page=1, limit=DEFAULT_LIMIT):
    """
    Список товаров с фильтрацией и пагинацией.

    Args:
        search (str): Поиск по названию/описанию
        category: Название категории
        page (int): Номер страницы, начиная с 1
        limit (int): Товаров на странице

    Returns:
        ProductPage
    """
    page = max(_to_int(page, 1), 1)
    limit = max(_to_int(limit, DEFAULT_LIMIT), 1)
    data = _client(request).get(PRODUCTS_PATH, params={
        'search': search,
        'category': category,
        'page': page,
        'limit': limit,
    }) or {}

    products = [Product.from_payload(item) for item in data.get('products', [])]
    total = _to_int(data.get('total'), len(products))
    total_pages = data.get('totalPages')
    if total_pages is None:
        total_pages = math.ceil(total / limit) if total else 0

    return ProductPage(
        products=products,
        total=total,
        page=_to_int(data.get('page'), page),
        total_pages=_to_int(total_pages),
    )


def get_product(request, product_id):
    """
    Raises:
        ApiNotFoundError: Товар не найден
    """
    try:
        data = _client(request).get(_product_path(product_id))
    except ApiNotFoundError as exc:
        raise ApiNotFoundError('Product not found', status_code=404, payload=exc.payload) from exc
    return Product.from_payload(data or {})


def create_product(request, data):
    product = Product.from_payload(_client(request).post(PRODUCTS_PATH, json=data) or {})
    logger.info('Product %s created', product.id)
    return product


def update_product(request, product_id, updates):
    try:
        data = _client(request).patch(_product_path(product_id), json=updates)
    except ApiNotFoundError as exc:
        raise ApiNotFoundError('Product not found', status_code=404, payload=exc.payload) from exc
    logger.info('Product %s updated', product_id)
    return Product.from_payload(data or {})


def delete_product(request, product_id):
    try:
        _client(request).delete(_product_path(product_id))
    except ApiNotFoundError as exc:
        raise ApiNotFoundError('Product not found', status_code=404, payload=exc.payload) from exc
    logger.info('Product %s deleted', product_id)
    return True
