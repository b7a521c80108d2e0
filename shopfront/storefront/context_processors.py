from django.conf import settings

from .views.utils import cart_count, get_cart_from_session


def cart_state(request):
    """
    Контекстный процессор: количество товаров в корзине для шапки сайта
    """
    if not hasattr(request, 'session'):
        return {'cart_count': 0}
    return {'cart_count': cart_count(get_cart_from_session(request))}


def shop_settings(request):
    return {
        'CURRENCY_CODE': settings.CURRENCY_CODE,
        'TAX_RATE_PERCENT': int(settings.TAX_RATE * 100),
    }
