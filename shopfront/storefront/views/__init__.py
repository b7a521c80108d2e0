"""
Storefront views package.

Структура:
- utils.py - Корзина в сессии и расчёт итогов
- catalog.py - Главная, список товаров, страница товара
- cart.py - Корзина
- checkout.py - Оформление заказа
- dashboard.py - Кабинет пользователя
- admin.py - Админ-консоль (товары и заказы)
"""

# Каталог
from .catalog import (
    home,
    product_list,
    product_detail,
)

# Корзина
from .cart import (
    view_cart,
    add_to_cart,
    update_cart,
    remove_from_cart,
    clear_cart_view,
    get_cart_count,
)

# Оформление заказа
from .checkout import checkout

# Кабинет
from .dashboard import dashboard

# Админ-консоль
from .admin import (
    admin_panel,
    admin_product_new,
    admin_product_edit,
    admin_product_delete,
    admin_order_update_status,
)
