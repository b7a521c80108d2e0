"""
Django settings for the shopfront project.

Витрина не хранит товары и заказы у себя: всё берётся из удалённых
сервисов (auth, products, orders) по HTTP/JSON. Адреса сервисов и
параметры сессии читаются из переменных окружения.
"""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Приоритет: DJANGO_ENV_FILE -> .env рядом с manage.py
_explicit_env_file = os.environ.get('DJANGO_ENV_FILE')
if _explicit_env_file:
    load_dotenv(_explicit_env_file)
else:
    load_dotenv(BASE_DIR / '.env')


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default):
    value = os.environ.get(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-insecure-shopfront-key')

DEBUG = _env_bool('DEBUG', True)

ALLOWED_HOSTS = _env_list('ALLOWED_HOSTS', ['localhost', '127.0.0.1', 'testserver'])

CSRF_TRUSTED_ORIGINS = _env_list('CSRF_TRUSTED_ORIGINS', [])

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'accounts',
    'storefront',
    'orders',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'accounts.middleware.RemoteAuthMiddleware',
    'shopfront.middleware.ApiErrorMiddleware',
]

ROOT_URLCONF = 'shopfront.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',
                'accounts.context_processors.auth_state',
                'storefront.context_processors.cart_state',
                'storefront.context_processors.shop_settings',
            ],
        },
    },
]

WSGI_APPLICATION = 'shopfront.wsgi.application'

# Локальная БД нужна только фреймворку: товары, заказы и пользователи
# живут в удалённых сервисах.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'shopfront',
        'OPTIONS': {
            'MAX_ENTRIES': 1000,
            'CULL_FREQUENCY': 3,
        },
        'TIMEOUT': 300,
    }
}

# Сессия = "browser storage" клиента: токен, его срок жизни и корзина.
# Данные на сервере, в cookie только ключ сессии.
SESSION_ENGINE = 'django.contrib.sessions.backends.cached_db'
SESSION_CACHE_ALIAS = 'default'
SESSION_COOKIE_AGE = int(os.environ.get('SESSION_COOKIE_AGE', '1209600'))
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_SECURE = _env_bool('SESSION_COOKIE_SECURE', not DEBUG)
CSRF_COOKIE_SECURE = _env_bool('CSRF_COOKIE_SECURE', not DEBUG)

MESSAGE_STORAGE = 'django.contrib.messages.storage.session.SessionStorage'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'Asia/Kolkata')
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGIN_URL = 'login'

# ==================== REMOTE SERVICES ====================

API_BASE_URL = os.environ.get('API_BASE_URL', 'http://localhost:8001')
AUTH_SERVICE_URL = os.environ.get('AUTH_SERVICE_URL', API_BASE_URL)
PRODUCTS_SERVICE_URL = os.environ.get('PRODUCTS_SERVICE_URL', API_BASE_URL)
ORDERS_SERVICE_URL = os.environ.get('ORDERS_SERVICE_URL', API_BASE_URL)

API_TIMEOUT = float(os.environ.get('API_TIMEOUT', '10'))

# Срок жизни токена, если auth-сервис не прислал expires_in (секунды)
SESSION_TOKEN_TTL = int(os.environ.get('SESSION_TOKEN_TTL', '3600'))
# Как часто перепроверять пользователя через verify-token (секунды)
TOKEN_REVALIDATE_INTERVAL = int(os.environ.get('TOKEN_REVALIDATE_INTERVAL', '300'))

# ==================== STOREFRONT ====================

PRODUCTS_PER_PAGE = 12
HOME_FEATURED_PRODUCTS = 4
ADMIN_PRODUCTS_LIMIT = 100
ADMIN_STATS_PRODUCTS_LIMIT = 1000
RECENT_ORDERS_LIMIT = 5

# Внешние страницы для быстрых ссылок кабинета (пусто - ссылка неактивна)
PROFILE_URL = os.environ.get('PROFILE_URL', '')
WISHLIST_URL = os.environ.get('WISHLIST_URL', '')
HELP_URL = os.environ.get('HELP_URL', '')

TAX_RATE = Decimal(os.environ.get('TAX_RATE', '0.18'))
CURRENCY_CODE = 'INR'
CURRENCY_SYMBOL = '₹'

PRODUCT_CATEGORIES = [
    (1, 'Electronics'),
    (2, 'Sports'),
    (3, 'Home'),
    (4, 'Fashion'),
    (5, 'Books'),
]

# ==================== LOGGING ====================

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.environ.get('LOG_FILE')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'storefront': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'accounts': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'orders': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

if LOG_FILE:
    LOGGING['handlers']['file'] = {
        'level': 'INFO',
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': LOG_FILE,
        'maxBytes': 5 * 1024 * 1024,
        'backupCount': 3,
        'formatter': 'verbose',
    }
    for _logger in LOGGING['loggers'].values():
        _logger['handlers'].append('file')
