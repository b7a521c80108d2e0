"""
Django Test Settings для запуска тестов без реальных сервисов.

Использование:
    python manage.py test --settings=test_settings
    pytest  (DJANGO_SETTINGS_MODULE задан в pyproject.toml)

Все HTTP вызовы в тестах подменяются через unittest.mock.
"""

from shopfront.settings import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# Фиктивные адреса сервисов: реальных запросов в тестах нет
API_BASE_URL = 'http://api.test'
AUTH_SERVICE_URL = 'http://auth.test'
PRODUCTS_SERVICE_URL = 'http://products.test'
ORDERS_SERVICE_URL = 'http://orders.test'
API_TIMEOUT = 2

SESSION_TOKEN_TTL = 3600
TOKEN_REVALIDATE_INTERVAL = 300

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.dummy.DummyCache',
    }
}

# Минимальное логирование
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'ERROR',
    },
}
