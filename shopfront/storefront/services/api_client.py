"""
HTTP клиент для удалённых сервисов витрины (auth, products, orders).

Единая точка для всех запросов:
- Подставляет Bearer токен из сессии
- Логирует каждый вызов (метод, URL, статус, время)
- Переводит HTTP статусы в типизированные ошибки с текстом для UI
- При 401 очищает токен в сессии

Повторных запросов и кеширования здесь нет: одна попытка, ошибка наверх.
"""

import logging
import time

import requests
from django.conf import settings

logger = logging.getLogger('storefront.api')


# ==================== ERRORS ====================

class ApiError(Exception):
    """Базовая ошибка при работе с удалённым API"""

    default_message = 'Something went wrong. Please try again.'

    def __init__(self, message=None, status_code=None, payload=None):
        self.message = message or self.default_message
        self.status_code = status_code
        self.payload = payload
        super().__init__(self.message)

    @property
    def user_message(self):
        """Текст, который можно показать пользователю."""
        return self.message


class ApiValidationError(ApiError):
    """400/422 - сервис отклонил данные"""

    default_message = 'The submitted data was rejected. Please check the form.'


class ApiAuthenticationError(ApiError):
    """401 - токен отсутствует, истёк или неверный"""

    default_message = 'Your session has expired. Please sign in again.'


class ApiPermissionError(ApiError):
    """403 - у пользователя нет прав"""

    default_message = 'You do not have permission to perform this action.'


class ApiNotFoundError(ApiError):
    """404"""

    default_message = 'The requested item was not found.'


class ApiServiceUnavailable(ApiError):
    """5xx, таймауты, обрывы соединения, битый JSON"""

    default_message = 'The service is temporarily unavailable. Please try again later.'

    @property
    def user_message(self):
        # Внутренние детали сервера пользователю не показываем
        return self.default_message


_STATUS_ERRORS = {
    400: ApiValidationError,
    401: ApiAuthenticationError,
    403: ApiPermissionError,
    404: ApiNotFoundError,
    422: ApiValidationError,
}


def error_for_status(status_code, message=None, payload=None):
    """
    Возвращает экземпляр ошибки, соответствующий HTTP статусу.

    Args:
        status_code (int): HTTP статус ответа
        message (str): Текст ошибки от сервиса (если есть)
        payload: Тело ответа

    Returns:
        ApiError: Экземпляр подходящего подкласса
    """
    if status_code >= 500:
        error_cls = ApiServiceUnavailable
    else:
        error_cls = _STATUS_ERRORS.get(status_code, ApiError)
    return error_cls(message, status_code=status_code, payload=payload)


def _extract_error_message(response):
    """Достаёт текст ошибки из тела ответа (detail / message / error)."""
    try:
        data = response.json()
    except ValueError:
        return response.reason or None, None

    if isinstance(data, dict):
        for key in ('detail', 'message', 'error'):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value, data
            # FastAPI отдаёт ошибки валидации списком
            if isinstance(value, list) and value:
                first = value[0]
                if isinstance(first, dict) and first.get('msg'):
                    return str(first['msg']), data
    return response.reason or None, data


# ==================== CLIENT ====================

class ApiClient:
    """
    Тонкая обёртка над requests.Session для одного сервиса.

    Основные методы:
    - request(method, path, params=None, json=None) - выполнить запрос
    - get/post/put/patch/delete - сокращения
    - for_request(request, base_url) - клиент с токеном текущей сессии
    """

    def __init__(self, base_url, token=None, timeout=None, session=None, on_unauthorized=None):
        self.base_url = (base_url or '').rstrip('/')
        self.token = token
        self.timeout = timeout if timeout is not None else getattr(settings, 'API_TIMEOUT', 10)
        self.session = session or requests.Session()
        self.on_unauthorized = on_unauthorized

    @classmethod
    def for_request(cls, request, base_url, **kwargs):
        """
        Создаёт клиент с токеном из сессии текущего запроса.

        Если сервис ответит 401, токен в сессии будет очищен.
        """
        from accounts.session import clear_token, get_token

        token = get_token(request) if request is not None else None

        def _drop_token():
            logger.info('Clearing session token after 401 from %s', base_url)
            clear_token(request)

        return cls(
            base_url,
            token=token,
            on_unauthorized=_drop_token if request is not None else None,
            **kwargs,
        )

    def build_url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, has_body):
        headers = {'Accept': 'application/json'}
        if has_body:
            headers['Content-Type'] = 'application/json'
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def request(self, method, path, params=None, json=None):
        """
        Выполняет запрос к сервису.

        Args:
            method (str): HTTP метод
            path (str): Путь относительно base_url (напр. '/api/v1/products')
            params (dict): Query параметры (None-значения отбрасываются)
            json: Тело запроса

        Returns:
            dict | list | None: Декодированный JSON или None для пустого ответа

        Raises:
            ApiError: При любом ответе вне 2xx или сетевой ошибке
        """
        url = self.build_url(path)
        if params:
            params = {key: value for key, value in params.items() if value not in (None, '')}
        method = method.upper()
        started = time.monotonic()

        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=self._headers(json is not None),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as exc:
            logger.warning('API %s %s timed out after %.1fs', method, url, self.timeout)
            raise ApiServiceUnavailable(f'Timeout connecting to {self.base_url}') from exc
        except requests.exceptions.RequestException as exc:
            logger.warning('API %s %s failed: %s', method, url, exc)
            raise ApiServiceUnavailable(f'Connection error: {exc}') from exc

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info('API %s %s: status=%s (%.0f ms)', method, url, response.status_code, elapsed_ms)

        if not response.ok:
            message, payload = _extract_error_message(response)
            error = error_for_status(response.status_code, message, payload)
            if isinstance(error, ApiAuthenticationError) and self.on_unauthorized:
                self.on_unauthorized()
            raise error

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as exc:
            logger.error('API %s %s returned non-JSON body', method, url)
            raise ApiServiceUnavailable('Invalid response from service', status_code=response.status_code) from exc

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None):
        return self.request('POST', path, json=json)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def patch(self, path, json=None):
        return self.request('PATCH', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)
