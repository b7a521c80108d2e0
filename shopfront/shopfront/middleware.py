"""
Дополнительные middleware для shopfront
"""

import logging

from django.contrib import messages
from django.shortcuts import render
from django.utils.deprecation import MiddlewareMixin

from accounts import session as token_store
from accounts.decorators import redirect_to_login
from storefront.services.api_client import (
    ApiAuthenticationError,
    ApiError,
    ApiNotFoundError,
    ApiPermissionError,
    ApiServiceUnavailable,
)

logger = logging.getLogger('storefront.api')


class ApiErrorMiddleware(MiddlewareMixin):
    """
    Превращает необработанные ошибки удалённых сервисов в понятный ответ:

    - 401 -> токен удаляется, редирект на вход с ?next=
    - 403 -> страница "нет доступа"
    - 404 -> страница "не найдено"
    - остальное -> страница ошибки сервиса (502/503)
    """

    def process_exception(self, request, exception):
        if not isinstance(exception, ApiError):
            return None

        if isinstance(exception, ApiAuthenticationError):
            token_store.clear_token(request)
            messages.warning(request, exception.user_message)
            next_url = request.get_full_path() if request.method == 'GET' else None
            return redirect_to_login(next_url)

        if isinstance(exception, ApiPermissionError):
            return render(request, 'errors/forbidden.html', {'error': exception.user_message}, status=403)

        if isinstance(exception, ApiNotFoundError):
            return render(request, 'errors/service_error.html', {'error': exception.user_message}, status=404)

        status = 503 if isinstance(exception, ApiServiceUnavailable) else 502
        logger.error(
            'Unhandled API error on %s %s: %s (status=%s)',
            request.method, request.path, exception, exception.status_code,
        )
        return render(request, 'errors/service_error.html', {'error': exception.user_message}, status=status)
