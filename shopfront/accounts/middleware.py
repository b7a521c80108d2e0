"""
Middleware для привязки пользователя auth-сервиса к запросу.
"""

import logging

from django.utils.deprecation import MiddlewareMixin
from django.utils.functional import SimpleLazyObject

from storefront.services.api_client import ApiAuthenticationError, ApiServiceUnavailable

from . import session as token_store
from .auth_service import AnonymousRemoteUser, AuthService

logger = logging.getLogger('accounts.auth')


def get_remote_user(request):
    """
    Определяет текущего пользователя по токену из сессии.

    - Нет токена или он истёк -> аноним
    - Пора перепроверить -> verify-token; отказ сервиса очищает токен
    - Сервис недоступен -> доверяем пользователю из сессии
    """
    token = token_store.get_token(request)
    if not token:
        return AnonymousRemoteUser()

    user = token_store.get_session_user(request)
    if user is not None and not token_store.needs_revalidation(request):
        return user

    try:
        user = AuthService().verify_token(token)
    except ApiAuthenticationError:
        logger.info('Stored token rejected by auth service, clearing')
        token_store.clear_token(request)
        return AnonymousRemoteUser()
    except ApiServiceUnavailable as exc:
        logger.warning('Auth service unavailable during token check: %s', exc)
        return user if user is not None else AnonymousRemoteUser()

    token_store.mark_verified(request, user)
    return user


class RemoteAuthMiddleware(MiddlewareMixin):
    """
    Добавляет request.remote_user (лениво, verify-token только при обращении).
    """

    def process_request(self, request):
        if not hasattr(request, 'session'):
            raise RuntimeError(
                'RemoteAuthMiddleware requires SessionMiddleware to be installed before it.'
            )
        request.remote_user = SimpleLazyObject(lambda: get_remote_user(request))
