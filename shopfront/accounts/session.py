"""
Хранение токена auth-сервиса в сессии.

В сессии лежат:
- auth_token / auth_token_type - сам токен
- auth_token_expires_at - когда токен перестаёт считаться валидным (unix time)
- auth_user - пользователь из последнего ответа auth-сервиса
- auth_verified_at - когда пользователь последний раз проверялся

Корзина при выходе не трогается.
"""

import logging
import time

from django.conf import settings

from .auth_service import RemoteUser

logger = logging.getLogger('accounts.auth')

TOKEN_KEY = 'auth_token'
TOKEN_TYPE_KEY = 'auth_token_type'
EXPIRES_AT_KEY = 'auth_token_expires_at'
USER_KEY = 'auth_user'
VERIFIED_AT_KEY = 'auth_verified_at'

_AUTH_KEYS = (TOKEN_KEY, TOKEN_TYPE_KEY, EXPIRES_AT_KEY, USER_KEY, VERIFIED_AT_KEY)


def _now():
    return time.time()


def store_token(request, token, user, token_type='bearer', expires_in=None):
    """
    Сохраняет токен после успешного входа.

    Args:
        token (str): access_token из ответа auth-сервиса
        user (RemoteUser): Пользователь из ответа
        expires_in (int): Срок жизни в секундах; без него берётся SESSION_TOKEN_TTL
    """
    ttl = expires_in if expires_in else settings.SESSION_TOKEN_TTL
    now = _now()

    # Новый ключ сессии после входа, корзина переносится
    request.session.cycle_key()
    request.session[TOKEN_KEY] = token
    request.session[TOKEN_TYPE_KEY] = token_type
    request.session[EXPIRES_AT_KEY] = now + ttl
    request.session[USER_KEY] = user.to_session()
    request.session[VERIFIED_AT_KEY] = now
    request.session.modified = True


def token_expires_at(request):
    return request.session.get(EXPIRES_AT_KEY)


def is_token_expired(request):
    expires_at = token_expires_at(request)
    if expires_at is None:
        return True
    return _now() >= float(expires_at)


def clear_token(request):
    removed = False
    for key in _AUTH_KEYS:
        if key in request.session:
            del request.session[key]
            removed = True
    if removed:
        request.session.modified = True
    return removed


def get_token(request):
    """
    Возвращает токен из сессии или None.

    Истёкший токен удаляется из сессии.
    """
    token = request.session.get(TOKEN_KEY)
    if not token:
        return None
    if is_token_expired(request):
        logger.info('Session token expired, clearing')
        clear_token(request)
        return None
    return token


def get_session_user(request):
    data = request.session.get(USER_KEY)
    if not data:
        return None
    return RemoteUser.from_payload(data)


def needs_revalidation(request):
    verified_at = request.session.get(VERIFIED_AT_KEY)
    if verified_at is None:
        return True
    return _now() - float(verified_at) >= settings.TOKEN_REVALIDATE_INTERVAL


def mark_verified(request, user):
    request.session[USER_KEY] = user.to_session()
    request.session[VERIFIED_AT_KEY] = _now()
    request.session.modified = True
