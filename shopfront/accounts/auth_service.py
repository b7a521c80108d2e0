"""
Клиент auth-сервиса: вход по email/паролю и проверка токена.
"""

import logging
from dataclasses import dataclass, field

from django.conf import settings

from storefront.services.api_client import (
    ApiAuthenticationError,
    ApiClient,
    ApiError,
    ApiServiceUnavailable,
)

logger = logging.getLogger('accounts.auth')

LOGIN_PATH = '/api/v1/login'
VERIFY_TOKEN_PATH = '/api/v1/verify-token'


@dataclass
class RemoteUser:
    """Пользователь, каким его отдаёт auth-сервис."""

    id: int
    username: str
    email: str
    is_admin: bool = False

    is_authenticated = True
    is_anonymous = False

    @classmethod
    def from_payload(cls, data):
        data = data or {}
        return cls(
            id=data.get('id'),
            username=data.get('username') or '',
            email=data.get('email') or '',
            is_admin=bool(data.get('is_admin', False)),
        )

    def to_session(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'is_admin': self.is_admin,
        }

    @property
    def display_name(self):
        return self.username or self.email


class AnonymousRemoteUser:
    id = None
    username = ''
    email = ''
    is_admin = False
    is_authenticated = False
    is_anonymous = True
    display_name = ''

    def __bool__(self):
        return False

    def __eq__(self, other):
        return isinstance(other, AnonymousRemoteUser)

    def __hash__(self):
        return 1


@dataclass
class LoginResult:
    access_token: str
    token_type: str
    user: RemoteUser
    expires_in: int = None
    raw: dict = field(default_factory=dict, repr=False)


class AuthService:
    """
    Основные методы:
    - login(email, password) - получить токен и пользователя
    - verify_token(token) - проверить токен и получить пользователя
    """

    def __init__(self, base_url=None, client=None):
        self.client = client or ApiClient(base_url or settings.AUTH_SERVICE_URL)

    def login(self, email, password):
        """
        Raises:
            ApiAuthenticationError: Неверные учётные данные
            ApiServiceUnavailable: Сервис недоступен
        """
        try:
            data = self.client.post(LOGIN_PATH, json={'email': email, 'password': password}) or {}
        except ApiServiceUnavailable:
            raise
        except ApiError as exc:
            logger.info('Login rejected for %s: status=%s', email, exc.status_code)
            raise ApiAuthenticationError('Invalid credentials', status_code=exc.status_code) from exc

        token = data.get('access_token')
        if not token:
            raise ApiServiceUnavailable('Auth service returned no access token')

        expires_in = data.get('expires_in')
        try:
            expires_in = int(expires_in) if expires_in is not None else None
        except (TypeError, ValueError):
            expires_in = None

        user = RemoteUser.from_payload(data.get('user'))
        logger.info('User %s signed in (admin=%s)', user.id, user.is_admin)
        return LoginResult(
            access_token=token,
            token_type=data.get('token_type') or 'bearer',
            user=user,
            expires_in=expires_in,
            raw=data,
        )

    def verify_token(self, token):
        """
        Raises:
            ApiAuthenticationError: Токен недействителен
            ApiServiceUnavailable: Сервис недоступен
        """
        client = ApiClient(self.client.base_url, token=token, timeout=self.client.timeout, session=self.client.session)
        try:
            data = client.get(VERIFY_TOKEN_PATH) or {}
        except ApiServiceUnavailable:
            raise
        except ApiError as exc:
            raise ApiAuthenticationError('Invalid token', status_code=exc.status_code) from exc

        user_data = data.get('user')
        if not isinstance(user_data, dict) or user_data.get('id') is None:
            logger.warning('verify-token answered without a user, treating token as invalid')
            raise ApiAuthenticationError('Invalid token')
        return RemoteUser.from_payload(user_data)
