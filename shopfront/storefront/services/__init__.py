"""
Клиенты удалённых сервисов витрины.
"""
from .api_client import (
    ApiAuthenticationError,
    ApiClient,
    ApiError,
    ApiNotFoundError,
    ApiPermissionError,
    ApiServiceUnavailable,
    ApiValidationError,
    error_for_status,
)

__all__ = [
    'ApiAuthenticationError',
    'ApiClient',
    'ApiError',
    'ApiNotFoundError',
    'ApiPermissionError',
    'ApiServiceUnavailable',
    'ApiValidationError',
    'error_for_status',
]
