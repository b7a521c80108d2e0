"""
Декораторы доступа для view: вход обязателен / только администратор.
"""

from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import redirect, render, resolve_url


def redirect_to_login(next_url=None):
    """Редирект на страницу входа, ?next= указывает куда вернуться."""
    login_url = resolve_url(settings.LOGIN_URL)
    if next_url:
        login_url = f'{login_url}?{urlencode({"next": next_url})}'
    return redirect(login_url)


def remote_login_required(view_func):
    """Редирект на страницу входа с ?next= для анонимов."""
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not request.remote_user.is_authenticated:
            return redirect_to_login(request.get_full_path())
        return view_func(request, *args, **kwargs)
    return _wrapped_view


def admin_required(view_func):
    """
    Админ-консоль: сначала вход, потом проверка флага is_admin.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        user = request.remote_user
        if not user.is_authenticated:
            return redirect_to_login(request.get_full_path())
        if not user.is_admin:
            return render(request, 'errors/forbidden.html', status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped_view
