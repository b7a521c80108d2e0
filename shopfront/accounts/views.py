"""
Authentication views: вход через auth-сервис и выход.
"""

import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from storefront.services.api_client import ApiAuthenticationError, ApiServiceUnavailable

from . import session as token_store
from .auth_service import AuthService
from .forms import LoginForm

logger = logging.getLogger('accounts.auth')


def _default_redirect(user):
    # Администраторы попадают сразу в консоль
    if user.is_admin:
        return 'admin_panel'
    return 'dashboard'


def _safe_next(request):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    return None


def login_view(request):
    """
    View для входа в систему.

    Features:
    - Уже вошедших пользователей сразу перенаправляет
    - Сохраняет токен и срок его жизни в сессии
    - Поддерживает редирект через параметр 'next'
    """
    if request.remote_user.is_authenticated:
        return redirect(_safe_next(request) or _default_redirect(request.remote_user))

    form = LoginForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        try:
            result = AuthService().login(
                form.cleaned_data['email'],
                form.cleaned_data['password'],
            )
        except ApiAuthenticationError as exc:
            form.add_error(None, exc.user_message)
        except ApiServiceUnavailable as exc:
            logger.warning('Login failed, auth service unavailable: %s', exc)
            form.add_error(None, exc.user_message)
        else:
            token_store.store_token(
                request,
                result.access_token,
                result.user,
                token_type=result.token_type,
                expires_in=result.expires_in,
            )
            messages.success(request, f'Welcome back, {result.user.display_name}!')
            return redirect(_safe_next(request) or _default_redirect(result.user))

    return render(request, 'accounts/login.html', {
        'form': form,
        'next': request.POST.get('next') or request.GET.get('next', ''),
    })


@require_POST
def logout_view(request):
    token_store.clear_token(request)
    messages.info(request, 'You have been signed out.')
    return redirect('login')
