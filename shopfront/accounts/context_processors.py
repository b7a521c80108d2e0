def auth_state(request):
    """
    Контекстный процессор: текущий пользователь auth-сервиса для шапки сайта
    """
    user = getattr(request, 'remote_user', None)
    is_authenticated = bool(user is not None and user.is_authenticated)
    return {
        'current_user': user if is_authenticated else None,
        'is_admin': bool(is_authenticated and user.is_admin),
    }
