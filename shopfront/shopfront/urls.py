from django.urls import include, path

urlpatterns = [
    # Accounts - вход/выход через auth-сервис
    path("", include("accounts.urls")),
    # Витрина, корзина, кабинет и админ-консоль
    path("", include("storefront.urls")),
]
