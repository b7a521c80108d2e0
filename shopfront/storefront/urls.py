from django.urls import path
from . import views
urlpatterns=[
    path('', views.home, name='home'),
    path('products/', views.product_list, name='product_list'),
    path('products/<str:product_id>/', views.product_detail, name='product_detail'),
    # cart
    path('cart/', views.view_cart, name='cart'),
    path('cart/add/', views.add_to_cart, name='cart_add'),
    path('cart/update/', views.update_cart, name='cart_update'),
    path('cart/remove/', views.remove_from_cart, name='cart_remove'),
    path('cart/clear/', views.clear_cart_view, name='cart_clear'),
    path('cart/count/', views.get_cart_count, name='cart_count'),
    path('checkout/', views.checkout, name='checkout'),
    # user dashboard
    path('dashboard/', views.dashboard, name='dashboard'),
    # admin panel
    path('admin-panel/', views.admin_panel, name='admin_panel'),
    path('admin-panel/product/new/', views.admin_product_new, name='admin_product_new'),
    path('admin-panel/product/<str:product_id>/edit/', views.admin_product_edit, name='admin_product_edit'),
    path('admin-panel/product/<str:product_id>/delete/', views.admin_product_delete, name='admin_product_delete'),
    path('admin-panel/order/<str:order_id>/status/', views.admin_order_update_status, name='admin_order_update_status'),
]
