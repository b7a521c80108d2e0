"""
Unit tests for storefront views module.

Test structure:
- test_api_client.py: HTTP client and error mapping
- test_products_api.py: Products service client
- test_catalog.py: Home, product list and product detail
- test_cart.py: Shopping cart tests
- test_checkout.py: Checkout and order creation tests
- test_dashboard.py: User dashboard
- test_admin.py: Admin console
- test_templatetags.py: Price formatting and rating stars
"""
