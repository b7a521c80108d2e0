"""
Tests for ApiErrorMiddleware: service errors that no view handles itself.
"""

from django.test import TestCase
from django.urls import reverse

from accounts import session as token_store

from .fakes import ADMIN_USER, PRODUCTS, FakeServices, sign_in

PRODUCTS_URL = f'{PRODUCTS}/api/v1/products'


class ApiErrorMiddlewareTests(TestCase):

    def setUp(self):
        self.services = FakeServices()
        sign_in(self.client, user=ADMIN_USER, token='admin-token')

    def test_service_403_renders_forbidden_page(self):
        self.services.add('DELETE', f'{PRODUCTS_URL}/1', status=403, body={'detail': 'Admins only'})
        with self.services.patch():
            response = self.client.post(reverse('admin_product_delete', args=['1']))

        self.assertEqual(response.status_code, 403)
        self.assertTemplateUsed(response, 'errors/forbidden.html')
        self.assertContains(response, 'Admins only', status_code=403)
        # 403 не разлогинивает
        self.assertEqual(self.client.session[token_store.TOKEN_KEY], 'admin-token')

    def test_other_client_error_renders_service_error_502(self):
        self.services.add('DELETE', f'{PRODUCTS_URL}/2', status=409, body={'detail': 'Product has open orders'})
        with self.services.patch():
            response = self.client.post(reverse('admin_product_delete', args=['2']))

        self.assertEqual(response.status_code, 502)
        self.assertTemplateUsed(response, 'errors/service_error.html')
        self.assertContains(response, 'Product has open orders', status_code=502)

    def test_unavailable_service_renders_503(self):
        self.services.add('DELETE', f'{PRODUCTS_URL}/3', status=500, body={'detail': 'stack trace'})
        with self.services.patch():
            response = self.client.post(reverse('admin_product_delete', args=['3']))

        self.assertEqual(response.status_code, 503)
        self.assertNotContains(response, 'stack trace', status_code=503)

    def test_401_on_post_redirects_to_login_without_next(self):
        self.services.add('DELETE', f'{PRODUCTS_URL}/4', status=401, body={'detail': 'Token expired'})
        with self.services.patch():
            response = self.client.post(reverse('admin_product_delete', args=['4']))

        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
        self.assertNotIn(token_store.TOKEN_KEY, self.client.session)

    def test_401_on_get_keeps_next(self):
        self.services.add('GET', f'{PRODUCTS_URL}/5', status=401)
        with self.services.patch():
            response = self.client.get(reverse('admin_product_edit', args=['5']))

        self.assertRedirects(
            response, f"{reverse('login')}?next=%2Fadmin-panel%2Fproduct%2F5%2Fedit%2F",
            fetch_redirect_response=False,
        )
