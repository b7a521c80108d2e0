"""
Unit tests for the HTTP client (services/api_client.py).

Tests:
- request: headers, params, body decoding
- error_for_status: HTTP status -> error class mapping
- for_request: session token attach and clearing on 401
"""

import time

import requests
from django.contrib.sessions.backends.signed_cookies import SessionStore
from django.test import RequestFactory, SimpleTestCase

from accounts import session as token_store
from storefront.services.api_client import (
    ApiAuthenticationError,
    ApiClient,
    ApiError,
    ApiNotFoundError,
    ApiPermissionError,
    ApiServiceUnavailable,
    ApiValidationError,
    error_for_status,
)

from .fakes import CUSTOMER_USER, PRODUCTS, FakeServices


class ErrorForStatusTests(SimpleTestCase):
    """Tests for HTTP status mapping."""

    def test_known_statuses(self):
        self.assertIsInstance(error_for_status(400), ApiValidationError)
        self.assertIsInstance(error_for_status(401), ApiAuthenticationError)
        self.assertIsInstance(error_for_status(403), ApiPermissionError)
        self.assertIsInstance(error_for_status(404), ApiNotFoundError)
        self.assertIsInstance(error_for_status(422), ApiValidationError)

    def test_server_errors_are_unavailable(self):
        for status in (500, 502, 503, 504):
            self.assertIsInstance(error_for_status(status), ApiServiceUnavailable)

    def test_other_client_errors_fall_back_to_base(self):
        error = error_for_status(409, 'Conflict')
        self.assertIs(type(error), ApiError)
        self.assertEqual(error.status_code, 409)
        self.assertEqual(error.user_message, 'Conflict')

    def test_unavailable_hides_server_details(self):
        error = error_for_status(500, 'Traceback: KeyError at line 42')
        self.assertNotIn('Traceback', error.user_message)


class ApiClientRequestTests(SimpleTestCase):
    """Tests for ApiClient.request."""

    def setUp(self):
        self.services = FakeServices()
        self.url = f'{PRODUCTS}/api/v1/products'

    def test_get_returns_decoded_json_and_sends_bearer(self):
        self.services.add('GET', self.url, body={'products': [], 'total': 0})
        client = ApiClient(PRODUCTS + '/', token='abc')

        with self.services.patch():
            data = client.get('/api/v1/products', params={'search': 'shoes', 'category': None, 'page': 1})

        self.assertEqual(data, {'products': [], 'total': 0})
        call = self.services.last_call('GET', self.url)
        self.assertEqual(call.headers['Authorization'], 'Bearer abc')
        # Пустые параметры не отправляются
        self.assertEqual(call.params, {'search': 'shoes', 'page': 1})
        self.assertNotIn('Content-Type', call.headers)

    def test_no_authorization_header_without_token(self):
        self.services.add('GET', self.url, body=[])
        with self.services.patch():
            ApiClient(PRODUCTS).get('/api/v1/products')
        self.assertNotIn('Authorization', self.services.last_call('GET', self.url).headers)

    def test_post_sends_json_body(self):
        self.services.add('POST', self.url, status=201, body={'id': '9'})
        with self.services.patch():
            data = ApiClient(PRODUCTS).post('/api/v1/products', json={'name': 'Lamp'})
        self.assertEqual(data, {'id': '9'})
        call = self.services.last_call('POST', self.url)
        self.assertEqual(call.json, {'name': 'Lamp'})
        self.assertEqual(call.headers['Content-Type'], 'application/json')

    def test_empty_body_returns_none(self):
        self.services.add('DELETE', f'{self.url}/1', status=204)
        with self.services.patch():
            self.assertIsNone(ApiClient(PRODUCTS).delete('/api/v1/products/1'))

    def test_error_detail_is_used_as_message(self):
        self.services.add('GET', f'{self.url}/1', status=404, body={'detail': 'No such product'})
        with self.services.patch():
            with self.assertRaises(ApiNotFoundError) as ctx:
                ApiClient(PRODUCTS).get('/api/v1/products/1')
        self.assertEqual(ctx.exception.message, 'No such product')
        self.assertEqual(ctx.exception.status_code, 404)

    def test_validation_error_list_is_flattened(self):
        body = {'detail': [{'loc': ['body', 'price'], 'msg': 'value is not a valid number'}]}
        self.services.add('POST', self.url, status=422, body=body)
        with self.services.patch():
            with self.assertRaises(ApiValidationError) as ctx:
                ApiClient(PRODUCTS).post('/api/v1/products', json={})
        self.assertEqual(ctx.exception.message, 'value is not a valid number')

    def test_non_json_error_body_uses_reason(self):
        self.services.add('GET', self.url, status=502, body='<html>Bad gateway</html>')
        with self.services.patch():
            with self.assertRaises(ApiServiceUnavailable) as ctx:
                ApiClient(PRODUCTS).get('/api/v1/products')
        self.assertEqual(ctx.exception.message, 'Bad Gateway')

    def test_non_json_success_body_is_unavailable(self):
        self.services.add('GET', self.url, status=200, body='not json')
        with self.services.patch():
            with self.assertRaises(ApiServiceUnavailable):
                ApiClient(PRODUCTS).get('/api/v1/products')

    def test_timeout_maps_to_unavailable(self):
        self.services.add('GET', self.url, exc=requests.exceptions.Timeout())
        with self.services.patch():
            with self.assertRaises(ApiServiceUnavailable) as ctx:
                ApiClient(PRODUCTS).get('/api/v1/products')
        self.assertIsNone(ctx.exception.status_code)

    def test_connection_error_maps_to_unavailable(self):
        self.services.add('GET', self.url, exc=requests.exceptions.ConnectionError('refused'))
        with self.services.patch():
            with self.assertRaises(ApiServiceUnavailable):
                ApiClient(PRODUCTS).get('/api/v1/products')

    def test_single_attempt_no_retry(self):
        self.services.add('GET', self.url, status=503, body={'detail': 'down'})
        with self.services.patch():
            with self.assertRaises(ApiServiceUnavailable):
                ApiClient(PRODUCTS).get('/api/v1/products')
        self.assertEqual(len(self.services.calls), 1)


class ApiClientForRequestTests(SimpleTestCase):
    """Tests for the session-bound client."""

    def setUp(self):
        self.services = FakeServices()
        self.request = RequestFactory().get('/')
        self.request.session = SessionStore()
        self.request.session[token_store.TOKEN_KEY] = 'session-token'
        self.request.session[token_store.EXPIRES_AT_KEY] = time.time() + 600
        self.request.session[token_store.USER_KEY] = CUSTOMER_USER
        self.request.session['cart'] = {'1': {'name': 'Lamp', 'price': '10', 'quantity': 1}}

    def test_uses_session_token(self):
        url = f'{PRODUCTS}/api/v1/products'
        self.services.add('GET', url, body=[])
        with self.services.patch():
            ApiClient.for_request(self.request, PRODUCTS).get('/api/v1/products')
        self.assertEqual(self.services.last_call('GET', url).headers['Authorization'], 'Bearer session-token')

    def test_expired_token_is_not_sent(self):
        self.request.session[token_store.EXPIRES_AT_KEY] = time.time() - 1
        url = f'{PRODUCTS}/api/v1/products'
        self.services.add('GET', url, body=[])
        with self.services.patch():
            ApiClient.for_request(self.request, PRODUCTS).get('/api/v1/products')
        self.assertNotIn('Authorization', self.services.last_call('GET', url).headers)
        self.assertNotIn(token_store.TOKEN_KEY, self.request.session)

    def test_401_clears_token_but_keeps_cart(self):
        url = f'{PRODUCTS}/api/v1/products'
        self.services.add('GET', url, status=401, body={'detail': 'Token expired'})
        with self.services.patch():
            with self.assertRaises(ApiAuthenticationError):
                ApiClient.for_request(self.request, PRODUCTS).get('/api/v1/products')
        self.assertNotIn(token_store.TOKEN_KEY, self.request.session)
        self.assertNotIn(token_store.USER_KEY, self.request.session)
        self.assertIn('cart', self.request.session)

    def test_403_keeps_token(self):
        url = f'{PRODUCTS}/api/v1/products/1'
        self.services.add('DELETE', url, status=403, body={'detail': 'Admins only'})
        with self.services.patch():
            with self.assertRaises(ApiPermissionError):
                ApiClient.for_request(self.request, PRODUCTS).delete('/api/v1/products/1')
        self.assertEqual(self.request.session[token_store.TOKEN_KEY], 'session-token')
