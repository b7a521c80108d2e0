"""
Tests for sign in / sign out and the session-bound remote user.
"""

import time
from unittest import mock

from django.contrib.messages import get_messages
from django.test import TestCase
from django.urls import reverse

from accounts import session as token_store
from storefront.tests.fakes import (
    ADMIN_USER,
    AUTH,
    CUSTOMER_USER,
    FakeServices,
    set_cart,
    sign_in,
)

LOGIN_URL = f'{AUTH}/api/v1/login'
VERIFY_URL = f'{AUTH}/api/v1/verify-token'


def _login_body(user, token='fresh-token', **extra):
    body = {'access_token': token, 'token_type': 'bearer', 'user': user}
    body.update(extra)
    return body


class LoginViewTests(TestCase):

    def setUp(self):
        self.services = FakeServices()
        self.credentials = {'email': 'user@example.com', 'password': 'secret'}

    def test_login_page(self):
        response = self.client.get(reverse('login'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Sign In')

    def test_customer_login_goes_to_dashboard(self):
        self.services.add('POST', LOGIN_URL, body=_login_body(CUSTOMER_USER))
        with self.services.patch():
            response = self.client.post(reverse('login'), self.credentials)

        self.assertRedirects(response, reverse('dashboard'), fetch_redirect_response=False)
        self.assertEqual(self.services.last_call('POST', LOGIN_URL).json, self.credentials)
        session = self.client.session
        self.assertEqual(session[token_store.TOKEN_KEY], 'fresh-token')
        self.assertEqual(session[token_store.USER_KEY]['username'], 'john')
        self.assertAlmostEqual(session[token_store.EXPIRES_AT_KEY], time.time() + 3600, delta=60)
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertIn('Welcome back, john!', messages)

    def test_admin_login_goes_to_admin_console(self):
        self.services.add('POST', LOGIN_URL, body=_login_body(ADMIN_USER))
        with self.services.patch():
            response = self.client.post(reverse('login'), {'email': 'admin@example.com', 'password': 'admin'})
        self.assertRedirects(response, reverse('admin_panel'), fetch_redirect_response=False)

    def test_expires_in_from_service_is_used(self):
        self.services.add('POST', LOGIN_URL, body=_login_body(CUSTOMER_USER, expires_in=60))
        with self.services.patch():
            self.client.post(reverse('login'), self.credentials)
        expires_at = self.client.session[token_store.EXPIRES_AT_KEY]
        self.assertAlmostEqual(expires_at, time.time() + 60, delta=30)

    def test_login_respects_next(self):
        self.services.add('POST', LOGIN_URL, body=_login_body(CUSTOMER_USER))
        with self.services.patch():
            response = self.client.post(reverse('login'), dict(self.credentials, next='/checkout/'))
        self.assertRedirects(response, '/checkout/', fetch_redirect_response=False)

    def test_external_next_is_ignored(self):
        self.services.add('POST', LOGIN_URL, body=_login_body(CUSTOMER_USER))
        with self.services.patch():
            response = self.client.post(reverse('login'), dict(self.credentials, next='https://evil.example/'))
        self.assertRedirects(response, reverse('dashboard'), fetch_redirect_response=False)

    def test_invalid_credentials(self):
        self.services.add('POST', LOGIN_URL, status=401, body={'detail': 'Incorrect email or password'})
        with self.services.patch():
            response = self.client.post(reverse('login'), self.credentials)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid credentials')
        self.assertNotIn(token_store.TOKEN_KEY, self.client.session)

    def test_auth_service_down(self):
        self.services.add('POST', LOGIN_URL, status=503)
        with self.services.patch():
            response = self.client.post(reverse('login'), self.credentials)
        self.assertContains(response, 'The service is temporarily unavailable. Please try again later.')

    def test_invalid_email_not_sent(self):
        response = self.client.post(reverse('login'), {'email': 'not-an-email', 'password': 'x'})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].errors['email'])
        self.assertEqual(self.services.calls, [])

    def test_signed_in_user_is_redirected(self):
        sign_in(self.client)
        response = self.client.get(reverse('login'))
        self.assertRedirects(response, reverse('dashboard'), fetch_redirect_response=False)


class LogoutViewTests(TestCase):

    def test_logout_keeps_cart(self):
        sign_in(self.client)
        set_cart(self.client, {'1': {'name': 'Mug', 'price': '250', 'quantity': 1}})

        response = self.client.post(reverse('logout'))

        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
        session = self.client.session
        self.assertNotIn(token_store.TOKEN_KEY, session)
        self.assertNotIn(token_store.USER_KEY, session)
        self.assertIn('1', session['cart'])

    def test_logout_requires_post(self):
        response = self.client.get(reverse('logout'))
        self.assertEqual(response.status_code, 405)


class RemoteAuthMiddlewareTests(TestCase):
    """Token expiry and periodic revalidation against the auth service."""

    def setUp(self):
        self.services = FakeServices()

    def test_expired_token_signs_out(self):
        sign_in(self.client, ttl=3600)
        with mock.patch('accounts.session._now', return_value=time.time() + 3601):
            response = self.client.get(reverse('cart'))

        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].startswith(reverse('login')))
        self.assertNotIn(token_store.TOKEN_KEY, self.client.session)

    def test_fresh_session_skips_verification(self):
        sign_in(self.client)
        with self.services.patch():
            response = self.client.get(reverse('cart'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.services.calls, [])

    def test_stale_session_is_revalidated(self):
        sign_in(self.client, verified_at=time.time() - 301)
        self.services.add('GET', VERIFY_URL, body={'user': dict(CUSTOMER_USER, username='johnny')})
        with self.services.patch():
            response = self.client.get(reverse('cart'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.services.last_call('GET', VERIFY_URL).headers['Authorization'], 'Bearer test-token')
        session = self.client.session
        self.assertEqual(session[token_store.USER_KEY]['username'], 'johnny')
        self.assertGreater(session[token_store.VERIFIED_AT_KEY], time.time() - 60)

    def test_rejected_token_is_cleared(self):
        sign_in(self.client, verified_at=0)
        self.services.add('GET', VERIFY_URL, status=401, body={'detail': 'Invalid token'})
        with self.services.patch():
            response = self.client.get(reverse('cart'))

        self.assertEqual(response.status_code, 302)
        self.assertNotIn(token_store.TOKEN_KEY, self.client.session)

    def test_verify_without_user_signs_out(self):
        sign_in(self.client, verified_at=0)
        self.services.add('GET', VERIFY_URL, body={'valid': True})
        with self.services.patch():
            response = self.client.get(reverse('checkout'))

        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].startswith(reverse('login')))
        self.assertNotIn(token_store.TOKEN_KEY, self.client.session)

    def test_auth_service_down_keeps_session_user(self):
        sign_in(self.client, verified_at=0)
        self.services.add('GET', VERIFY_URL, status=503)
        with self.services.patch():
            response = self.client.get(reverse('cart'))

        self.assertEqual(response.status_code, 200)
        self.assertIn(token_store.TOKEN_KEY, self.client.session)
