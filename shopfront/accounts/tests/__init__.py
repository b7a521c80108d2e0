"""
Tests for accounts: login/logout views, token session storage, RemoteAuthMiddleware.
"""
