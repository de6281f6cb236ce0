"""
Token authentication for the API.

Kept in its own module so ``REST_FRAMEWORK`` settings can reference it
without importing any view code.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token auth; clients send ``Authorization: Token <key>``.

    Login also issues a JWT pair, accepted through simplejwt's
    ``JWTAuthentication`` with the ``Bearer`` keyword.
    """

    keyword = 'Token'
