"""
apps.accounts.authentication
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
DRF authentication class for ``Authorization: Bearer <token>`` headers.
"""
from __future__ import annotations

import structlog
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from apps.accounts.models import User

from .services.tokens import decode_access_token

logger = structlog.get_logger(__name__)

_KEYWORD = b"bearer"


class BearerTokenAuthentication(BaseAuthentication):
    """
    Resolve the request user from a signed access token.

    A request without a bearer header is left anonymous so that other
    authenticators (session auth for the admin site) get their turn.
    """

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != _KEYWORD:
            return None
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed("Invalid bearer header.")

        try:
            token = auth[1].decode("ascii")
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid bearer header.")

        payload = decode_access_token(token)
        if payload is None:
            raise exceptions.AuthenticationFailed("Invalid or expired token.")

        user = User.objects.filter(username=payload["sub"]).first()
        if user is None or not user.is_active:
            logger.warning("bearer_user_unavailable", username=payload["sub"])
            raise exceptions.AuthenticationFailed("User not found or disabled.")
        return user, token

    def authenticate_header(self, request) -> str:
        return "Bearer"
