"""
apps.accounts.services.auth_service
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Exchanging credentials for a bearer token.

Public API
----------
LoginResult  – Output dataclass
login        – Authenticate and issue a token
"""
from __future__ import annotations

from dataclasses import dataclass

import structlog
from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login

from .tokens import create_access_token

logger = structlog.get_logger(__name__)

LOGIN_OK = "Login successful"
LOGIN_FAILED = "Invalid username or password"


@dataclass
class LoginResult:
    """
    Outcome of a login attempt.

    Attributes:
        success: ``True`` iff the credentials were accepted.
        message: Human-readable outcome shown by the console.
        username: Echo of the submitted username.
        id: Primary key of the user (success only).
        token: Signed bearer token (success only).
        role: ADMIN or READ_ONLY (success only).
    """

    success: bool
    message: str
    username: str
    id: int | None = None
    token: str | None = None
    role: str | None = None

    def as_dict(self) -> dict:
        if not self.success:
            return {"success": False, "message": self.message, "username": self.username}
        return {
            "id": self.id,
            "token": self.token,
            "username": self.username,
            "role": self.role,
            "success": True,
            "message": self.message,
        }


def login(*, username: str, password: str, request=None) -> LoginResult:
    """
    Check *username* / *password* and issue an access token.

    Disabled accounts and accounts with an unusable password (created but
    never set up) are rejected with the same message as bad credentials.
    """
    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.info("login_failed", username=username)
        return LoginResult(success=False, message=LOGIN_FAILED, username=username)

    update_last_login(None, user)
    token = create_access_token(username=user.username, role=user.role)
    logger.info("login_succeeded", username=user.username, role=user.role)
    return LoginResult(
        success=True,
        message=LOGIN_OK,
        username=user.username,
        id=user.id,
        token=token,
        role=user.role,
    )
