"""
apps.accounts.services.tokens
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Bearer access tokens (signed JWTs) and password-reset token helpers.

Access token claims
-------------------
``sub``   username
``role``  ADMIN | READ_ONLY at the time of issue
``type``  always ``"access"``
``iat`` / ``exp``  issue and expiry timestamps (UTC)
"""
from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import structlog
from django.conf import settings
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

logger = structlog.get_logger(__name__)

_ACCESS = "access"


def create_access_token(*, username: str, role: str) -> str:
    """Return a signed access token for *username* valid for the configured lifetime."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "role": role,
        "type": _ACCESS,
        "iat": now,
        "exp": now + timedelta(seconds=settings.JWT_EXPIRATION_SECONDS),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify an access token.

    Returns:
        The claims dict, or ``None`` when the token is expired, forged,
        malformed or not an access token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except ExpiredSignatureError:
        logger.debug("access_token_expired")
        return None
    except InvalidTokenError as exc:
        logger.warning("access_token_invalid", error=str(exc))
        return None

    if payload.get("type") != _ACCESS:
        logger.warning("access_token_wrong_type", token_type=payload.get("type"))
        return None
    return payload


def generate_reset_token() -> tuple[str, str]:
    """Return ``(raw_token, token_hash)`` for a new password-reset token."""
    raw = secrets.token_urlsafe(32)
    return raw, hash_reset_token(raw)


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
