"""
apps.accounts.services.user_service
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
All business logic for user administration and password setup/reset.

Views must call only these functions.

Responsibilities
----------------
- CRUD for :class:`~apps.accounts.models.User` (admin only, enforced by views).
- Issuing single-use password tokens and mailing setup/reset links.
- Validating and consuming those tokens.
"""
from __future__ import annotations

from datetime import timedelta

import structlog
from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts import emails
from apps.accounts.models import PasswordResetToken, Role, User
from common.exceptions import ConflictError, NotFoundError, ValidationError

from .tokens import generate_reset_token, hash_reset_token

logger = structlog.get_logger(__name__)

USER_CREATED = "User created successfully. A welcome email has been sent."
USER_UPDATED = "User updated successfully"
RESET_REQUESTED = "If an account exists for this email, a password reset link has been sent."
PASSWORD_CHANGED = "Password has been reset successfully"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def list_users() -> list[User]:
    return list(User.objects.all())


def get_user(user_id: int | str) -> User:
    """Fetch a user by primary key, raise NotFoundError if missing."""
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError):
        raise NotFoundError(f"User not found with id: {user_id}")


def _ensure_unique(*, username: str, email: str, exclude_pk: int | None = None) -> None:
    users = User.objects.all()
    if exclude_pk is not None:
        users = users.exclude(pk=exclude_pk)
    if users.filter(username=username).exists():
        raise ConflictError(f"Username {username} is already taken")
    if users.filter(email__iexact=email).exists():
        raise ConflictError(f"Email {email} is already registered")


def create_user(*, username: str, email: str, role: str = Role.READ_ONLY) -> User:
    """
    Create an account without a usable password and mail a setup link.

    Raises:
        ConflictError: If the username or email is already in use.
    """
    _ensure_unique(username=username, email=email)

    with transaction.atomic():
        user = User(username=username, email=email, role=role)
        user.set_unusable_password()
        user.save()
        raw_token = _issue_token(user)

    emails.send_welcome_email(
        email=user.email,
        username=user.username,
        link=emails.build_link("set-password", raw_token),
        expiry_hours=settings.PASSWORD_RESET_EXPIRY_HOURS,
    )
    logger.info("user_created", user_id=user.id, username=user.username, role=user.role)
    return user


def update_user(user_id: int | str, *, username: str, email: str, role: str) -> User:
    """
    Change a user's username, email and role.

    Raises:
        NotFoundError: If the user does not exist.
        ConflictError: If the new username or email belongs to someone else.
    """
    user = get_user(user_id)
    _ensure_unique(username=username, email=email, exclude_pk=user.pk)

    user.username = username
    user.email = email
    user.role = role
    user.save(update_fields=["username", "email", "role"])
    logger.info("user_updated", user_id=user.id, username=user.username, role=user.role)
    return user


def delete_user(user_id: int | str, *, actor=None) -> None:
    """
    Delete a user and every outstanding password token.

    Raises:
        NotFoundError: If the user does not exist.
        ValidationError: If *actor* tries to delete their own account.
    """
    user = get_user(user_id)
    if actor is not None and getattr(actor, "pk", None) == user.pk:
        raise ValidationError("You cannot delete your own account.", code="self_delete")

    with transaction.atomic():
        user.password_reset_tokens.all().delete()
        user.delete()
    logger.info("user_deleted", user_id=user_id)


# ---------------------------------------------------------------------------
# Password tokens
# ---------------------------------------------------------------------------

def _issue_token(user: User) -> str:
    """Replace any live token of *user* and return the new raw token."""
    user.password_reset_tokens.all().delete()
    raw, digest = generate_reset_token()
    PasswordResetToken.objects.create(
        user=user,
        token_hash=digest,
        expires_at=timezone.now() + timedelta(hours=settings.PASSWORD_RESET_EXPIRY_HOURS),
    )
    return raw


def _find_token(raw_token: str) -> PasswordResetToken | None:
    if not raw_token:
        return None
    return (
        PasswordResetToken.objects.select_related("user")
        .filter(token_hash=hash_reset_token(raw_token))
        .first()
    )


def request_password_reset(*, email: str) -> str:
    """
    Mail a reset link when *email* belongs to an account.

    Always returns the same message so callers cannot probe for accounts.
    """
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        logger.info("password_reset_unknown_email")
        return RESET_REQUESTED

    raw_token = _issue_token(user)
    emails.send_password_reset_email(
        email=user.email,
        link=emails.build_link("reset-password", raw_token),
        expiry_hours=settings.PASSWORD_RESET_EXPIRY_HOURS,
    )
    logger.info("password_reset_requested", user_id=user.id)
    return RESET_REQUESTED


def validate_password_reset_token(raw_token: str) -> bool:
    """Return ``True`` iff *raw_token* exists and has not expired."""
    token = _find_token(raw_token)
    return token is not None and not token.is_expired()


def reset_password(*, token: str, password: str, confirm_password: str) -> User:
    """
    Set a new password using a setup/reset token and consume the token.

    Raises:
        ValidationError: If the passwords differ or fail the password
            validators, or the token is unknown or expired.
    """
    if password != confirm_password:
        raise ValidationError("Passwords do not match", code="password_mismatch")

    reset = _find_token(token)
    if reset is None:
        raise ValidationError("Invalid or expired token", code="invalid_token")
    if reset.is_expired():
        reset.delete()
        raise ValidationError("Token has expired", code="token_expired")

    user = reset.user
    try:
        validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise ValidationError(" ".join(exc.messages), code="invalid_password")

    with transaction.atomic():
        user.set_password(password)
        user.save(update_fields=["password"])
        reset.delete()
    logger.info("password_reset_completed", user_id=user.id)
    return user
