"""
apps.accounts.models
~~~~~~~~~~~~~~~~~~~~
User – console account with an ADMIN or READ_ONLY role.
PasswordResetToken – single-use token for password setup and reset.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Administrator"
    READ_ONLY = "READ_ONLY", "Read only"


class User(AbstractUser):
    """
    Account used to sign in to the config server.

    ``role`` gates write access to configuration and user administration.
    ``is_active`` doubles as the "enabled" flag exposed over the API.
    """

    email = models.EmailField("email address", unique=True)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.READ_ONLY,
    )

    REQUIRED_FIELDS = ["email"]

    class Meta(AbstractUser.Meta):
        ordering = ["id"]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class PasswordResetToken(models.Model):
    """
    A pending password setup/reset for one user.

    Only the SHA-256 digest of the token is stored; the raw value exists only
    in the email that was sent.  A user has at most one live token.
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )
    token_hash = models.CharField(max_length=64, unique=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Password Reset Token"
        verbose_name_plural = "Password Reset Tokens"

    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    def __str__(self) -> str:
        return f"reset token for {self.user.username} (expires {self.expires_at:%Y-%m-%d %H:%M})"
