"""
apps.accounts.emails
~~~~~~~~~~~~~~~~~~~~
Outgoing account emails: welcome (password setup) and password reset.

Delivery failures are logged and swallowed so that account operations never
fail because the mail relay is down; the admin can trigger a new reset.
"""
from __future__ import annotations

import smtplib

import structlog
from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import escape

logger = structlog.get_logger(__name__)

_SIGNATURE = "Regards,\nConfig Server Team"


def build_link(path: str, token: str) -> str:
    """Return ``<APP_URL>/<path>?token=<token>``."""
    return f"{settings.APP_URL.rstrip('/')}/{path.lstrip('/')}?token={token}"


def _deliver(*, kind: str, to: str, subject: str, text: str, html: str) -> bool:
    try:
        send_mail(
            subject,
            text,
            settings.DEFAULT_FROM_EMAIL,
            [to],
            html_message=html,
        )
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("email_delivery_failed", kind=kind, to=to, error=str(exc))
        return False
    logger.info("email_sent", kind=kind, to=to)
    return True


def send_welcome_email(*, email: str, username: str, link: str, expiry_hours: int) -> bool:
    text = (
        f"Hello {username},\n\n"
        "Welcome to Config Server!\n"
        "Your account has been created. Set your password here:\n"
        f"{link}\n\n"
        f"This link will expire in {expiry_hours} hours.\n"
        "If you have any questions, please contact your administrator.\n\n"
        f"{_SIGNATURE}"
    )
    html = (
        f"<p>Hello {escape(username)},</p>"
        "<p>Welcome to Config Server!</p>"
        "<p>Your account has been created. To set up your password, "
        "please click the link below:</p>"
        f'<p><a href="{escape(link)}">Set Password</a></p>'
        f"<p>This link will expire in {expiry_hours} hours.</p>"
        "<p>If you have any questions, please contact your administrator.</p>"
        "<p>Regards,<br>Config Server Team</p>"
    )
    return _deliver(
        kind="welcome", to=email, subject="Welcome to Config Server", text=text, html=html
    )


def send_password_reset_email(*, email: str, link: str, expiry_hours: int) -> bool:
    text = (
        "Hello,\n\n"
        "You have requested to reset your password. Change it here:\n"
        f"{link}\n\n"
        f"This link will expire in {expiry_hours} hours.\n"
        "If you did not request a password reset, please ignore this email.\n\n"
        f"{_SIGNATURE}"
    )
    html = (
        "<p>Hello,</p>"
        "<p>You have requested to reset your password.</p>"
        "<p>Click the link below to change your password:</p>"
        f'<p><a href="{escape(link)}">Reset Password</a></p>'
        f"<p>This link will expire in {expiry_hours} hours.</p>"
        "<p>If you did not request a password reset, please ignore this email "
        "or contact support.</p>"
        "<p>Regards,<br>Config Server Team</p>"
    )
    return _deliver(
        kind="password_reset", to=email, subject="Password Reset Request", text=text, html=html
    )
