"""
Test settings – in-memory SQLite, fast hashing, local-memory mail outbox.
"""
import os

# HS512 wants a key of at least 64 bytes
os.environ.setdefault(
    "SECRET_KEY", "test-secret-key-not-for-production-0123456789abcdef0123456789abcdef"
)

from .base import *  # noqa: E402, F401, F403

DEBUG = False

ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

APP_URL = "http://console.test"

LOGGING["root"]["level"] = "WARNING"  # noqa: F405
