"""
apps.accounts.services package.
"""
from .auth_service import LoginResult, login  # noqa: F401
from .user_service import (  # noqa: F401
    create_user,
    delete_user,
    get_user,
    list_users,
    request_password_reset,
    reset_password,
    update_user,
    validate_password_reset_token,
)
