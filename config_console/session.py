"""
config_console.session
~~~~~~~~~~~~~~~~~~~~~~
Login state of the console.

:class:`TokenStore` keeps the last successful login response on disk;
:class:`AuthSession` exchanges credentials for it and answers "who is signed
in and may they write?".
"""
from __future__ import annotations

import json
from pathlib import Path

import structlog

from . import settings
from .api import ApiError, ConfigServerClient
from .forms import PasswordResetForm
from .models import LoginResult

logger = structlog.get_logger(__name__)

ADMIN = "ADMIN"


class TokenStore:
    """JSON file holding the stored login response."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else settings.SESSION_FILE

    def load(self) -> LoginResult | None:
        try:
            # UnicodeDecodeError is a ValueError
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict) or not data.get("token"):
                raise ValueError("session file has no token")
        except FileNotFoundError:
            return None
        except ValueError as exc:
            logger.warning("session_file_discarded", path=str(self.path), error=str(exc))
            self.clear()
            return None
        return LoginResult.from_dict(data)

    def save(self, result: LoginResult) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(result.to_dict()), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class AuthSession:
    """
    Args:
        client: API client; the session installs itself as its token provider.
        store: Where the login response is persisted.
    """

    def __init__(self, client: ConfigServerClient, store: TokenStore | None = None) -> None:
        self.client = client
        self.store = store or TokenStore()
        self.client.token_provider = self.token

    # -- login state --------------------------------------------------------

    def login(self, username: str, password: str) -> LoginResult:
        """
        Exchange credentials for a token.

        The response is stored only when it carries a token; bad credentials
        come back as an unsuccessful :class:`LoginResult`, never as an error.

        Raises:
            ApiError: For failures other than rejected credentials.
        """
        try:
            result = self.client.auth.login(username, password)
        except ApiError as exc:
            if exc.status_code != 401:
                raise
            payload = exc.payload if isinstance(exc.payload, dict) else {}
            result = LoginResult.from_dict(
                {"success": False, "message": exc.message, "username": username, **payload}
            )

        if result.token:
            self.store.save(result)
            logger.info("logged_in", username=result.username, role=result.role)
        else:
            logger.info("login_rejected", username=username)
        return result

    def logout(self) -> None:
        self.store.clear()
        logger.info("logged_out")

    def current_user(self) -> LoginResult | None:
        return self.store.load()

    def token(self) -> str | None:
        user = self.current_user()
        return user.token if user else None

    @property
    def is_authenticated(self) -> bool:
        return self.token() is not None

    @property
    def is_admin(self) -> bool:
        user = self.current_user()
        return user is not None and user.role == ADMIN

    def auth_header(self) -> dict[str, str]:
        token = self.token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    # -- password setup / reset --------------------------------------------

    def request_password_reset(self, email: str) -> str:
        if not (email or "").strip():
            raise ValueError("Email is required")
        body = self.client.users.forgot_password(email.strip())
        return (body or {}).get("message", "")

    def validate_reset_token(self, token: str) -> bool:
        if not token:
            return False
        return self.client.users.validate_token(token)

    def reset_password(self, token: str, password: str, confirm_password: str) -> str:
        """
        Raises:
            ValueError: If the form is invalid; nothing is sent.
            ApiError: If the server rejects the token or password.
        """
        errors = PasswordResetForm(password, confirm_password).validate()
        if errors:
            raise ValueError(next(iter(errors.values())))
        body = self.client.users.reset_password(token, password, confirm_password)
        return (body or {}).get("message", "")
