"""
config_console.users
~~~~~~~~~~~~~~~~~~~~
State and interaction rules of the user administration page.

Only ADMIN sessions may use it: for anyone else every operation is a no-op
that neither fetches nor calls the server.
"""
from __future__ import annotations

from typing import Callable

import structlog

from .api import ApiError, ConfigServerClient
from .forms import ROLES, FormErrors, UserForm
from .models import User
from .notifications import Notifier

logger = structlog.get_logger(__name__)

Confirm = Callable[[str], bool]

SORTABLE = ("id", "username", "email", "role", "enabled", "last_login")
INLINE_FIELDS = ("username", "role")


class UserAdministration:
    def __init__(
        self,
        client: ConfigServerClient,
        session,
        notifier: Notifier | None = None,
        confirm: Confirm | None = None,
    ) -> None:
        self.client = client
        self.session = session
        self.notifier = notifier or Notifier()
        self.confirm = confirm or (lambda message: True)

        self.users: list[User] = []
        self.search = ""
        self.sort_field = "id"
        self.sort_ascending = True
        self.loading = False
        self.form_errors: FormErrors = {}
        # (user id, field) being edited inline, and its draft value
        self.inline_edit: tuple[int, str] | None = None
        self.inline_value = ""

    @property
    def enabled(self) -> bool:
        return bool(self.session.is_admin)

    def _fail(self, action: str, exc: ApiError) -> None:
        status = exc.status_code if exc.status_code is not None else "network error"
        logger.error("user_admin_call_failed", action=action, status_code=exc.status_code)
        self.notifier.error(f"Failed to {action} ({status}): {exc.message}")

    def get_user(self, user_id: int) -> User | None:
        return next((u for u in self.users if u.id == user_id), None)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        if not self.enabled:
            return
        self.loading = True
        try:
            self.users = self.client.users.list()
        except ApiError as exc:
            self._fail("load users", exc)
        finally:
            self.loading = False

    def set_search(self, text: str) -> None:
        self.search = text or ""

    def sort_by(self, field: str) -> None:
        """Sort by *field*; choosing the current field again flips the direction."""
        if field not in SORTABLE:
            raise ValueError(f"Cannot sort users by {field!r}")
        if field == self.sort_field:
            self.sort_ascending = not self.sort_ascending
        else:
            self.sort_field = field
            self.sort_ascending = True

    def visible_users(self) -> list[User]:
        """Users matching the search, in the chosen order."""
        needle = self.search.strip().lower()
        users = [
            u
            for u in self.users
            if not needle
            or needle in u.username.lower()
            or needle in u.email.lower()
            or needle in u.role.lower()
        ]

        def sort_key(user: User):
            value = getattr(user, self.sort_field)
            # None sorts first
            return (value is not None, value.lower() if isinstance(value, str) else value)

        return sorted(users, key=sort_key, reverse=not self.sort_ascending)

    # ------------------------------------------------------------------
    # Create / edit / delete
    # ------------------------------------------------------------------

    def create_user(self, form: UserForm) -> bool:
        if not self.enabled:
            return False
        self.form_errors = form.validate()
        if self.form_errors:
            return False
        try:
            body = self.client.users.create(form.to_user())
        except ApiError as exc:
            self._fail("create user", exc)
            return False
        self.notifier.success((body or {}).get("message") or f"User {form.username} created")
        self.refresh()
        return True

    def edit_user(self, user_id: int, form: UserForm) -> bool:
        if not self.enabled:
            return False
        self.form_errors = form.validate()
        if self.form_errors:
            return False
        try:
            body = self.client.users.update(user_id, form.to_user(user_id))
        except ApiError as exc:
            self._fail("update user", exc)
            return False
        self.notifier.success((body or {}).get("message") or f"User {form.username} updated")
        self.refresh()
        return True

    def delete_user(self, user_id: int) -> bool:
        if not self.enabled:
            return False
        user = self.get_user(user_id)
        label = user.username if user else str(user_id)
        if not self.confirm(f"Delete user '{label}'?"):
            return False
        try:
            self.client.users.delete(user_id)
        except ApiError as exc:
            self._fail("delete user", exc)
            return False
        self.users = [u for u in self.users if u.id != user_id]
        self.notifier.success(f"User {label} deleted")
        return True

    # ------------------------------------------------------------------
    # Inline single-field edits
    # ------------------------------------------------------------------

    def start_inline_edit(self, user_id: int, field: str) -> bool:
        if not self.enabled:
            return False
        if field not in INLINE_FIELDS:
            raise ValueError(f"Field {field!r} cannot be edited inline")
        user = self.get_user(user_id)
        if user is None:
            return False
        self.inline_edit = (user_id, field)
        self.inline_value = getattr(user, field)
        return True

    def cancel_inline_edit(self) -> None:
        self.inline_edit = None
        self.inline_value = ""

    def save_inline_edit(self) -> bool:
        """Send the draft value; the edit stays open when validation or the call fails."""
        if not self.enabled or self.inline_edit is None:
            return False
        user_id, field = self.inline_edit
        user = self.get_user(user_id)
        if user is None:
            self.cancel_inline_edit()
            return False

        value = self.inline_value.strip()
        if field == "username" and not value:
            self.notifier.error("Username is required")
            return False
        if field == "role" and value not in ROLES:
            self.notifier.error("Role must be ADMIN or READ_ONLY")
            return False

        changed = User(
            id=user.id,
            username=value if field == "username" else user.username,
            email=user.email,
            role=value if field == "role" else user.role,
        )
        try:
            self.client.users.update(user_id, changed)
        except ApiError as exc:
            self._fail("update user", exc)
            return False

        setattr(user, field, value)
        self.cancel_inline_edit()
        self.notifier.success(f"User {user.username} updated")
        return True
