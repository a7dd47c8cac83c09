"""
config_console.browser
~~~~~~~~~~~~~~~~~~~~~~
State and interaction rules of the configuration page.

The browser shows the groups, the environments and the items of the selected
``(group, environment)`` slice.  Writes are limited to ADMIN sessions; every
failed call is logged and turned into an error notification instead of
propagating.

Inline value edits
------------------
:meth:`ConfigurationBrowser.edit_item_value` changes the displayed value at
once and hands the value to a :class:`~config_console.debounce.KeyedDebouncer`
keyed by item id.  When the item has been quiet for ``edit_delay`` seconds the
latest value is sent with ``PATCH /items/{id}/``.  If that call fails the
item goes back to the last value the server confirmed.
"""
from __future__ import annotations

import threading
from typing import Callable

import structlog

from . import settings
from .api import ApiError, ConfigServerClient
from .debounce import KeyedDebouncer, TimerFactory
from .forms import FormErrors, GroupForm, ItemForm
from .models import ConfigurationGroup, ConfigurationItem
from .notifications import Notifier

logger = structlog.get_logger(__name__)

Confirm = Callable[[str], bool]

NOT_ADMIN = "You do not have permission to modify configuration."


class ConfigurationBrowser:
    """
    Args:
        client: API client.
        session: Anything exposing ``is_admin`` (normally an
            :class:`~config_console.session.AuthSession`).
        notifier: Receives success and error notifications.
        confirm: Asked before every delete; returning ``False`` cancels it.
        edit_delay: Debounce window for inline edits, in seconds.
        timer_factory: Passed to the debouncer.
    """

    def __init__(
        self,
        client: ConfigServerClient,
        session,
        notifier: Notifier | None = None,
        confirm: Confirm | None = None,
        edit_delay: float | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self.client = client
        self.session = session
        self.notifier = notifier or Notifier()
        self.confirm = confirm or (lambda message: True)

        self.groups: list[ConfigurationGroup] = []
        self.environments: list[str] = []
        self.selected_group_id: int | None = None
        self.selected_environment: str | None = None
        self.items: list[ConfigurationItem] = []
        self.loading = False
        self.error: str | None = None
        self.form_errors: FormErrors = {}

        # item id -> value last confirmed by the server
        self._confirmed: dict[int, str] = {}
        self._lock = threading.RLock()
        self._edits = KeyedDebouncer(
            settings.EDIT_DELAY if edit_delay is None else edit_delay,
            self._flush_item_value,
            timer_factory=timer_factory,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def selected_group(self) -> ConfigurationGroup | None:
        return next((g for g in self.groups if g.id == self.selected_group_id), None)

    def get_item(self, item_id: int) -> ConfigurationItem | None:
        return next((i for i in self.items if i.id == item_id), None)

    def _fail(self, action: str, exc: ApiError) -> None:
        message = f"Failed to {action}: {exc.message}"
        self.error = message
        logger.error("browser_call_failed", action=action, status_code=exc.status_code)
        self.notifier.error(message)

    def _require_admin(self) -> bool:
        if self.session.is_admin:
            return True
        self.notifier.error(NOT_ADMIN)
        return False

    def _in_slice(self, item: ConfigurationItem) -> bool:
        if item.group_id != self.selected_group_id:
            return False
        return self.selected_environment is None or item.environment == self.selected_environment

    def _set_items(self, items: list[ConfigurationItem]) -> None:
        with self._lock:
            self.items = items
            for item in items:
                self._confirmed[item.id] = item.value

    # ------------------------------------------------------------------
    # Loading and selection
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Fetch groups and environments, select the first of each, fetch items."""
        self.loading = True
        self.error = None
        try:
            self.groups = self.client.groups.list()
            self.environments = self.client.environments.list()
        except ApiError as exc:
            self._fail("load configuration", exc)
            return
        finally:
            self.loading = False

        self.selected_group_id = self.groups[0].id if self.groups else None
        self.selected_environment = self.environments[0] if self.environments else None
        self.refresh_items()

    def refresh_items(self) -> None:
        """Re-fetch the items of the current selection."""
        self._edits.flush_all()
        if self.selected_group_id is None:
            self._set_items([])
            return

        self.loading = True
        try:
            if self.selected_environment is None:
                items = self.client.items.by_group(self.selected_group_id)
            else:
                items = self.client.items.by_group_and_environment(
                    self.selected_group_id, self.selected_environment
                )
        except ApiError as exc:
            self._set_items([])
            self._fail("load configuration items", exc)
            return
        finally:
            self.loading = False
        self.error = None
        self._set_items(items)

    def select_group(self, group_id: int | None) -> None:
        self.selected_group_id = group_id
        self.refresh_items()

    def select_environment(self, environment: str | None) -> None:
        """Narrow the items to *environment*; ``None`` shows all environments."""
        self.selected_environment = environment.upper() if environment else None
        self.refresh_items()

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def create_group(self, form: GroupForm) -> ConfigurationGroup | None:
        if not self._require_admin():
            return None
        self.form_errors = form.validate()
        if self.form_errors:
            return None
        try:
            group = self.client.groups.create(form.to_group())
        except ApiError as exc:
            self._fail("create group", exc)
            return None

        self.groups.append(group)
        self.notifier.success(f"Group '{group.name}' created")
        if self.selected_group_id is None:
            self.select_group(group.id)
        return group

    def update_group(self, group_id: int, form: GroupForm) -> ConfigurationGroup | None:
        if not self._require_admin():
            return None
        self.form_errors = form.validate()
        if self.form_errors:
            return None
        try:
            group = self.client.groups.update(group_id, form.to_group(group_id))
        except ApiError as exc:
            self._fail("update group", exc)
            return None

        self.groups = [group if g.id == group_id else g for g in self.groups]
        self.notifier.success(f"Group '{group.name}' updated")
        return group

    def delete_group(self, group_id: int) -> bool:
        if not self._require_admin():
            return False
        group = next((g for g in self.groups if g.id == group_id), None)
        label = group.name if group else str(group_id)
        if not self.confirm(f"Delete group '{label}' and all of its items?"):
            return False
        try:
            self.client.groups.delete(group_id)
        except ApiError as exc:
            self._fail("delete group", exc)
            return False

        self.groups = [g for g in self.groups if g.id != group_id]
        self.notifier.success(f"Group '{label}' deleted")
        if self.selected_group_id == group_id:
            for item in self.items:
                self._edits.cancel(item.id)
            self.select_group(self.groups[0].id if self.groups else None)
        return True

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def create_item(self, form: ItemForm) -> ConfigurationItem | None:
        if not self._require_admin():
            return None
        if form.group_id is None:
            form.group_id = self.selected_group_id
        if not form.environment and self.selected_environment:
            form.environment = self.selected_environment
        self.form_errors = form.validate()
        if self.form_errors:
            return None
        try:
            item = self.client.items.create(form.to_item())
        except ApiError as exc:
            self._fail("create configuration item", exc)
            return None

        with self._lock:
            self._confirmed[item.id] = item.value
            if self._in_slice(item):
                self.items.append(item)
        self.notifier.success(f"Configuration item '{item.key}' created")
        return item

    def update_item(self, item_id: int, form: ItemForm) -> ConfigurationItem | None:
        if not self._require_admin():
            return None
        self.form_errors = form.validate()
        if self.form_errors:
            return None
        self._edits.cancel(item_id)
        try:
            item = self.client.items.update(item_id, form.to_item(item_id))
        except ApiError as exc:
            self._fail("update configuration item", exc)
            return None

        with self._lock:
            self._confirmed[item.id] = item.value
            self.items = [i for i in self.items if i.id != item_id]
            if self._in_slice(item):
                self.items.append(item)
        self.notifier.success(f"Configuration item '{item.key}' updated")
        return item

    def delete_item(self, item_id: int) -> bool:
        if not self._require_admin():
            return False
        item = self.get_item(item_id)
        label = item.key if item else str(item_id)
        if not self.confirm(f"Delete configuration item '{label}'?"):
            return False
        self._edits.cancel(item_id)
        try:
            self.client.items.delete(item_id)
        except ApiError as exc:
            self._fail("delete configuration item", exc)
            return False

        with self._lock:
            self.items = [i for i in self.items if i.id != item_id]
            self._confirmed.pop(item_id, None)
        self.notifier.success(f"Configuration item '{label}' deleted")
        return True

    # ------------------------------------------------------------------
    # Inline value editing
    # ------------------------------------------------------------------

    def edit_item_value(self, item_id: int, value: str) -> bool:
        """Show *value* now and schedule it to be saved once typing stops."""
        if not self._require_admin():
            return False
        with self._lock:
            item = self.get_item(item_id)
            if item is None:
                return False
            item.value = value
        self._edits.push(item_id, value)
        return True

    def pending_edits(self) -> list[int]:
        return list(self._edits.pending())

    def flush_edits(self) -> None:
        """Save every buffered edit immediately."""
        self._edits.flush_all()

    def _flush_item_value(self, item_id: int, value: str) -> None:
        try:
            saved = self.client.items.patch(item_id, value=value)
        except ApiError as exc:
            with self._lock:
                item = self.get_item(item_id)
                superseded = item_id in self._edits.pending()
                if item is not None and item_id in self._confirmed and not superseded:
                    item.value = self._confirmed[item_id]
            key = item.key if item is not None else item_id
            logger.error(
                "item_update_failed",
                item_id=item_id,
                status_code=exc.status_code,
                error=exc.message,
            )
            self.error = exc.message
            self.notifier.error(f"Failed to update '{key}': {exc.message}")
            return

        with self._lock:
            self._confirmed[item_id] = saved.value
            current = self.get_item(item_id)
            if current is not None and item_id in self._edits.pending():
                # newer keystrokes are still buffered
                saved.value = current.value
            self.items = [saved if i.id == item_id else i for i in self.items]
        logger.info("item_value_saved", item_id=item_id)
