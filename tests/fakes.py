"""
In-memory stand-ins for the console's collaborators: a manual timer factory
and a config server client that keeps its state in dicts.
"""
from __future__ import annotations

import itertools
from dataclasses import replace

from config_console.api import ApiError
from config_console.models import ConfigurationGroup, ConfigurationItem, User


class FakeTimer:
    def __init__(self, delay, fn):
        self.delay = delay
        self.fn = fn
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.fn()


class ManualTimers:
    """Timer factory whose timers only fire when the test says so."""

    def __init__(self):
        self.created: list[FakeTimer] = []

    def __call__(self, delay, fn):
        timer = FakeTimer(delay, fn)
        self.created.append(timer)
        return timer

    def live(self) -> list[FakeTimer]:
        return [t for t in self.created if t.started and not t.cancelled]

    def fire_all(self):
        for timer in self.live():
            timer.fire()


class FakeSession:
    def __init__(self, is_admin=True):
        self.is_admin = is_admin


class _Failing:
    """Mixin: ``fail_next[method] = ApiError`` makes that call raise once."""

    def __init__(self):
        self.fail_next: dict[str, ApiError] = {}
        self.calls: list[tuple] = []

    def _enter(self, method, *args):
        self.calls.append((method, *args))
        if method in self.fail_next:
            raise self.fail_next.pop(method)


class FakeGroups(_Failing):
    def __init__(self, store):
        super().__init__()
        self.store = store

    def list(self):
        self._enter("list")
        return [replace(g) for g in self.store.groups.values()]

    def create(self, group):
        self._enter("create", group)
        created = replace(group, id=next(self.store.ids))
        self.store.groups[created.id] = created
        return replace(created)

    def update(self, group_id, group):
        self._enter("update", group_id, group)
        self.store.groups[group_id] = replace(group, id=group_id)
        return replace(self.store.groups[group_id])

    def delete(self, group_id):
        self._enter("delete", group_id)
        del self.store.groups[group_id]
        for item_id in [i.id for i in self.store.items.values() if i.group_id == group_id]:
            del self.store.items[item_id]


class FakeItems(_Failing):
    def __init__(self, store):
        super().__init__()
        self.store = store

    def by_group(self, group_id):
        self._enter("by_group", group_id)
        return [replace(i) for i in self.store.items.values() if i.group_id == group_id]

    def by_group_and_environment(self, group_id, environment):
        self._enter("by_group_and_environment", group_id, environment)
        return [
            replace(i)
            for i in self.store.items.values()
            if i.group_id == group_id and i.environment == environment
        ]

    def create(self, item):
        self._enter("create", item)
        created = replace(item, id=next(self.store.ids))
        self.store.items[created.id] = created
        return replace(created)

    def update(self, item_id, item):
        self._enter("update", item_id, item)
        self.store.items[item_id] = replace(item, id=item_id)
        return replace(self.store.items[item_id])

    def patch(self, item_id, **fields):
        self._enter("patch", item_id, fields)
        stored = self.store.items[item_id]
        if "value" in fields:
            stored.value = fields["value"]
        return replace(stored)

    def delete(self, item_id):
        self._enter("delete", item_id)
        del self.store.items[item_id]


class FakeEnvironments(_Failing):
    def list(self):
        self._enter("list")
        return ["DEV", "TEST", "STAGE", "PROD"]


class FakeUsers(_Failing):
    def __init__(self, store):
        super().__init__()
        self.store = store

    def list(self):
        self._enter("list")
        return [replace(u) for u in self.store.users.values()]

    def create(self, user):
        self._enter("create", user)
        created = replace(user, id=next(self.store.ids))
        self.store.users[created.id] = created
        return {"id": created.id, "username": created.username, "message": "User created"}

    def update(self, user_id, user):
        self._enter("update", user_id, user)
        self.store.users[user_id] = replace(user, id=user_id)
        return {"id": user_id, "message": "User updated successfully"}

    def delete(self, user_id):
        self._enter("delete", user_id)
        del self.store.users[user_id]


class FakeStore:
    """Server-side state shared by the fake resource clients."""

    def __init__(self):
        self.ids = itertools.count(100)
        self.groups: dict[int, ConfigurationGroup] = {}
        self.items: dict[int, ConfigurationItem] = {}
        self.users: dict[int, User] = {}


class FakeClient:
    """Duck-typed :class:`~config_console.api.ConfigServerClient`."""

    def __init__(self):
        self.store = FakeStore()
        self.groups = FakeGroups(self.store)
        self.items = FakeItems(self.store)
        self.users = FakeUsers(self.store)
        self.environments = FakeEnvironments()

    def add_group(self, name, description=""):
        group = ConfigurationGroup(id=next(self.store.ids), name=name, description=description)
        self.store.groups[group.id] = group
        return group

    def add_item(self, group, key, value, environment="DEV"):
        item = ConfigurationItem(
            id=next(self.store.ids),
            key=key,
            value=value,
            environment=environment,
            group_id=group.id,
            group_name=group.name,
        )
        self.store.items[item.id] = item
        return item

    def add_user(self, username, email, role="READ_ONLY"):
        user = User(id=next(self.store.ids), username=username, email=email, role=role)
        self.store.users[user.id] = user
        return user
