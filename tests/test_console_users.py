"""
tests.test_console_users
~~~~~~~~~~~~~~~~~~~~~~~~
UserAdministration against an in-memory client.
"""
from __future__ import annotations

import pytest

from config_console.api import ApiError
from config_console.forms import UserForm
from config_console.notifications import ERROR, Notifier
from config_console.users import UserAdministration

from .fakes import FakeClient, FakeSession


@pytest.fixture
def client() -> FakeClient:
    client = FakeClient()
    client.add_user("alice", "alice@example.com", "ADMIN")
    client.add_user("bob", "bob@corp.test", "READ_ONLY")
    client.add_user("carol", "carol@example.com", "READ_ONLY")
    return client


@pytest.fixture
def panel(client) -> UserAdministration:
    panel = UserAdministration(client, FakeSession(is_admin=True), Notifier())
    panel.refresh()
    return panel


def usernames(panel):
    return [u.username for u in panel.visible_users()]


class TestNonAdmin:
    def test_panel_is_inert(self, client):
        panel = UserAdministration(client, FakeSession(is_admin=False))
        panel.refresh()
        assert panel.users == []
        assert panel.create_user(UserForm("dave", "dave@example.com", "ADMIN")) is False
        assert panel.delete_user(100) is False
        assert client.users.calls == []


class TestListing:
    def test_search_is_case_insensitive_over_fields(self, panel):
        panel.set_search("CORP")
        assert usernames(panel) == ["bob"]
        panel.set_search("admin")
        assert usernames(panel) == ["alice"]
        panel.set_search("")
        assert usernames(panel) == ["alice", "bob", "carol"]

    def test_sort_toggles_direction(self, panel):
        panel.sort_by("username")
        assert usernames(panel) == ["alice", "bob", "carol"]
        panel.sort_by("username")
        assert usernames(panel) == ["carol", "bob", "alice"]
        panel.sort_by("role")
        assert panel.sort_ascending is True
        assert usernames(panel)[0] == "alice"

    def test_unknown_sort_field(self, panel):
        with pytest.raises(ValueError):
            panel.sort_by("password")

    def test_refresh_failure_includes_status(self, client):
        client.users.fail_next["list"] = ApiError(403, "Administrator role required.")
        panel = UserAdministration(client, FakeSession(is_admin=True))
        panel.refresh()
        note = panel.notifier.last()
        assert note.level == ERROR
        assert "403" in note.message


class TestChanges:
    def test_create_user(self, panel, client):
        assert panel.create_user(UserForm("dave", "dave@example.com", "READ_ONLY")) is True
        assert "dave" in usernames(panel)
        assert panel.notifier.last().message == "User created"

    def test_create_user_validation(self, panel, client):
        assert panel.create_user(UserForm("dave", "not-an-email", "READ_ONLY")) is False
        assert panel.form_errors == {"email": "Enter a valid email address"}
        assert not [c for c in client.users.calls if c[0] == "create"]

    def test_create_conflict_reports_status(self, panel, client):
        client.users.fail_next["create"] = ApiError(409, "Username bob is already taken")
        assert panel.create_user(UserForm("bob", "b2@example.com", "READ_ONLY")) is False
        assert "409" in panel.notifier.last().message

    def test_edit_user(self, panel, client):
        bob = next(u for u in panel.users if u.username == "bob")
        assert panel.edit_user(bob.id, UserForm("bobby", "bob@corp.test", "ADMIN")) is True
        assert client.store.users[bob.id].role == "ADMIN"
        assert "bobby" in usernames(panel)

    def test_delete_requires_confirmation(self, client):
        panel = UserAdministration(client, FakeSession(), confirm=lambda message: False)
        panel.refresh()
        bob = next(u for u in panel.users if u.username == "bob")
        assert panel.delete_user(bob.id) is False
        assert bob.id in client.store.users

    def test_delete_user(self, panel, client):
        bob = next(u for u in panel.users if u.username == "bob")
        assert panel.delete_user(bob.id) is True
        assert bob.id not in client.store.users
        assert "bob" not in usernames(panel)


class TestInlineEdit:
    def test_save_role(self, panel, client):
        bob = next(u for u in panel.users if u.username == "bob")
        panel.start_inline_edit(bob.id, "role")
        assert panel.inline_value == "READ_ONLY"
        panel.inline_value = "ADMIN"
        assert panel.save_inline_edit() is True
        assert client.store.users[bob.id].role == "ADMIN"
        assert client.store.users[bob.id].email == "bob@corp.test"
        assert panel.inline_edit is None

    def test_cancel_sends_nothing(self, panel, client):
        bob = next(u for u in panel.users if u.username == "bob")
        panel.start_inline_edit(bob.id, "username")
        panel.inline_value = "robert"
        panel.cancel_inline_edit()
        assert panel.save_inline_edit() is False
        assert not [c for c in client.users.calls if c[0] == "update"]

    def test_invalid_inline_value_keeps_edit_open(self, panel, client):
        bob = next(u for u in panel.users if u.username == "bob")
        panel.start_inline_edit(bob.id, "role")
        panel.inline_value = "ROOT"
        assert panel.save_inline_edit() is False
        assert panel.inline_edit == (bob.id, "role")
        assert panel.notifier.last().message == "Role must be ADMIN or READ_ONLY"

    def test_only_username_and_role_are_inline(self, panel):
        with pytest.raises(ValueError):
            panel.start_inline_edit(panel.users[0].id, "email")
