"""
tests.test_console_components
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
KeyedDebouncer, forms, notifications and the isolated input widget.
No server and no Django database involved.
"""
from __future__ import annotations

import threading

import pytest

from config_console.debounce import KeyedDebouncer
from config_console.forms import GroupForm, ItemForm, PasswordResetForm, UserForm
from config_console.notifications import ERROR, Notifier
from config_console.widgets import INPUT_CHANGE, IsolatedInput, MessageChannel

from .fakes import ManualTimers


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


# ===========================================================================
# KeyedDebouncer
# ===========================================================================

class TestKeyedDebouncer:
    def _debouncer(self, timers, delay=0.5):
        calls = []
        return KeyedDebouncer(delay, lambda k, v: calls.append((k, v)), timers), calls

    def test_burst_delivers_last_value_once(self, timers):
        debouncer, calls = self._debouncer(timers)
        for text in ("a", "ab", "abc"):
            debouncer.push(1, text)
        assert calls == []
        assert len(timers.live()) == 1
        timers.fire_all()
        assert calls == [(1, "abc")]
        assert debouncer.pending() == []

    def test_timer_uses_configured_delay(self, timers):
        debouncer, _ = self._debouncer(timers, delay=0.25)
        debouncer.push("k", "v")
        assert timers.created[0].delay == 0.25

    def test_keys_are_independent(self, timers):
        debouncer, calls = self._debouncer(timers)
        debouncer.push(1, "x")
        debouncer.push(2, "y")
        timers.created[1].fire()
        assert calls == [(2, "y")]
        assert debouncer.pending() == [1]

    def test_superseded_timer_does_nothing(self, timers):
        debouncer, calls = self._debouncer(timers)
        debouncer.push(1, "old")
        first = timers.created[0]
        debouncer.push(1, "new")
        # a timer that was cancelled too late must not deliver
        first.fn()
        assert calls == []
        timers.fire_all()
        assert calls == [(1, "new")]

    def test_flush_and_cancel(self, timers):
        debouncer, calls = self._debouncer(timers)
        debouncer.push(1, "a")
        debouncer.push(2, "b")
        assert debouncer.flush(1) is True
        assert debouncer.flush(1) is False
        debouncer.cancel(2)
        timers.fire_all()
        assert calls == [(1, "a")]

    def test_flush_all(self, timers):
        debouncer, calls = self._debouncer(timers)
        debouncer.push(1, "a")
        debouncer.push(2, "b")
        debouncer.flush_all()
        assert sorted(calls) == [(1, "a"), (2, "b")]

    def test_real_timer_fires(self):
        fired = threading.Event()
        seen = []

        def record(key, value):
            seen.append((key, value))
            fired.set()

        debouncer = KeyedDebouncer(0.01, record)
        debouncer.push("k", "v")
        assert fired.wait(2)
        assert seen == [("k", "v")]


# ===========================================================================
# Forms
# ===========================================================================

class TestForms:
    def test_group_name_required(self):
        assert GroupForm(name="  ").validate() == {"name": "Name is required"}
        assert GroupForm(name="api").validate() == {}

    def test_item_required_fields(self):
        errors = ItemForm(group_id=1).validate()
        assert errors == {
            "key": "Key is required",
            "value": "Value is required",
            "environment": "Environment is required",
        }

    def test_item_environment_is_uppercased(self):
        item = ItemForm(key=" k ", value="v", environment="prod", group_id=1).to_item()
        assert (item.key, item.environment) == ("k", "PROD")

    def test_user_form(self):
        assert UserForm().validate() == {
            "username": "Username is required",
            "email": "Email is required",
        }
        assert UserForm("u", "nope", "ADMIN").validate() == {"email": "Enter a valid email address"}
        assert UserForm("u", "u@example.com", "ROOT").validate() == {
            "role": "Role must be ADMIN or READ_ONLY"
        }

    def test_password_reset_form(self):
        assert PasswordResetForm("short", "short").validate() == {
            "password": "Password must be at least 8 characters long"
        }
        assert PasswordResetForm("longenough", "different").validate() == {
            "confirm_password": "Passwords do not match"
        }
        assert PasswordResetForm("longenough", "longenough").validate() == {}


# ===========================================================================
# Notifier
# ===========================================================================

class TestNotifier:
    def test_drain_empties_queue(self):
        notifier = Notifier()
        notifier.error("boom")
        notifier.success("ok")
        assert notifier.last().message == "ok"
        drained = notifier.drain()
        assert [n.level for n in drained] == [ERROR, "success"]
        assert notifier.items == []


# ===========================================================================
# IsolatedInput
# ===========================================================================

class TestIsolatedInput:
    @pytest.fixture
    def channel(self):
        return MessageChannel()

    @pytest.fixture
    def received(self, channel):
        messages = []
        channel.subscribe(messages.append)
        return messages

    def test_typing_is_debounced(self, channel, received, timers):
        widget = IsolatedInput(5, channel, "", timer_factory=timers)
        widget.focus()
        for text in ("h", "he", "hey"):
            widget.type(text)
        assert received == []
        timers.fire_all()
        assert received == [{"type": INPUT_CHANGE, "id": 5, "value": "hey"}]

    def test_external_value_ignored_while_focused(self, channel, timers):
        widget = IsolatedInput(5, channel, "draft", timer_factory=timers)
        widget.focus()
        assert widget.set_value("from server") is False
        assert widget.value == "draft"
        widget.blur()
        assert widget.set_value("from server") is True
        assert widget.value == "from server"

    def test_blur_relays_immediately(self, channel, received, timers):
        widget = IsolatedInput(5, channel, "", timer_factory=timers)
        widget.focus()
        widget.type("final")
        widget.blur()
        assert received == [{"type": INPUT_CHANGE, "id": 5, "value": "final"}]
        # the pending debounced post was dropped
        timers.fire_all()
        assert len(received) == 1

    def test_unsubscribe(self, channel, timers):
        messages = []
        unsubscribe = channel.subscribe(messages.append)
        unsubscribe()
        IsolatedInput(1, channel, "x", timer_factory=timers).blur()
        assert messages == []
