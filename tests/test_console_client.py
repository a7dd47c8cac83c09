"""
tests.test_console_client
~~~~~~~~~~~~~~~~~~~~~~~~~
ConfigServerClient over ``httpx.MockTransport`` and the on-disk session.
"""
from __future__ import annotations

import json

import httpx
import pytest

from config_console.api import ApiError, ConfigServerClient
from config_console.models import ConfigurationGroup, ConfigurationItem, User
from config_console.session import AuthSession, TokenStore

BASE = "http://config.test/api/v1"

LOGIN_OK = {
    "id": 1,
    "token": "tok-123",
    "username": "alice",
    "role": "ADMIN",
    "success": True,
    "message": "Login successful",
}


class Recorder:
    """MockTransport handler that answers from a route table and logs requests."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"code": "not_found", "detail": "no route"})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


def make_client(routes, token=None):
    recorder = Recorder(routes)
    client = ConfigServerClient(
        BASE,
        token_provider=(lambda: token),
        transport=httpx.MockTransport(recorder),
    )
    return client, recorder


# ===========================================================================
# ConfigServerClient
# ===========================================================================

class TestConfigServerClient:
    def test_paths_keep_api_prefix(self):
        client, rec = make_client({("GET", "/api/v1/groups/"): (200, [{"id": 1, "name": "a"}])})
        groups = client.groups.list()
        assert groups[0].name == "a"
        assert str(rec.requests[0].url) == f"{BASE}/groups/"

    def test_path_segments_are_quoted(self):
        client, rec = make_client(
            {
                ("GET", "/api/v1/groups/name/team/api/"): (200, {"id": 4, "name": "team/api"}),
                ("GET", "/api/v1/items/group/4/environment/DEV/"): (200, []),
            }
        )
        assert client.groups.get_by_name("team/api").id == 4
        assert rec.requests[0].url.raw_path == b"/api/v1/groups/name/team%2Fapi/"
        assert client.items.by_group_and_environment(4, "DEV") == []

    def test_bearer_header_attached(self):
        client, rec = make_client({("GET", "/api/v1/environments/"): (200, ["DEV"])}, token="abc")
        client.environments.list()
        assert rec.requests[0].headers["Authorization"] == "Bearer abc"

    def test_no_header_without_token(self):
        client, rec = make_client({("GET", "/api/v1/environments/"): (200, ["DEV"])})
        client.environments.list()
        assert "Authorization" not in rec.requests[0].headers

    def test_item_wire_format(self):
        client, rec = make_client(
            {
                ("POST", "/api/v1/items/"): (
                    201,
                    {
                        "id": 7,
                        "key": "k",
                        "value": "v",
                        "description": "",
                        "environment": "DEV",
                        "groupId": 3,
                        "groupName": "g",
                    },
                )
            }
        )
        item = client.items.create(
            ConfigurationItem(id=None, key="k", value="v", environment="DEV", group_id=3)
        )
        assert json.loads(rec.requests[0].content) == {
            "key": "k",
            "value": "v",
            "description": "",
            "environment": "DEV",
            "groupId": 3,
        }
        assert (item.id, item.group_id, item.group_name) == (7, 3, "g")

    def test_patch_sends_only_given_fields(self):
        client, rec = make_client(
            {("PATCH", "/api/v1/items/7/"): (200, {"id": 7, "key": "k", "value": "new", "groupId": 3})}
        )
        assert client.items.patch(7, value="new").value == "new"
        assert json.loads(rec.requests[0].content) == {"value": "new"}

    def test_error_body_becomes_api_error(self):
        client, _ = make_client(
            {("POST", "/api/v1/groups/"): (409, {"code": "conflict", "detail": "Group with name a already exists"})}
        )
        with pytest.raises(ApiError) as excinfo:
            client.groups.create(ConfigurationGroup(id=None, name="a"))
        assert excinfo.value.status_code == 409
        assert excinfo.value.message == "Group with name a already exists"
        assert excinfo.value.payload["code"] == "conflict"

    def test_field_errors_are_summarised(self):
        client, _ = make_client({("POST", "/api/v1/users/"): (400, {"email": ["Enter a valid email address."]})})
        with pytest.raises(ApiError) as excinfo:
            client.users.create(User(id=None, username="x", email="bad", role="ADMIN"))
        assert excinfo.value.message == "email: Enter a valid email address."

    def test_delete_returns_none_on_204(self):
        client, _ = make_client({("DELETE", "/api/v1/items/7/"): (204, None)})
        assert client.items.delete(7) is None

    def test_transport_failure_has_no_status(self):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ConfigServerClient(BASE, transport=httpx.MockTransport(boom))
        with pytest.raises(ApiError) as excinfo:
            client.groups.list()
        assert excinfo.value.status_code is None

    def test_reset_password_sends_token_as_query(self):
        client, rec = make_client({("POST", "/api/v1/users/reset-password/"): (200, {"message": "ok"})})
        client.users.reset_password("t0k", "password1", "password1")
        assert rec.requests[0].url.params["token"] == "t0k"
        assert json.loads(rec.requests[0].content)["confirmPassword"] == "password1"


# ===========================================================================
# TokenStore / AuthSession
# ===========================================================================

@pytest.fixture
def store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "nested" / "session.json")


class TestAuthSession:
    def _session(self, store, routes):
        recorder = Recorder(routes)
        client = ConfigServerClient(BASE, transport=httpx.MockTransport(recorder))
        return AuthSession(client, store), recorder

    def test_login_stores_token_and_uses_it(self, store):
        session, rec = self._session(
            store,
            {
                ("POST", "/api/v1/auth/login/"): (200, LOGIN_OK),
                ("GET", "/api/v1/groups/"): (200, []),
            },
        )
        result = session.login("alice", "pw")
        assert result.success and result.token == "tok-123"
        assert session.is_authenticated
        assert session.is_admin
        assert session.auth_header() == {"Authorization": "Bearer tok-123"}

        session.client.groups.list()
        assert rec.requests[-1].headers["Authorization"] == "Bearer tok-123"

    def test_session_survives_restart(self, store):
        session, _ = self._session(store, {("POST", "/api/v1/auth/login/"): (200, LOGIN_OK)})
        session.login("alice", "pw")
        again, _ = self._session(store, {})
        assert again.current_user().username == "alice"

    def test_rejected_login_is_not_stored(self, store):
        session, _ = self._session(
            store,
            {
                ("POST", "/api/v1/auth/login/"): (
                    401,
                    {"success": False, "message": "Invalid username or password", "username": "alice"},
                )
            },
        )
        result = session.login("alice", "bad")
        assert result.success is False
        assert result.message == "Invalid username or password"
        assert not session.is_authenticated
        assert not store.path.exists()

    def test_response_without_token_is_not_stored(self, store):
        session, _ = self._session(
            store,
            {("POST", "/api/v1/auth/login/"): (200, {"success": True, "message": "ok", "username": "a"})},
        )
        session.login("a", "pw")
        assert not session.is_authenticated

    def test_server_error_propagates(self, store):
        session, _ = self._session(store, {("POST", "/api/v1/auth/login/"): (500, {"detail": "boom"})})
        with pytest.raises(ApiError):
            session.login("alice", "pw")

    def test_logout_clears_store(self, store):
        session, _ = self._session(store, {("POST", "/api/v1/auth/login/"): (200, LOGIN_OK)})
        session.login("alice", "pw")
        session.logout()
        assert session.current_user() is None
        assert not session.is_admin

    def test_corrupt_session_file_is_discarded(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")
        session, _ = self._session(store, {})
        assert session.token() is None
        assert not store.path.exists()

    def test_undecodable_session_file_is_discarded(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b"\xff\xfe{garbage")
        session, _ = self._session(store, {})
        assert session.token() is None
        assert not session.is_admin
        assert not store.path.exists()

    def test_reset_password_validates_locally(self, store):
        session, rec = self._session(store, {})
        with pytest.raises(ValueError, match="Passwords do not match"):
            session.reset_password("t", "longenough1", "longenough2")
        with pytest.raises(ValueError, match="at least 8 characters"):
            session.reset_password("t", "short", "short")
        assert rec.requests == []

    def test_validate_reset_token(self, store):
        session, _ = self._session(
            store, {("GET", "/api/v1/users/validate-token/"): (200, {"valid": True})}
        )
        assert session.validate_reset_token("abc") is True
        assert session.validate_reset_token("") is False
