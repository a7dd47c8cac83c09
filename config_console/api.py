"""
config_console.api
~~~~~~~~~~~~~~~~~~
HTTP client for the config server REST API.

Public API
----------
ApiError             – Raised for every failed call
ConfigServerClient   – Entry point; exposes the resource sub-clients below
GroupsApi, ItemsApi, EnvironmentsApi, AuthApi, UsersApi
"""
from __future__ import annotations

from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx
import structlog

from . import settings
from .models import ConfigurationGroup, ConfigurationItem, LoginResult, User

logger = structlog.get_logger(__name__)

TokenProvider = Callable[[], Optional[str]]


class ApiError(Exception):
    """
    A call to the config server failed.

    Attributes:
        status_code: HTTP status, or ``None`` when the server was unreachable.
        message: Best human-readable description found in the response.
        payload: Decoded JSON body of the error response, if any.
    """

    def __init__(
        self,
        status_code: int | None,
        message: str,
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


def _error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            if isinstance(payload.get(key), str) and payload[key]:
                return payload[key]
        # DRF field errors: {"field": ["msg", ...]}
        for field_name, errors in payload.items():
            if isinstance(errors, list) and errors:
                return f"{field_name}: {errors[0]}"
    if isinstance(payload, str) and payload:
        return payload
    return f"Request failed with status {status_code}"


class ConfigServerClient:
    """
    Synchronous client over one :class:`httpx.Client`.

    Args:
        base_url: API root, e.g. ``http://localhost:8000/api/v1``.
        timeout: Per-request timeout in seconds.
        token_provider: Returns the bearer token to send, or ``None``.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        token_provider: TokenProvider | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.SERVER_URL).rstrip("/")
        self.token_provider = token_provider
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout or settings.TIMEOUT,
            headers={"Accept": "application/json"},
            transport=transport,
        )

        self.groups = GroupsApi(self)
        self.items = ItemsApi(self)
        self.environments = EnvironmentsApi(self)
        self.auth = AuthApi(self)
        self.users = UsersApi(self)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ConfigServerClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
    ) -> Any:
        """
        Perform one call and return the decoded JSON body (``None`` for 204).

        Raises:
            ApiError: On any non-2xx status or transport failure.
        """
        try:
            response = self._http.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            logger.error("api_unreachable", method=method, path=path, error=str(exc))
            raise ApiError(None, f"Could not reach the config server: {exc}") from exc

        payload = None
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text

        if response.is_success:
            return payload

        message = _error_message(payload, response.status_code)
        logger.warning(
            "api_error",
            method=method,
            path=path,
            status_code=response.status_code,
            message=message,
        )
        raise ApiError(response.status_code, message, payload)


class _Resource:
    def __init__(self, client: ConfigServerClient) -> None:
        self._client = client

    def _call(self, method: str, path: str, **kwargs) -> Any:
        return self._client.request(method, path, **kwargs)


class GroupsApi(_Resource):
    def list(self) -> list[ConfigurationGroup]:
        return [ConfigurationGroup.from_dict(g) for g in self._call("GET", "/groups/")]

    def get(self, group_id: int) -> ConfigurationGroup:
        return ConfigurationGroup.from_dict(self._call("GET", f"/groups/{group_id}/"))

    def get_by_name(self, name: str) -> ConfigurationGroup:
        name = quote(name, safe="")
        return ConfigurationGroup.from_dict(self._call("GET", f"/groups/name/{name}/"))

    def create(self, group: ConfigurationGroup) -> ConfigurationGroup:
        return ConfigurationGroup.from_dict(
            self._call("POST", "/groups/", json=group.to_payload())
        )

    def update(self, group_id: int, group: ConfigurationGroup) -> ConfigurationGroup:
        return ConfigurationGroup.from_dict(
            self._call("PUT", f"/groups/{group_id}/", json=group.to_payload())
        )

    def delete(self, group_id: int) -> None:
        self._call("DELETE", f"/groups/{group_id}/")


class ItemsApi(_Resource):
    def _many(self, path: str) -> list[ConfigurationItem]:
        return [ConfigurationItem.from_dict(i) for i in self._call("GET", path)]

    def list(self) -> list[ConfigurationItem]:
        return self._many("/items/")

    def get(self, item_id: int) -> ConfigurationItem:
        return ConfigurationItem.from_dict(self._call("GET", f"/items/{item_id}/"))

    def by_group(self, group_id: int) -> list[ConfigurationItem]:
        return self._many(f"/items/group/{group_id}/")

    def by_group_and_environment(
        self, group_id: int, environment: str
    ) -> list[ConfigurationItem]:
        environment = quote(environment, safe="")
        return self._many(f"/items/group/{group_id}/environment/{environment}/")

    def create(self, item: ConfigurationItem) -> ConfigurationItem:
        return ConfigurationItem.from_dict(
            self._call("POST", "/items/", json=item.to_payload())
        )

    def update(self, item_id: int, item: ConfigurationItem) -> ConfigurationItem:
        return ConfigurationItem.from_dict(
            self._call("PUT", f"/items/{item_id}/", json=item.to_payload())
        )

    def patch(self, item_id: int, **fields) -> ConfigurationItem:
        """Partial update; keyword names are wire keys (``value``, ``groupId``...)."""
        return ConfigurationItem.from_dict(
            self._call("PATCH", f"/items/{item_id}/", json=fields)
        )

    def delete(self, item_id: int) -> None:
        self._call("DELETE", f"/items/{item_id}/")


class EnvironmentsApi(_Resource):
    def list(self) -> list[str]:
        return list(self._call("GET", "/environments/"))


class AuthApi(_Resource):
    def login(self, username: str, password: str) -> LoginResult:
        return LoginResult.from_dict(
            self._call("POST", "/auth/login/", json={"username": username, "password": password})
        )

    def validate(self) -> dict:
        return self._call("GET", "/auth/validate/")


class UsersApi(_Resource):
    def list(self) -> list[User]:
        return [User.from_dict(u) for u in self._call("GET", "/users/")]

    def create(self, user: User) -> dict:
        return self._call("POST", "/users/", json=user.to_payload())

    def update(self, user_id: int, user: User) -> dict:
        return self._call("PUT", f"/users/{user_id}/", json=user.to_payload())

    def delete(self, user_id: int) -> None:
        self._call("DELETE", f"/users/{user_id}/")

    def forgot_password(self, email: str) -> dict:
        return self._call("POST", "/users/forgot-password/", json={"email": email})

    def validate_token(self, token: str) -> bool:
        body = self._call("GET", "/users/validate-token/", params={"token": token})
        return bool(body and body.get("valid"))

    def reset_password(self, token: str, password: str, confirm_password: str) -> dict:
        return self._call(
            "POST",
            "/users/reset-password/",
            params={"token": token},
            json={"password": password, "confirmPassword": confirm_password},
        )
