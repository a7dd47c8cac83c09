"""
config_console.models
~~~~~~~~~~~~~~~~~~~~~
Plain dataclasses for the resources exchanged with the config server.

This module is **pure Python**; wire keys are camelCase and are mapped in
``from_dict`` / ``to_payload``.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConfigurationGroup:
    id: int | None
    name: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ConfigurationGroup:
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            description=data.get("description") or "",
        )

    def to_payload(self) -> dict:
        return {"name": self.name, "description": self.description}


@dataclass
class ConfigurationItem:
    """
    One key/value pair scoped to a group and an environment.

    Attributes:
        group_id: Owning group.
        group_name: Denormalised group name, informational only.
    """

    id: int | None
    key: str
    value: str
    environment: str
    group_id: int | None
    description: str = ""
    group_name: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ConfigurationItem:
        return cls(
            id=data.get("id"),
            key=data.get("key", ""),
            value=data.get("value") or "",
            environment=data.get("environment", ""),
            group_id=data.get("groupId"),
            description=data.get("description") or "",
            group_name=data.get("groupName") or "",
        )

    def to_payload(self) -> dict:
        return {
            "key": self.key,
            "value": self.value,
            "description": self.description,
            "environment": self.environment,
            "groupId": self.group_id,
        }


@dataclass
class User:
    id: int | None
    username: str
    email: str
    role: str
    enabled: bool = True
    last_login: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> User:
        return cls(
            id=data.get("id"),
            username=data.get("username", ""),
            email=data.get("email", ""),
            role=data.get("role", ""),
            enabled=data.get("enabled", True),
            last_login=data.get("lastLogin"),
        )

    def to_payload(self) -> dict:
        return {"username": self.username, "email": self.email, "role": self.role}


@dataclass
class LoginResult:
    """Body of ``POST /auth/login/``; ``token`` is absent on failure."""

    success: bool
    message: str
    username: str
    id: int | None = None
    token: str | None = None
    role: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> LoginResult:
        return cls(
            success=bool(data.get("success")),
            message=data.get("message", ""),
            username=data.get("username", ""),
            id=data.get("id"),
            token=data.get("token"),
            role=data.get("role"),
        )

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "username": self.username,
            "id": self.id,
            "token": self.token,
            "role": self.role,
        }
