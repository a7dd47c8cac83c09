"""
config_console.forms
~~~~~~~~~~~~~~~~~~~~
Client-side validation run before any network call.

Each form is a dataclass; ``validate()`` returns a ``{field: message}`` dict
that is empty when the form may be submitted.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .models import ConfigurationGroup, ConfigurationItem, User

ROLES = ("ADMIN", "READ_ONLY")
MIN_PASSWORD_LENGTH = 8

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

FormErrors = dict[str, str]


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


@dataclass
class GroupForm:
    name: str = ""
    description: str = ""

    def validate(self) -> FormErrors:
        errors: FormErrors = {}
        if _blank(self.name):
            errors["name"] = "Name is required"
        return errors

    def to_group(self, group_id: int | None = None) -> ConfigurationGroup:
        return ConfigurationGroup(
            id=group_id, name=self.name.strip(), description=self.description.strip()
        )


@dataclass
class ItemForm:
    key: str = ""
    value: str = ""
    environment: str = ""
    group_id: int | None = None
    description: str = ""

    def validate(self) -> FormErrors:
        errors: FormErrors = {}
        if _blank(self.key):
            errors["key"] = "Key is required"
        if _blank(self.value):
            errors["value"] = "Value is required"
        if _blank(self.environment):
            errors["environment"] = "Environment is required"
        if self.group_id is None:
            errors["group_id"] = "Group is required"
        return errors

    def to_item(self, item_id: int | None = None) -> ConfigurationItem:
        return ConfigurationItem(
            id=item_id,
            key=self.key.strip(),
            value=self.value,
            environment=self.environment.strip().upper(),
            group_id=self.group_id,
            description=self.description.strip(),
        )


@dataclass
class UserForm:
    username: str = ""
    email: str = ""
    role: str = "READ_ONLY"

    def validate(self) -> FormErrors:
        errors: FormErrors = {}
        if _blank(self.username):
            errors["username"] = "Username is required"
        if _blank(self.email):
            errors["email"] = "Email is required"
        elif not _EMAIL_RE.match(self.email.strip()):
            errors["email"] = "Enter a valid email address"
        if self.role not in ROLES:
            errors["role"] = "Role must be ADMIN or READ_ONLY"
        return errors

    def to_user(self, user_id: int | None = None) -> User:
        return User(
            id=user_id,
            username=self.username.strip(),
            email=self.email.strip(),
            role=self.role,
        )


@dataclass
class PasswordResetForm:
    password: str = ""
    confirm_password: str = ""

    def validate(self) -> FormErrors:
        errors: FormErrors = {}
        if len(self.password) < MIN_PASSWORD_LENGTH:
            errors["password"] = "Password must be at least 8 characters long"
        if self.password != self.confirm_password:
            errors["confirm_password"] = "Passwords do not match"
        return errors
