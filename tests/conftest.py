"""
Shared fixtures for the server test suite.
"""
from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from apps.accounts.models import Role, User
from apps.accounts.services.tokens import create_access_token
from apps.configuration.models import ConfigurationGroup, ConfigurationItem

ADMIN_PASSWORD = "s3cure-admin-pass"
READER_PASSWORD = "s3cure-reader-pass"


def _client_for(user: User) -> APIClient:
    client = APIClient()
    token = create_access_token(username=user.username, role=user.role)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def api_client() -> APIClient:
    """Return an unauthenticated DRF APIClient."""
    return APIClient()


@pytest.fixture
def admin_user(db) -> User:
    user = User(username="alice", email="alice@example.com", role=Role.ADMIN)
    user.set_password(ADMIN_PASSWORD)
    user.save()
    return user


@pytest.fixture
def reader_user(db) -> User:
    user = User(username="bob", email="bob@example.com", role=Role.READ_ONLY)
    user.set_password(READER_PASSWORD)
    user.save()
    return user


@pytest.fixture
def admin_client(admin_user) -> APIClient:
    """APIClient carrying a bearer token for an ADMIN user."""
    return _client_for(admin_user)


@pytest.fixture
def reader_client(reader_user) -> APIClient:
    """APIClient carrying a bearer token for a READ_ONLY user."""
    return _client_for(reader_user)


@pytest.fixture
def group(db) -> ConfigurationGroup:
    return ConfigurationGroup.objects.create(name="api-service", description="API Gateway")


@pytest.fixture
def other_group(db) -> ConfigurationGroup:
    return ConfigurationGroup.objects.create(name="user-service")


@pytest.fixture
def item(group) -> ConfigurationItem:
    return ConfigurationItem.objects.create(
        group=group, key="api.timeout", value="30", environment="DEV"
    )
