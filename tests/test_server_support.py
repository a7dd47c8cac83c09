"""
tests.test_server_support
~~~~~~~~~~~~~~~~~~~~~~~~~
Access tokens, the audit trail, request logging, health probe and seed
commands.
"""
from __future__ import annotations

import warnings
from datetime import datetime, timedelta, timezone
from unittest import mock

import jwt
import pytest
from django.conf import settings
from django.core.management import call_command
from django.db import DatabaseError
from rest_framework import status
from structlog.testing import capture_logs

from apps.accounts.models import Role, User
from apps.accounts.services.tokens import (
    create_access_token,
    decode_access_token,
    generate_reset_token,
    hash_reset_token,
)
from apps.audit.models import AuditLog
from apps.configuration.models import ConfigurationGroup, ConfigurationItem

AUDIT_URL = "/api/v1/audit-logs/"


# ===========================================================================
# TestAccessTokens  (unit, no DB)
# ===========================================================================

class TestAccessTokens:
    def test_round_trip_claims(self):
        claims = decode_access_token(create_access_token(username="alice", role="ADMIN"))
        assert claims["sub"] == "alice"
        assert claims["role"] == "ADMIN"
        assert claims["exp"] - claims["iat"] == settings.JWT_EXPIRATION_SECONDS

    def test_signed_with_hs512(self):
        token = create_access_token(username="alice", role="ADMIN")
        assert jwt.get_unverified_header(token)["alg"] == "HS512"

    def test_key_is_long_enough_for_hs512(self):
        assert len(settings.JWT_SECRET_KEY.encode()) >= 64
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            decode_access_token(create_access_token(username="alice", role="ADMIN"))

    def test_expired_token_is_none(self):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "alice", "type": "access", "iat": past, "exp": past + timedelta(hours=1)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert decode_access_token(token) is None

    def test_foreign_signature_is_none(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "alice", "type": "access", "iat": now, "exp": now + timedelta(hours=1)},
            "some-other-secret" * 4,
            algorithm="HS512",
        )
        assert decode_access_token(token) is None

    def test_garbage_is_none(self):
        assert decode_access_token("definitely.not.ajwt") is None

    def test_reset_token_hash_matches(self):
        raw, digest = generate_reset_token()
        assert hash_reset_token(raw) == digest
        assert raw != digest


# ===========================================================================
# Audit trail
# ===========================================================================

@pytest.mark.django_db
class TestAuditLog:
    def test_reader_cannot_see_audit_log(self, reader_client):
        assert reader_client.get(AUDIT_URL).status_code == status.HTTP_403_FORBIDDEN

    def test_lifecycle_is_recorded_newest_first(self, admin_client, group):
        resp = admin_client.post(
            "/api/v1/items/",
            {"key": "k", "value": "1", "environment": "DEV", "groupId": group.id},
            format="json",
        )
        item_id = resp.json()["id"]
        admin_client.patch(f"/api/v1/items/{item_id}/", {"value": "2"}, format="json")
        admin_client.delete(f"/api/v1/items/{item_id}/")

        body = admin_client.get(AUDIT_URL, {"entityType": "ConfigItem", "entityId": item_id}).json()
        assert [e["action"] for e in body] == ["DELETE", "UPDATE", "CREATE"]
        assert body[0]["userId"] == "alice"
        assert body[0]["newValue"] is None
        assert body[2]["oldValue"] is None

    def test_unattended_changes_are_attributed_to_system(self, db):
        call_command("seed_configuration", verbosity=0)
        assert set(AuditLog.objects.values_list("user_id", flat=True)) == {"system"}

    def test_bad_filter_422(self, admin_client):
        resp = admin_client.get(AUDIT_URL, {"entityType": "Widget"})
        assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# ===========================================================================
# Request logging
# ===========================================================================

@pytest.mark.django_db
class TestRequestLogging:
    def test_query_string_is_not_logged(self, api_client):
        with capture_logs() as logs:
            api_client.get("/api/v1/users/validate-token/?token=SECRET-RESET-TOKEN-abc123")
        record = next(e for e in logs if e["event"] == "http_request")
        assert record["path"] == "/api/v1/users/validate-token/"
        assert all("SECRET-RESET-TOKEN" not in str(e) for e in logs)

    def test_acting_user_is_logged(self, admin_client, admin_user):
        with capture_logs() as logs:
            admin_client.get("/api/v1/groups/")
        record = next(e for e in logs if e["event"] == "http_request")
        assert record["user"] == admin_user.username
        assert record["status"] == 200


# ===========================================================================
# Health
# ===========================================================================

@pytest.mark.django_db
class TestHealth:
    def test_health_ok(self, api_client, item):
        resp = api_client.get("/health/")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "db": "ok", "groups": 1, "items": 1}

    def test_health_degraded_when_db_down(self, api_client):
        with mock.patch.object(
            ConfigurationGroup.objects, "count", side_effect=DatabaseError("connection refused")
        ):
            resp = api_client.get("/health/")
        assert resp.status_code == 503
        assert resp.json()["status"] == "degraded"


# ===========================================================================
# Seed commands
# ===========================================================================

@pytest.mark.django_db
class TestSeedCommands:
    def test_seed_users_is_idempotent(self):
        call_command("seed_users", verbosity=0)
        call_command("seed_users", verbosity=0)
        assert User.objects.count() == 2
        admin = User.objects.get(username="admin")
        assert admin.role == Role.ADMIN
        assert admin.check_password("admin123")
        assert User.objects.get(username="user").role == Role.READ_ONLY

    def test_seed_configuration_is_idempotent(self):
        call_command("seed_configuration", verbosity=0)
        call_command("seed_configuration", verbosity=0)
        assert ConfigurationGroup.objects.count() == 4
        assert ConfigurationItem.objects.count() == 24
        prod_timeout = ConfigurationItem.objects.get(
            group__name="api-service", key="api.timeout", environment="PROD"
        )
        assert prod_timeout.value == "10"
