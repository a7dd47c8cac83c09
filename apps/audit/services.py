"""
apps.audit.services
~~~~~~~~~~~~~~~~~~~
Recording and querying the configuration audit trail.
"""
from __future__ import annotations

import structlog

from .models import AuditLog

logger = structlog.get_logger(__name__)

SYSTEM_ACTOR = "system"


def actor_name(user) -> str:
    """Return the username recorded for *user*, falling back to ``system``."""
    if user is not None and getattr(user, "is_authenticated", False):
        return user.get_username()
    return SYSTEM_ACTOR


def record(
    *,
    action: str,
    entity_type: str,
    entity_id: int,
    old_value: str | None = None,
    new_value: str | None = None,
    actor=None,
) -> AuditLog:
    """Persist one audit entry and mirror it to the structured log."""
    entry = AuditLog.objects.create(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        old_value=old_value,
        new_value=new_value,
        user_id=actor_name(actor),
    )
    logger.info(
        "audit",
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user=entry.user_id,
    )
    return entry


def list_entries(
    *, entity_type: str | None = None, entity_id: int | None = None
) -> list[AuditLog]:
    """Return audit entries newest-first, optionally narrowed to one entity."""
    qs = AuditLog.objects.all()
    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if entity_id is not None:
        qs = qs.filter(entity_id=entity_id)
    return list(qs)
