"""
apps.configuration.services
~~~~~~~~~~~~~~~~~~~~~~~~~~~
All business logic for configuration groups, items and environments.

Views must call only these functions.  No business logic lives in views or
serializers.

Responsibilities
----------------
- CRUD for :class:`~apps.configuration.models.ConfigurationGroup`.
- CRUD and group/environment filtering for
  :class:`~apps.configuration.models.ConfigurationItem`, enforcing the
  ``(group, key, environment)`` uniqueness rule with a readable 409.
- Writing an :mod:`~apps.audit` entry for every change.
"""
from __future__ import annotations

import structlog
from django.db import transaction

from apps.audit import services as audit
from apps.audit.models import AuditLog
from common.exceptions import ConflictError, NotFoundError, ValidationError

from .models import ConfigurationGroup, ConfigurationItem, Environment

logger = structlog.get_logger(__name__)

_GROUP = AuditLog.EntityType.GROUP
_ITEM = AuditLog.EntityType.ITEM


# ---------------------------------------------------------------------------
# Environments
# ---------------------------------------------------------------------------

def list_environments() -> list[str]:
    """Return the environment tags in their canonical order."""
    return list(Environment.values)


def normalize_environment(environment: str) -> str:
    """
    Return the canonical tag for *environment* (case-insensitive).

    Raises:
        ValidationError: If *environment* is not one of :class:`Environment`.
    """
    candidate = (environment or "").strip().upper()
    if candidate not in Environment.values:
        raise ValidationError(
            f"Unknown environment '{environment}'. "
            f"Expected one of: {', '.join(Environment.values)}.",
            code="unknown_environment",
        )
    return candidate


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

def list_groups() -> list[ConfigurationGroup]:
    return list(ConfigurationGroup.objects.all())


def get_group(group_id: int | str) -> ConfigurationGroup:
    """Fetch a group by primary key, raise NotFoundError if missing."""
    try:
        return ConfigurationGroup.objects.get(pk=group_id)
    except (ConfigurationGroup.DoesNotExist, ValueError):
        raise NotFoundError(f"Group not found with id: {group_id}")


def get_group_by_name(name: str) -> ConfigurationGroup:
    try:
        return ConfigurationGroup.objects.get(name=name)
    except ConfigurationGroup.DoesNotExist:
        raise NotFoundError(f"Group not found with name: {name}")


def create_group(*, name: str, description: str = "", actor=None) -> ConfigurationGroup:
    """
    Create a new group.

    Raises:
        ConflictError: If a group called *name* already exists.
    """
    if ConfigurationGroup.objects.filter(name=name).exists():
        raise ConflictError(f"Group with name {name} already exists")

    with transaction.atomic():
        group = ConfigurationGroup.objects.create(name=name, description=description)
        audit.record(
            action=AuditLog.Action.CREATE,
            entity_type=_GROUP,
            entity_id=group.id,
            new_value=group.name,
            actor=actor,
        )

    logger.info("group_created", group_id=group.id, name=group.name)
    return group


def update_group(
    group_id: int | str, *, name: str, description: str = "", actor=None
) -> ConfigurationGroup:
    """
    Rename and/or re-describe a group.

    Raises:
        NotFoundError: If the group does not exist.
        ConflictError: If *name* is taken by another group.
    """
    group = get_group(group_id)
    if (
        name != group.name
        and ConfigurationGroup.objects.filter(name=name).exclude(pk=group.pk).exists()
    ):
        raise ConflictError(f"Group with name {name} already exists")

    old_snapshot = f"name: {group.name}, description: {group.description}"
    group.name = name
    group.description = description

    with transaction.atomic():
        group.save(update_fields=["name", "description", "updated_at"])
        audit.record(
            action=AuditLog.Action.UPDATE,
            entity_type=_GROUP,
            entity_id=group.id,
            old_value=old_snapshot,
            new_value=f"name: {group.name}, description: {group.description}",
            actor=actor,
        )

    logger.info("group_updated", group_id=group.id, name=group.name)
    return group


def delete_group(group_id: int | str, *, actor=None) -> None:
    """Delete a group together with all of its items."""
    group = get_group(group_id)
    pk = group.pk
    snapshot = f"name: {group.name}, description: {group.description}"

    with transaction.atomic():
        item_count = group.items.count()
        group.delete()
        audit.record(
            action=AuditLog.Action.DELETE,
            entity_type=_GROUP,
            entity_id=pk,
            old_value=snapshot,
            actor=actor,
        )

    logger.info("group_deleted", group_id=pk, cascaded_items=item_count)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

def _items():
    return ConfigurationItem.objects.select_related("group")


def list_items() -> list[ConfigurationItem]:
    return list(_items().all())


def get_item(item_id: int | str) -> ConfigurationItem:
    """Fetch an item by primary key, raise NotFoundError if missing."""
    try:
        return _items().get(pk=item_id)
    except (ConfigurationItem.DoesNotExist, ValueError):
        raise NotFoundError(f"Configuration item not found with id: {item_id}")


def list_items_by_group(group_id: int | str) -> list[ConfigurationItem]:
    """Return every item of a group across all environments."""
    group = get_group(group_id)
    return list(_items().filter(group=group))


def list_items_by_group_and_environment(
    group_id: int | str, environment: str
) -> list[ConfigurationItem]:
    """Return the items of a group that are scoped to *environment*."""
    group = get_group(group_id)
    env = normalize_environment(environment)
    return list(_items().filter(group=group, environment=env))


def _ensure_unique(
    *, group: ConfigurationGroup, key: str, environment: str, exclude_pk=None
) -> None:
    qs = ConfigurationItem.objects.filter(group=group, key=key, environment=environment)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise ConflictError(
            f"Configuration item with key {key} already exists for group "
            f"{group.name} in environment {environment}"
        )


def create_item(
    *,
    key: str,
    value: str,
    environment: str,
    group_id: int | str,
    description: str = "",
    actor=None,
) -> ConfigurationItem:
    """
    Create a configuration item in *group_id* for *environment*.

    Raises:
        NotFoundError: If the group does not exist.
        ValidationError: If *environment* is unknown.
        ConflictError: If the key already exists for that group/environment.
    """
    group = get_group(group_id)
    env = normalize_environment(environment)
    _ensure_unique(group=group, key=key, environment=env)

    with transaction.atomic():
        item = ConfigurationItem.objects.create(
            group=group,
            key=key,
            value=value,
            environment=env,
            description=description,
        )
        audit.record(
            action=AuditLog.Action.CREATE,
            entity_type=_ITEM,
            entity_id=item.id,
            new_value=item.describe(),
            actor=actor,
        )

    logger.info(
        "item_created",
        item_id=item.id,
        key=item.key,
        environment=item.environment,
        group_id=group.id,
    )
    return item


#: Fields a caller may change on an existing item.
_UPDATABLE_ITEM_FIELDS = {"key", "value", "description", "environment", "group_id"}


def update_item(item_id: int | str, *, data: dict, actor=None) -> ConfigurationItem:
    """
    Full or partial update of an item.

    *data* may carry any of ``key``, ``value``, ``description``,
    ``environment`` and ``group_id``; absent keys keep their current value.
    Uniqueness is only re-checked when key, environment or group change.
    """
    item = get_item(item_id)
    old_snapshot = item.describe()

    changes = {f: v for f, v in data.items() if f in _UPDATABLE_ITEM_FIELDS}
    group = item.group
    if "group_id" in changes and str(changes["group_id"]) != str(item.group_id):
        group = get_group(changes["group_id"])
    if "environment" in changes:
        changes["environment"] = normalize_environment(changes["environment"])

    key = changes.get("key", item.key)
    environment = changes.get("environment", item.environment)
    if (key, environment, group.pk) != (item.key, item.environment, item.group_id):
        _ensure_unique(group=group, key=key, environment=environment, exclude_pk=item.pk)

    item.group = group
    item.key = key
    item.environment = environment
    item.value = changes.get("value", item.value)
    item.description = changes.get("description", item.description)

    with transaction.atomic():
        item.save()
        audit.record(
            action=AuditLog.Action.UPDATE,
            entity_type=_ITEM,
            entity_id=item.id,
            old_value=old_snapshot,
            new_value=item.describe(),
            actor=actor,
        )

    logger.info("item_updated", item_id=item.id, fields=sorted(changes))
    return item


def delete_item(item_id: int | str, *, actor=None) -> None:
    item = get_item(item_id)
    pk = item.pk
    snapshot = item.describe()

    with transaction.atomic():
        item.delete()
        audit.record(
            action=AuditLog.Action.DELETE,
            entity_type=_ITEM,
            entity_id=pk,
            old_value=snapshot,
            actor=actor,
        )

    logger.info("item_deleted", item_id=pk)
