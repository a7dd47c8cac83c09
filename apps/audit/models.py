"""
apps.audit.models
~~~~~~~~~~~~~~~~~
AuditLog – append-only record of every configuration change.
"""
from django.db import models


class AuditLog(models.Model):
    """
    One create/update/delete of a group or item.

    ``old_value`` / ``new_value`` hold flat text snapshots so entries stay
    readable after the underlying row is gone.
    """

    class Action(models.TextChoices):
        CREATE = "CREATE", "Create"
        UPDATE = "UPDATE", "Update"
        DELETE = "DELETE", "Delete"

    class EntityType(models.TextChoices):
        GROUP = "Group", "Configuration group"
        ITEM = "ConfigItem", "Configuration item"

    action = models.CharField(max_length=10, choices=Action.choices)
    entity_type = models.CharField(max_length=20, choices=EntityType.choices)
    entity_id = models.BigIntegerField()
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)
    user_id = models.CharField(
        max_length=150,
        help_text="Username of the actor, or 'system' for unattended changes.",
    )
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx")]
        verbose_name = "Audit Log Entry"
        verbose_name_plural = "Audit Log"

    def __str__(self) -> str:
        return f"{self.action} {self.entity_type}#{self.entity_id} by {self.user_id}"
