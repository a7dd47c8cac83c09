"""
apps.configuration.models
~~~~~~~~~~~~~~~~~~~~~~~~~
Models for the Configuration application.

Models
------
ConfigurationGroup
    Named collection of configuration items (e.g. ``"payment-service"``).

ConfigurationItem
    A key/value pair scoped to exactly one group and one environment.
"""
from django.db import models


class Environment(models.TextChoices):
    """Deployment tiers an item value can be scoped to, in display order."""

    DEV = "DEV", "Development"
    TEST = "TEST", "Test"
    STAGE = "STAGE", "Staging"
    PROD = "PROD", "Production"


class ConfigurationGroup(models.Model):
    """
    A named collection of configuration items.

    Deleting a group cascades to every item it holds.
    """

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Configuration Group"
        verbose_name_plural = "Configuration Groups"

    def __str__(self) -> str:
        return self.name


class ConfigurationItem(models.Model):
    """
    A single configuration value.

    The triple ``(group, key, environment)`` is unique, so the same key can
    carry a different value in every environment of a group.
    """

    group = models.ForeignKey(
        ConfigurationGroup,
        on_delete=models.CASCADE,
        related_name="items",
    )
    key = models.CharField(
        max_length=255,
        help_text="Dotted configuration key, e.g. 'api.timeout'.",
    )
    value = models.TextField()
    description = models.TextField(blank=True, default="")
    environment = models.CharField(
        max_length=10,
        choices=Environment.choices,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["group", "key", "environment"]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "key", "environment"],
                name="unique_item_key_per_group_environment",
            ),
        ]
        verbose_name = "Configuration Item"
        verbose_name_plural = "Configuration Items"

    def __str__(self) -> str:
        return f"{self.group.name}/{self.key} [{self.environment}]"

    def describe(self) -> str:
        """Flat one-line rendering used for audit snapshots."""
        return (
            f"key: {self.key}, value: {self.value}, "
            f"env: {self.environment}, groupId: {self.group_id}"
        )
