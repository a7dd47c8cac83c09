"""
apps.configuration.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for groups and items.
No business logic; shape validation only.

Item payloads use the camelCase ``groupId`` / ``groupName`` keys the console
expects.
"""
from rest_framework import serializers

from .models import ConfigurationGroup, ConfigurationItem, Environment


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

class ConfigurationGroupSerializer(serializers.ModelSerializer):
    """Read serializer for a group."""

    class Meta:
        model = ConfigurationGroup
        fields = ["id", "name", "description"]
        read_only_fields = fields


class ConfigurationGroupWriteSerializer(serializers.Serializer):
    """Validates POST /groups/ and PUT /groups/{id}/ bodies."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

class ConfigurationItemSerializer(serializers.ModelSerializer):
    """Read serializer for an item, flattened with its group id and name."""

    groupId = serializers.IntegerField(source="group_id", read_only=True)  # noqa: N815
    groupName = serializers.CharField(source="group.name", read_only=True)  # noqa: N815

    class Meta:
        model = ConfigurationItem
        fields = ["id", "key", "value", "description", "environment", "groupId", "groupName"]
        read_only_fields = fields


class _EnvironmentField(serializers.ChoiceField):
    """Choice field over :class:`Environment` that accepts any letter case."""

    def __init__(self, **kwargs):
        super().__init__(choices=Environment.choices, **kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.strip().upper()
        return super().to_internal_value(data)


class ConfigurationItemWriteSerializer(serializers.Serializer):
    """
    Validates POST /items/, PUT /items/{id}/ and PATCH /items/{id}/ bodies.

    Instantiate with ``partial=True`` for PATCH.
    """

    key = serializers.CharField(max_length=255)
    value = serializers.CharField(allow_blank=True, trim_whitespace=False)
    description = serializers.CharField(required=False, default="", allow_blank=True)
    environment = _EnvironmentField()
    groupId = serializers.IntegerField(source="group_id", min_value=1)  # noqa: N815
