"""
apps.audit.serializers
~~~~~~~~~~~~~~~~~~~~~~
Read-only serializer for audit entries.
"""
from rest_framework import serializers

from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    entityType = serializers.CharField(source="entity_type", read_only=True)  # noqa: N815
    entityId = serializers.IntegerField(source="entity_id", read_only=True)  # noqa: N815
    oldValue = serializers.CharField(source="old_value", read_only=True)  # noqa: N815
    newValue = serializers.CharField(source="new_value", read_only=True)  # noqa: N815
    userId = serializers.CharField(source="user_id", read_only=True)  # noqa: N815

    class Meta:
        model = AuditLog
        fields = ["id", "action", "entityType", "entityId", "oldValue", "newValue", "userId", "timestamp"]
        read_only_fields = fields
