"""
apps.audit.admin
"""
from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Audit entries are append-only; the admin is a read-only browser."""

    list_display = ["timestamp", "action", "entity_type", "entity_id", "user_id"]
    list_filter = ["action", "entity_type"]
    search_fields = ["user_id", "old_value", "new_value"]
    ordering = ["-timestamp"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
