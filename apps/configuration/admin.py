"""
apps.configuration.admin
"""
from django.contrib import admin

from .models import ConfigurationGroup, ConfigurationItem


class ConfigurationItemInline(admin.TabularInline):
    model = ConfigurationItem
    extra = 0
    fields = ["key", "environment", "value", "description"]
    ordering = ["key", "environment"]


@admin.register(ConfigurationGroup)
class ConfigurationGroupAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "description", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    ordering = ["id"]
    inlines = [ConfigurationItemInline]


@admin.register(ConfigurationItem)
class ConfigurationItemAdmin(admin.ModelAdmin):
    list_display = ["key", "environment", "value", "group", "updated_at"]
    list_filter = ["environment", "group"]
    search_fields = ["key", "value", "group__name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    ordering = ["group", "key", "environment"]
