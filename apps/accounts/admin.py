"""
apps.accounts.admin
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import PasswordResetToken, User


@admin.register(User)
class ConsoleUserAdmin(UserAdmin):
    list_display = ["id", "username", "email", "role", "is_active", "last_login"]
    list_filter = ["role", "is_active"]
    fieldsets = UserAdmin.fieldsets + (("Console", {"fields": ["role"]}),)
    add_fieldsets = UserAdmin.add_fieldsets + (("Console", {"fields": ["email", "role"]}),)
    ordering = ["id"]


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ["user", "created_at", "expires_at"]
    readonly_fields = ["user", "token_hash", "created_at", "expires_at"]
