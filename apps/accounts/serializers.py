"""
apps.accounts.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for login and user administration.
"""
from rest_framework import serializers

from .models import Role, User


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(trim_whitespace=False, style={"input_type": "password"})


class LoginResponseSerializer(serializers.Serializer):
    """Schema-only description of the login response body."""

    id = serializers.IntegerField(required=False)
    token = serializers.CharField(required=False)
    username = serializers.CharField()
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    success = serializers.BooleanField()
    message = serializers.CharField()


class UserSerializer(serializers.ModelSerializer):
    """Read serializer for the admin user list."""

    enabled = serializers.BooleanField(source="is_active", read_only=True)
    lastLogin = serializers.DateTimeField(source="last_login", read_only=True)  # noqa: N815

    class Meta:
        model = User
        fields = ["id", "username", "email", "role", "enabled", "lastLogin"]
        read_only_fields = fields


class UserWriteSerializer(serializers.Serializer):
    """Validates POST /users/ and PUT /users/{id}/ bodies."""

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=Role.choices, default=Role.READ_ONLY)


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    password = serializers.CharField(trim_whitespace=False)
    confirmPassword = serializers.CharField(trim_whitespace=False)  # noqa: N815
