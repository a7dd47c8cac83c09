"""
common.permissions
~~~~~~~~~~~~~~~~~~
Role-based DRF permission classes.

ADMIN may read and write; READ_ONLY may only use safe methods.
"""
from rest_framework.permissions import SAFE_METHODS, BasePermission


def _is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "is_admin", False))


class IsAdminRole(BasePermission):
    """Allow access only to authenticated users holding the ADMIN role."""

    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        return _is_admin(request.user)


class IsAdminRoleOrReadOnly(BasePermission):
    """Any authenticated user may read; only ADMIN may write."""

    message = "Administrator role required to modify configuration."

    def has_permission(self, request, view) -> bool:
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return _is_admin(request.user)
