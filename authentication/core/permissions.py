from rest_framework.permissions import BasePermission

from .exceptions import AccountBlockedException

# =====================================================
# Generic Role Permissions
# =====================================================

class IsAdmin(BasePermission):
    """
    Allows access only to active users with role ADMIN
    """
    message = 'Admin access required'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.is_admin and not request.user.is_blocked


class IsNotBlocked(BasePermission):
    """
    Rejects authenticated users whose account status is BLOCKED
    """
    def has_permission(self, request, view):
        if request.user and request.user.is_authenticated and request.user.is_blocked:
            raise AccountBlockedException()
        return True

