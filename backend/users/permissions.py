from rest_framework import permissions
from .models import User


class IsManager(permissions.BasePermission):
    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_manager)


class IsChef(permissions.BasePermission):
    """Kitchen actions: chefs, plus managers covering a shift."""

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.role in [User.Role.CHEF, User.Role.MANAGER] or user.is_superuser


class IsWaiterOrManager(permissions.BasePermission):
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.role in [User.Role.WAITER, User.Role.MANAGER] or user.is_superuser
