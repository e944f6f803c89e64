"""
Custom permissions for role-based access
"""
from rest_framework import permissions


def _has_role(request, *roles):
    return bool(
        request.user and
        request.user.is_authenticated and
        request.user.role in roles
    )


class IsAdmin(permissions.BasePermission):
    """Permission check for admin role"""

    def has_permission(self, request, view):
        return _has_role(request, 'admin')


class IsStudent(permissions.BasePermission):
    """Permission check for student role"""

    def has_permission(self, request, view):
        return _has_role(request, 'student')


class IsAdminOrTeacher(permissions.BasePermission):
    """
    Content-management surface. Per-subject rights are checked in the view
    with courses.services.access.can_manage.
    """

    def has_permission(self, request, view):
        return _has_role(request, 'admin', 'teacher')
