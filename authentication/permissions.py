from rest_framework.permissions import IsAuthenticated

from .models import Role


# Custom permission to check if user is admin
class IsAdmin(IsAuthenticated):
    message = 'Forbidden'

    def has_permission(self, request, view):
        return super().has_permission(request, view) and request.user.role == Role.ADMIN


# Reviewers share write access to projects, houses and templates with admins
class IsReviewerOrAdmin(IsAuthenticated):
    message = 'Forbidden'

    def has_permission(self, request, view):
        return super().has_permission(request, view) and request.user.role in (Role.REVIEWER, Role.ADMIN)


class RolePermissionMixin:
    """
    Pick permission classes per HTTP method.

    Views declare ``method_permissions = {'POST': [IsReviewerOrAdmin], ...}``;
    methods not listed fall back to ``permission_classes``.
    """
    method_permissions = {}

    def get_permissions(self):
        classes = self.method_permissions.get(self.request.method, self.permission_classes)
        return [permission() for permission in classes]
