from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """
    Allow access only to authenticated users holding the admin role.

    Guards every admin report endpoint (list, show, process); non-admins get
    403 before any moderation code runs.
    """
    message = "Admin privileges are required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))

    def has_object_permission(self, request, view, obj):
        return self.has_permission(request, view)
