from rest_framework import permissions


class IsAdminOrAssignee(permissions.BasePermission):
    """Admins see every order; workers only the ones assigned to them."""

    def has_object_permission(self, request, view, obj):
        session = view.get_session()
        return session.is_admin or obj.assigned_to_id == session.profile.pk
