"""
Permisos basados en el rol del perfil.

Resuelven la sesión a través de la vista (``SessionMixin``), por lo que el
perfil se crea de forma perezosa la primera vez que se consulta.
"""

from rest_framework.permissions import BasePermission

from .session import resolve_session


def _session_for(request, view):
    if hasattr(view, 'get_session'):
        return view.get_session()
    return resolve_session(request.user)


class IsAdminProfile(BasePermission):
    """Solo perfiles con rol ``admin``."""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return _session_for(request, view).is_admin


class IsWorkerProfile(BasePermission):
    """Solo perfiles con rol ``worker``."""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return _session_for(request, view).is_worker
