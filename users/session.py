"""
Per-request identity.

A Session is built once per HTTP request (``SessionMixin``) or once per
websocket connection (``JWTAuthMiddleware``) and passed explicitly to the
workflow functions; nothing about the caller is kept in module state.
"""
import logging
from dataclasses import dataclass

from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from .models import Profile

logger = logging.getLogger(__name__)

DEFAULT_FULL_NAME = 'Usuario'


@dataclass(frozen=True)
class Session:
    user: object
    profile: Profile

    @property
    def email_verified(self) -> bool:
        return bool(getattr(self.user, 'email_verified', False))

    @property
    def role(self) -> str:
        return self.profile.role

    @property
    def is_admin(self) -> bool:
        return self.profile.is_admin

    @property
    def is_worker(self) -> bool:
        return self.profile.is_worker


def get_or_create_profile(user) -> Profile:
    """Return the user's Profile, creating a worker profile on first access."""
    profile, created = Profile.objects.get_or_create(
        user=user,
        defaults={
            'email': user.email,
            'full_name': user.full_name or DEFAULT_FULL_NAME,
            'role': Profile.Role.WORKER,
        }
    )
    if created:
        logger.info(f"Profile created lazily for {user.email}")
    return profile


def resolve_session(user) -> Session:
    if user is None or not user.is_authenticated:
        raise NotAuthenticated()
    if not user.is_active:
        raise NotAuthenticated(_("This account is inactive."))

    profile = get_or_create_profile(user)
    if not profile.is_active:
        logger.warning(f"Deactivated profile {user.email} attempted to open a session")
        raise PermissionDenied(_("This profile has been deactivated."))

    return Session(user=user, profile=profile)


class SessionMixin:
    """
    View mixin exposing ``get_session()``.

    The session is resolved lazily and cached on the DRF request object, so it
    lives exactly as long as the request.
    """

    def get_session(self) -> Session:
        session = getattr(self.request, '_order_session', None)
        if session is None:
            session = resolve_session(self.request.user)
            self.request._order_session = session
        return session
