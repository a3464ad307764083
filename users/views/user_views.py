"""
Profile views.

Handles the caller's own profile, worker statistics, account deactivation and
the admin-side worker management.
"""
import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..models import Profile
from ..permissions import IsAdminProfile, IsWorkerProfile
from ..serializers import ProfileSerializer
from ..services import get_worker_stats
from ..session import SessionMixin

logger = logging.getLogger(__name__)


class ManageProfileView(SessionMixin, generics.RetrieveUpdateAPIView):
    """
    GET/PATCH /api/users/me/

    Retrieve or update the authenticated user's profile.
    The profile is created on first access if it does not exist yet.
    Only ``full_name`` is writable.
    """
    serializer_class = ProfileSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_object(self):
        return self.get_session().profile

    def perform_update(self, serializer):
        profile = serializer.save()
        if 'full_name' in serializer.validated_data:
            profile.user.full_name = profile.full_name
            profile.user.save(update_fields=['full_name'])
        logger.info(f"Profile updated by {profile.email}")


class WorkerStatsView(SessionMixin, APIView):
    """
    GET /api/users/me/stats/

    Activity summary for the authenticated worker.
    """
    permission_classes = [permissions.IsAuthenticated, IsWorkerProfile]

    def get(self, request):
        stats = get_worker_stats(self.get_session().profile)
        return Response(stats, status=status.HTTP_200_OK)


class DeactivateAccountView(SessionMixin, APIView):
    """
    POST /api/users/me/deactivate/

    Soft delete: the profile and the auth user are marked inactive, nothing is
    removed. Existing tokens stop working because inactive users fail JWT
    authentication.
    """
    permission_classes = [permissions.IsAuthenticated]

    @transaction.atomic
    def post(self, request):
        profile = self.get_session().profile
        profile.is_active = False
        profile.deactivated_at = timezone.now()
        profile.save(update_fields=['is_active', 'deactivated_at', 'updated_at'])

        request.user.is_active = False
        request.user.save(update_fields=['is_active'])

        logger.info(f"Account deactivated: {profile.email}")
        return Response({'detail': _("Account deactivated.")}, status=status.HTTP_200_OK)


class ReactivateAccountView(SessionMixin, APIView):
    """
    POST /api/users/{id}/reactivate/

    Admin-only. Reverses a deactivation.
    """
    permission_classes = [permissions.IsAuthenticated, IsAdminProfile]

    @transaction.atomic
    def post(self, request, pk):
        profile = get_object_or_404(Profile.objects.select_related('user'), pk=pk)
        profile.is_active = True
        profile.deactivated_at = None
        profile.save(update_fields=['is_active', 'deactivated_at', 'updated_at'])

        profile.user.is_active = True
        profile.user.save(update_fields=['is_active'])

        logger.info(f"Account {profile.email} reactivated by {request.user.email}")
        return Response(ProfileSerializer(profile).data, status=status.HTTP_200_OK)


class WorkerListView(SessionMixin, generics.ListAPIView):
    """
    GET /api/users/workers/

    Admin-only list of worker profiles.
    """
    serializer_class = ProfileSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminProfile]

    def get_queryset(self):
        return Profile.objects.filter(
            role=Profile.Role.WORKER
        ).select_related('user').order_by('full_name')
