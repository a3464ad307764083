"""
Worker views.

The claim / release / progress workflow as seen by workers. All state changes
are delegated to ``orders.workflow``; workflow errors are DRF exceptions and
propagate to DRF's handler unchanged.
"""
import logging
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsWorkerProfile
from users.session import SessionMixin
from ..pagination import StandardResultsSetPagination
from ..permissions import IsAdminOrAssignee
from ..repository import order_repository
from ..serializers import (
    OrderSerializer,
    ProgressEntrySerializer,
    ProgressCreateSerializer,
)
from ..throttles import OrderClaimThrottle
from ..workflow import claim_order, release_order, record_progress

logger = logging.getLogger(__name__)


class AvailableOrderListView(SessionMixin, generics.ListAPIView):
    """
    GET /api/orders/available/

    Pending orders nobody has claimed yet, newest first.
    """
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated, IsWorkerProfile]
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        return order_repository.list_available()


class MyOrderListView(SessionMixin, generics.ListAPIView):
    """
    GET /api/orders/mine/

    Orders assigned to the caller (cancelled ones excluded), most recently
    assigned first.
    """
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated, IsWorkerProfile]
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        return order_repository.list_assigned_to(self.get_session().profile)


class ClaimOrderView(SessionMixin, APIView):
    """
    POST /api/orders/{id}/claim/

    409 when another worker claimed the order first.
    """
    permission_classes = [permissions.IsAuthenticated, IsWorkerProfile]
    throttle_classes = [OrderClaimThrottle]

    def post(self, request, pk):
        order = claim_order(pk, self.get_session().profile)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class ReleaseOrderView(SessionMixin, APIView):
    """
    POST /api/orders/{id}/release/

    Only the assignee can release, and only while the order is in progress.
    """
    permission_classes = [permissions.IsAuthenticated, IsWorkerProfile]
    throttle_classes = [OrderClaimThrottle]

    def post(self, request, pk):
        order = release_order(pk, self.get_session().profile)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderProgressView(SessionMixin, APIView):
    """
    GET  /api/orders/{id}/progress/  - progress log, most recent first
    POST /api/orders/{id}/progress/  - {"status": "completed", "notes": "..."}

    Reading is open to admins and the assignee; writing to the assignee only.
    """
    permission_classes = [permissions.IsAuthenticated, IsAdminOrAssignee]

    def get(self, request, pk):
        order = order_repository.get(pk)
        self.check_object_permissions(request, order)

        entries = order_repository.list_progress(order.pk)
        serializer = ProgressEntrySerializer(entries, many=True)

        logger.debug(f"Retrieved progress for order {pk} by {request.user.email}")
        return Response({
            'order_id': str(order.pk),
            'count': len(serializer.data),
            'entries': serializer.data,
        }, status=status.HTTP_200_OK)

    def post(self, request, pk):
        serializer = ProgressCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order, entry = record_progress(
            pk,
            self.get_session().profile,
            serializer.validated_data['status'],
            serializer.validated_data['notes'],
        )

        return Response({
            'order': OrderSerializer(order).data,
            'entry': ProgressEntrySerializer(entry).data,
        }, status=status.HTTP_201_CREATED)
