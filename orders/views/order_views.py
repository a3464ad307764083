"""
Order views.

Admin-side order management: creation, listing, detail and the status
override.
"""
import logging
from rest_framework import filters, generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from users.permissions import IsAdminProfile
from users.session import SessionMixin
from ..filters import OrderFilter
from ..pagination import StandardResultsSetPagination
from ..permissions import IsAdminOrAssignee
from ..repository import order_repository
from ..serializers import (
    OrderSerializer,
    OrderCreateSerializer,
    OrderStatusSerializer,
)
from ..workflow import set_order_status

logger = logging.getLogger(__name__)


class OrderCreateView(SessionMixin, generics.CreateAPIView):
    """
    POST /api/orders/

    Create a new order. Admins only.
    The total is computed from the line items; the order starts ``pending``.
    """
    serializer_class = OrderCreateSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminProfile]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        creator = self.get_session().profile
        order = order_repository.create(serializer.validated_data, creator)
        logger.info(
            f"Order {order.id} created by {creator.email} "
            f"for {order.customer_name} (total {order.total_amount})"
        )

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderListView(SessionMixin, generics.ListAPIView):
    """
    GET /api/orders/list/?status=pending

    List every order with creator and assignee. Admins only.

    Query params:
    - status, assigned_to, created_by, is_paid, payment_method, unassigned
    - delivery_from / delivery_to: delivery date range
    - search: customer name, phone or address
    - page / page_size
    """
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminProfile]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = OrderFilter
    search_fields = ['customer_name', 'customer_phone', 'customer_address']

    def get_queryset(self):
        return order_repository.list()


class OrderDetailView(SessionMixin, generics.RetrieveAPIView):
    """
    GET /api/orders/{id}/

    Accessible by admins and by the worker the order is assigned to.
    """
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrAssignee]

    def get_queryset(self):
        return order_repository.queryset()


class OrderStatusUpdateView(SessionMixin, APIView):
    """
    PATCH /api/orders/{id}/status/

    Admin status override. Terminal orders keep their status; moving to
    ``pending`` or ``cancelled`` clears the assignee.
    """
    permission_classes = [permissions.IsAuthenticated, IsAdminProfile]

    def patch(self, request, pk):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = set_order_status(pk, serializer.validated_data['status'])
        logger.info(f"Order {order.id} set to {order.status} by {request.user.email}")

        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
