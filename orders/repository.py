"""
Order repository.

Read/write access to the ``orders`` table and the append-only
``order_progress`` log. Every conditional write goes through ``update_if`` so
the compare-and-swap is a single ``UPDATE ... WHERE`` statement and never a
read followed by a write.
"""
import logging
import uuid
from contextlib import contextmanager

from django.db import DatabaseError
from django.utils import timezone

from .exceptions import BackendError, NotFound
from .models import Order, ProgressEntry, compute_total
from .realtime.publisher import publish_order_change

logger = logging.getLogger(__name__)


@contextmanager
def backend_errors(operation):
    """Re-raise anything the database reports as ``BackendError``."""
    try:
        yield
    except DatabaseError as exc:
        logger.error(f"Backend error during {operation}: {exc}", exc_info=True)
        raise BackendError() from exc


def order_pk(order_id):
    """Order ids are UUIDs; anything else cannot match a row."""
    if isinstance(order_id, uuid.UUID):
        return order_id
    try:
        return uuid.UUID(str(order_id))
    except ValueError:
        raise NotFound()


class OrderRepository:

    def queryset(self):
        """Orders with creator and assignee identities joined."""
        return Order.objects.select_related('created_by', 'assigned_to')

    def create(self, draft, creator):
        """
        Insert a new pending order.

        Args:
            draft (dict): validated order data; ``products`` is a list of
                ``{"product", "quantity", "price"}`` dicts.
            creator (Profile): the admin creating the order.
        """
        products = [
            {
                'product': item['product'],
                'quantity': int(item['quantity']),
                'price': str(item['price']),
            }
            for item in draft['products']
        ]
        with backend_errors('create'):
            order = Order.objects.create(
                customer_name=draft['customer_name'],
                customer_phone=draft.get('customer_phone') or None,
                customer_address=draft.get('customer_address') or None,
                products=products,
                delivery_date=draft['delivery_date'],
                is_paid=draft.get('is_paid', False),
                payment_method=draft['payment_method'],
                total_amount=compute_total(products),
                status=Order.Status.PENDING,
                notes=draft.get('notes') or None,
                created_by=creator,
            )
        return order

    def get(self, order_id):
        pk = order_pk(order_id)
        with backend_errors('get'):
            try:
                return self.queryset().get(pk=pk)
            except Order.DoesNotExist:
                raise NotFound()

    def exists(self, order_id):
        with backend_errors('exists'):
            return Order.objects.filter(pk=order_pk(order_id)).exists()

    def list(self, filters=None):
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by('-created_at')

    def list_available(self):
        return self.queryset().filter(
            status=Order.Status.PENDING,
            assigned_to__isnull=True
        ).order_by('-created_at')

    def list_assigned_to(self, worker):
        return self.queryset().filter(
            assigned_to=worker
        ).exclude(
            status=Order.Status.CANCELLED
        ).order_by('-assigned_at')

    def update_if(self, order_id, expected, patch):
        """
        Compare-and-swap.

        Applies ``patch`` only to the row whose current values match
        ``expected``, in one UPDATE statement.

        Returns:
            Order | None: the updated order, or None when no row matched.
        """
        pk = order_pk(order_id)
        values = dict(patch, updated_at=timezone.now())
        with backend_errors('update_if'):
            rows = Order.objects.filter(pk=pk, **expected).update(**values)
            if rows == 0:
                return None
            order = self.queryset().get(pk=pk)

        publish_order_change(order, 'UPDATE')
        return order

    def append_progress(self, order, worker, status, notes):
        with backend_errors('append_progress'):
            return ProgressEntry.objects.create(
                order=order,
                worker=worker,
                status=status,
                notes=notes,
            )

    def list_progress(self, order_id):
        """Progress entries for an order, most recent first."""
        return ProgressEntry.objects.filter(
            order_id=order_pk(order_id)
        ).select_related('worker').order_by('-created_at', '-id')


order_repository = OrderRepository()
