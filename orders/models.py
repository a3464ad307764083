import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from .exceptions import Forbidden

CENTS = Decimal('0.01')


def compute_total(items):
    """Sum of quantity × price over the line items, rounded to cents."""
    total = sum(
        (Decimal(str(item['quantity'])) * Decimal(str(item['price'])) for item in items),
        Decimal('0'),
    )
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        IN_PROGRESS = 'in_progress', _('In Progress')
        COMPLETED = 'completed', _('Completed')
        DELIVERED = 'delivered', _('Delivered')
        CANCELLED = 'cancelled', _('Cancelled')

    class PaymentMethod(models.TextChoices):
        CASH = 'cash', _('Cash')
        CREDIT = 'credit', _('Credit')
        DOLLARS = 'dollars', _('Dollars')
        CHECK = 'check', _('Check')
        TRANSFER = 'transfer', _('Bank Transfer')

    TERMINAL_STATUSES = (Status.DELIVERED.value, Status.CANCELLED.value)
    ASSIGNED_STATUSES = (Status.IN_PROGRESS.value, Status.COMPLETED.value, Status.DELIVERED.value)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer_name = models.CharField(
        max_length=200,
        db_column='nombre_cliente',
        verbose_name=_('Customer Name')
    )
    customer_phone = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        verbose_name=_('Customer Phone')
    )
    customer_address = models.CharField(
        max_length=300,
        null=True,
        blank=True,
        verbose_name=_('Customer Address')
    )
    products = models.JSONField(
        default=list,
        db_column='lista_productos',
        verbose_name=_('Products')
    )
    delivery_date = models.DateField(
        db_column='fecha_entrega',
        verbose_name=_('Delivery Date')
    )
    is_paid = models.BooleanField(
        default=False,
        db_column='esta_pagado',
        verbose_name=_('Paid')
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        db_column='metodo_pago',
        verbose_name=_('Payment Method')
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        db_column='monto_total',
        verbose_name=_('Total Amount')
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        verbose_name=_('Status')
    )
    notes = models.TextField(
        null=True,
        blank=True,
        db_column='notas',
        verbose_name=_('Notes')
    )
    created_by = models.ForeignKey(
        'users.Profile',
        on_delete=models.PROTECT,
        related_name='created_orders',
        verbose_name=_('Created By')
    )
    assigned_to = models.ForeignKey(
        'users.Profile',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assigned_orders',
        verbose_name=_('Assigned To')
    )
    assigned_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Assigned At')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name=_('Updated At')
    )

    class Meta:
        db_table = 'orders'
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'assigned_to'], name='order_available_idx'),
            models.Index(fields=['assigned_to', 'assigned_at'], name='order_assignee_idx'),
        ]
        constraints = [
            # Solo in_progress/completed/delivered pueden tener asignado.
            models.CheckConstraint(
                condition=Q(assigned_to__isnull=True) | Q(status__in=['in_progress', 'completed', 'delivered']),
                name='order_assignee_status',
            ),
        ]

    def __str__(self):
        return f"Order {self.pk} - {self.customer_name} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES


class ProgressEntryQuerySet(models.QuerySet):
    """Append-only: bulk updates and deletes are refused."""

    def update(self, **kwargs):
        raise Forbidden(_("Progress entries cannot be modified."))

    def delete(self):
        raise Forbidden(_("Progress entries cannot be deleted."))


class ProgressEntry(models.Model):
    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name='progress_entries',
        verbose_name=_('Order')
    )
    worker = models.ForeignKey(
        'users.Profile',
        on_delete=models.PROTECT,
        related_name='progress_entries',
        verbose_name=_('Worker')
    )
    status = models.CharField(
        max_length=20,
        choices=Order.Status.choices,
        verbose_name=_('Status')
    )
    notes = models.TextField(
        verbose_name=_('Notes')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_('Created At')
    )

    objects = ProgressEntryQuerySet.as_manager()

    class Meta:
        db_table = 'order_progress'
        verbose_name = _('Progress Entry')
        verbose_name_plural = _('Progress Entries')
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Progress #{self.pk} - Order {self.order_id} → {self.status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise Forbidden(_("Progress entries cannot be modified."))
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise Forbidden(_("Progress entries cannot be deleted."))
