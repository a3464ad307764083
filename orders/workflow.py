"""
Claim / progress workflow.

The only state-transition logic of the application. Every function takes the
caller's Profile explicitly and returns the updated Order. Concurrency between
workers is arbitrated by the database: claim and release are single
conditional UPDATEs through ``OrderRepository.update_if``.

Status lifecycle::

    pending -> in_progress -> completed -> delivered
    pending | in_progress -> cancelled
    in_progress -> pending            (release)

``delivered`` and ``cancelled`` are terminal.
"""
import logging

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import ValidationError

from .exceptions import (
    AlreadyAssigned,
    Forbidden,
    InvalidTransition,
    NotAssignedToCaller,
    NotFound,
)
from .models import Order
from .repository import backend_errors, order_repository

logger = logging.getLogger(__name__)

PROGRESS_STATUSES = Order.ASSIGNED_STATUSES

UNASSIGNED_STATUSES = (Order.Status.PENDING.value, Order.Status.CANCELLED.value)


def open_statuses():
    """Statuses an order can still leave."""
    return [s for s in Order.Status.values if s not in Order.TERMINAL_STATUSES]


def claim_order(order_id, worker, repository=order_repository):
    """
    Assign a pending, unassigned order to ``worker``.

    Raises:
        NotFound: the order does not exist.
        AlreadyAssigned: another worker got it first or it is not pending.
    """
    order = repository.update_if(
        order_id,
        expected={'status': Order.Status.PENDING, 'assigned_to__isnull': True},
        patch={
            'assigned_to': worker,
            'assigned_at': timezone.now(),
            'status': Order.Status.IN_PROGRESS,
        },
    )
    if order is None:
        if not repository.exists(order_id):
            raise NotFound()
        logger.warning(f"Worker {worker.email} lost the claim on order {order_id}")
        raise AlreadyAssigned()

    logger.info(f"Order {order.id} claimed by {worker.email}")
    return order


def release_order(order_id, caller, repository=order_repository):
    """
    Give an in-progress order back to the pending pool.

    Only the current assignee can release, and only while the order is
    ``in_progress``.

    Raises:
        NotFound: the order does not exist.
        InvalidTransition: the caller holds the order but it is past
            ``in_progress``.
        NotAssignedToCaller: the order is not assigned to the caller.
    """
    order = repository.update_if(
        order_id,
        expected={'assigned_to': caller, 'status': Order.Status.IN_PROGRESS},
        patch={
            'assigned_to': None,
            'assigned_at': None,
            'status': Order.Status.PENDING,
        },
    )
    if order is None:
        current = repository.get(order_id)
        if current.assigned_to_id == caller.pk:
            raise InvalidTransition(
                _("Only orders in progress can be released (current status: %(status)s).")
                % {'status': current.status}
            )
        logger.warning(f"{caller.email} attempted to release order {order_id} not assigned to them")
        raise NotAssignedToCaller()

    logger.info(f"Order {order.id} released by {caller.email}")
    return order


def validate_progress(new_status, notes):
    """Input checks for ``record_progress``; raise before any write."""
    errors = {}
    if not notes or not str(notes).strip():
        errors['notes'] = [_("Progress notes are required.")]
    if new_status not in PROGRESS_STATUSES:
        errors['status'] = [
            _("Status must be one of: %(choices)s.") % {'choices': ', '.join(PROGRESS_STATUSES)}
        ]
    if errors:
        raise ValidationError(errors)
    return new_status, str(notes).strip()


def record_progress(order_id, caller, new_status, notes, repository=order_repository):
    """
    Append a progress entry and move the order to ``new_status``.

    The entry and the status change are written in one transaction; the
    status UPDATE is conditioned on the caller still being the assignee and the
    order still being open, so a concurrent release or admin close rolls the
    entry back instead of leaving an orphan note.

    Returns:
        tuple: (Order, ProgressEntry)

    Raises:
        ValidationError: blank notes or a status workers cannot set.
        NotFound: the order does not exist.
        Forbidden: the order is not assigned to the caller.
        InvalidTransition: the order is already terminal, or became terminal
            before the write.
    """
    new_status, notes = validate_progress(new_status, notes)

    order = repository.get(order_id)
    if order.assigned_to_id != caller.pk:
        logger.warning(f"{caller.email} attempted to record progress on order {order_id} without being assigned")
        raise Forbidden()
    if order.is_terminal:
        raise InvalidTransition(
            _("Order is already %(status)s and cannot change.") % {'status': order.status}
        )

    with backend_errors('record_progress'), transaction.atomic():
        entry = repository.append_progress(order, caller, new_status, notes)
        updated = repository.update_if(
            order_id,
            expected={'assigned_to': caller, 'status__in': open_statuses()},
            patch={'status': new_status},
        )
        if updated is None:
            transaction.set_rollback(True)

    if updated is None:
        current = repository.get(order_id)
        if current.is_terminal:
            logger.warning(f"Order {order_id} became {current.status} while {caller.email} recorded progress")
            raise InvalidTransition(
                _("Order is already %(status)s and cannot change.") % {'status': current.status}
            )
        logger.warning(f"Order {order_id} was released while {caller.email} recorded progress")
        raise Forbidden()

    logger.info(f"Progress recorded on order {order_id} by {caller.email}: {new_status}")
    return updated, entry


def set_order_status(order_id, new_status, repository=order_repository):
    """
    Admin status override.

    Unconditional apart from two rules: a terminal order keeps its status,
    and moving to ``pending`` or ``cancelled`` clears the assignee.

    Raises:
        ValidationError: unknown status.
        NotFound: the order does not exist.
        InvalidTransition: the order is terminal.
    """
    if new_status not in Order.Status.values:
        raise ValidationError({'status': [_("Unknown status: %(status)s.") % {'status': new_status}]})

    order = repository.get(order_id)
    if order.is_terminal and new_status != order.status:
        raise InvalidTransition(
            _("Order is already %(status)s and cannot change.") % {'status': order.status}
        )

    patch = {'status': new_status}
    if new_status in UNASSIGNED_STATUSES:
        patch.update(assigned_to=None, assigned_at=None)

    allowed = open_statuses()
    if order.is_terminal:
        allowed.append(order.status)

    updated = repository.update_if(
        order_id,
        expected={'status__in': allowed},
        patch=patch,
    )
    if updated is None:
        # Se volvió terminal entre la lectura y la escritura.
        current = repository.get(order_id)
        raise InvalidTransition(
            _("Order is already %(status)s and cannot change.") % {'status': current.status}
        )

    logger.info(f"Order {order_id} status set from {order.status} to {new_status}")
    return updated
