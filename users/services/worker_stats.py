"""
Worker activity statistics.

Aggregates the orders assigned to a worker and the progress entries they have
written into the summary shown on the worker's profile page.
"""
import logging

from django.db.models import Count, Q

from orders.models import Order, ProgressEntry

logger = logging.getLogger(__name__)

FINISHED_STATUSES = (Order.Status.COMPLETED, Order.Status.DELIVERED)


def get_worker_stats(profile):
    """
    Returns:
        dict with ``total_assigned``, ``completed``, ``in_progress``,
        ``total_updates`` and ``completion_rate`` (integer percent).
    """
    order_metrics = Order.objects.filter(assigned_to=profile).aggregate(
        total_assigned=Count('id'),
        completed=Count('id', filter=Q(status__in=FINISHED_STATUSES)),
        in_progress=Count('id', filter=Q(status=Order.Status.IN_PROGRESS)),
    )
    total_updates = ProgressEntry.objects.filter(worker=profile).count()

    total_assigned = order_metrics['total_assigned'] or 0
    completed = order_metrics['completed'] or 0

    completion_rate = round(completed / total_assigned * 100) if total_assigned else 0

    logger.debug(f"Stats computed for worker {profile.email}")
    return {
        'total_assigned': total_assigned,
        'completed': completed,
        'in_progress': order_metrics['in_progress'] or 0,
        'total_updates': total_updates,
        'completion_rate': completion_rate,
    }
