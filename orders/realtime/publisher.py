"""
Server side of the order change feed.

Every insert, update or delete on ``orders`` is broadcast to the channel-layer
group ``orders`` once the surrounding transaction commits. Rolled-back writes
never reach subscribers.
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

ORDERS_GROUP = 'orders'
EVENT_TYPES = ('INSERT', 'UPDATE', 'DELETE')


def build_change_event(order, event):
    from ..serializers import OrderSerializer

    if event not in EVENT_TYPES:
        raise ValueError(f"Unknown change event: {event}")

    return {
        'type': 'order.change',
        'event': event,
        'record': dict(OrderSerializer(order).data) if event != 'DELETE' else None,
        'old': {'id': str(order.pk)},
    }


def publish_order_change(order, event):
    """Queue a change event for the ``orders`` group on commit."""
    payload = build_change_event(order, event)

    def send():
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.debug("No channel layer configured; order change not broadcast")
            return
        async_to_sync(channel_layer.group_send)(ORDERS_GROUP, payload)
        logger.debug(f"Order {payload['old']['id']} {event} broadcast")

    # robust: un broker caído no debe convertir un commit exitoso en un 500
    transaction.on_commit(send, robust=True)
