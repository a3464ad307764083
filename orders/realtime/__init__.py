"""
Order change feed.

    - publisher: broadcasts order changes to the ``orders`` channel group
    - feed: idempotent client-side view built from those events
"""

from .feed import OrderFeed
from .publisher import ORDERS_GROUP, build_change_event, publish_order_change

__all__ = [
    'OrderFeed',
    'ORDERS_GROUP',
    'build_change_event',
    'publish_order_change',
]
