"""
Orders app views.

Organized into focused modules:
    - order_views: Admin order creation, listing, detail and status override
    - worker_views: Available/assigned lists, claim, release and progress
"""

# Order Management
from .order_views import (
    OrderCreateView,
    OrderListView,
    OrderDetailView,
    OrderStatusUpdateView,
)

# Worker workflow
from .worker_views import (
    AvailableOrderListView,
    MyOrderListView,
    ClaimOrderView,
    ReleaseOrderView,
    OrderProgressView,
)

__all__ = [
    # Orders
    'OrderCreateView',
    'OrderListView',
    'OrderDetailView',
    'OrderStatusUpdateView',
    # Workers
    'AvailableOrderListView',
    'MyOrderListView',
    'ClaimOrderView',
    'ReleaseOrderView',
    'OrderProgressView',
]
