from django.urls import path
from .views import (
    OrderCreateView,
    OrderListView,
    OrderDetailView,
    OrderStatusUpdateView,
    AvailableOrderListView,
    MyOrderListView,
    ClaimOrderView,
    ReleaseOrderView,
    OrderProgressView,
)

urlpatterns = [
    path('', OrderCreateView.as_view(), name='order-create'),
    path('list/', OrderListView.as_view(), name='order-list'),
    path('available/', AvailableOrderListView.as_view(), name='order-available'),
    path('mine/', MyOrderListView.as_view(), name='order-mine'),
    path('<uuid:pk>/', OrderDetailView.as_view(), name='order-detail'),
    path('<uuid:pk>/status/', OrderStatusUpdateView.as_view(), name='order-status-update'),
    path('<uuid:pk>/claim/', ClaimOrderView.as_view(), name='order-claim'),
    path('<uuid:pk>/release/', ReleaseOrderView.as_view(), name='order-release'),
    path('<uuid:pk>/progress/', OrderProgressView.as_view(), name='order-progress'),
]
