from django.urls import path
from .views import (
    ManageProfileView,
    WorkerStatsView,
    DeactivateAccountView,
    ReactivateAccountView,
    WorkerListView,
)

urlpatterns = [
    path('me/', ManageProfileView.as_view(), name='me'),
    path('me/stats/', WorkerStatsView.as_view(), name='me-stats'),
    path('me/deactivate/', DeactivateAccountView.as_view(), name='me-deactivate'),
    path('workers/', WorkerListView.as_view(), name='worker-list'),
    path('<int:pk>/reactivate/', ReactivateAccountView.as_view(), name='profile-reactivate'),
]
