"""
Users app views.

Organized into focused modules:
    - auth_views: Authentication (register, login, email verification, passwords)
    - user_views: Profile management, worker stats and admin actions
"""

# Authentication
from .auth_views import (
    RegisterView,
    CustomTokenObtainPairView,
    VerifyEmailView,
    ChangePasswordView,
    PasswordResetRequestView,
    PasswordResetConfirmView,
)

# Profiles
from .user_views import (
    ManageProfileView,
    WorkerStatsView,
    DeactivateAccountView,
    ReactivateAccountView,
    WorkerListView,
)

__all__ = [
    # Auth
    'RegisterView',
    'CustomTokenObtainPairView',
    'VerifyEmailView',
    'ChangePasswordView',
    'PasswordResetRequestView',
    'PasswordResetConfirmView',
    # Profiles
    'ManageProfileView',
    'WorkerStatsView',
    'DeactivateAccountView',
    'ReactivateAccountView',
    'WorkerListView',
]
