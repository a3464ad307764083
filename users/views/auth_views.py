"""
Authentication views.

Handles registration, JWT token generation, email verification and password
management.
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from django.utils.translation import gettext_lazy as _
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView

from ..serializers import (
    UserRegistrationSerializer,
    CustomTokenObtainPairSerializer,
    EmailVerificationSerializer,
    ChangePasswordSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
)
from ..tokens import email_verification_token

User = get_user_model()
logger = logging.getLogger(__name__)


class RegisterView(generics.CreateAPIView):
    """
    POST /api/auth/register/

    Public endpoint for user registration.
    Every new account starts with the ``worker`` role; admins are promoted
    from the Django admin.
    """
    queryset = User.objects.all()
    permission_classes = [permissions.AllowAny]
    serializer_class = UserRegistrationSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"User registered: {user.email}")

        data = {
            'email': user.email,
            'full_name': user.full_name,
            'detail': _("Account created. Check your email to verify your address."),
        }
        # TODO: enviar el enlace de verificación por email; mientras tanto solo en DEBUG
        if settings.DEBUG:
            data['dev_uid'] = urlsafe_base64_encode(force_bytes(user.pk))
            data['dev_token'] = email_verification_token.make_token(user)

        return Response(data, status=status.HTTP_201_CREATED)


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    POST /api/auth/login/

    Public endpoint for obtaining JWT access/refresh tokens.
    The response also carries the caller's role and display name.
    """
    serializer_class = CustomTokenObtainPairSerializer


class VerifyEmailView(generics.GenericAPIView):
    """
    POST /api/auth/verify-email/

    Marks the account email as verified given the uid/token pair.
    """
    serializer_class = EmailVerificationSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Email verified for {user.email}")

        return Response({
            "detail": _("Email verified successfully.")
        }, status=status.HTTP_200_OK)


class ChangePasswordView(generics.GenericAPIView):
    """
    POST /api/auth/change-password/

    Requires the current password.
    """
    serializer_class = ChangePasswordSerializer
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Password changed for {request.user.email}")

        return Response({
            "detail": _("Password updated successfully.")
        }, status=status.HTTP_200_OK)


class PasswordResetRequestView(generics.GenericAPIView):
    """
    POST /api/auth/password-reset/

    Always answers with the same message so the endpoint cannot be used to
    discover registered emails.
    """
    serializer_class = PasswordResetRequestSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email']
        data = {
            "detail": _("If the email exists you will receive instructions to reset your password.")
        }

        try:
            user = User.objects.get(email__iexact=email, is_active=True)
        except User.DoesNotExist:
            logger.info(f"Password reset requested for unknown email {email}")
            return Response(data, status=status.HTTP_200_OK)

        # TODO: enviar uid/token por email; mientras tanto solo en DEBUG
        if settings.DEBUG:
            data['dev_uid'] = urlsafe_base64_encode(force_bytes(user.pk))
            data['dev_token'] = default_token_generator.make_token(user)

        logger.info(f"Password reset requested for {user.email}")
        return Response(data, status=status.HTTP_200_OK)


class PasswordResetConfirmView(generics.GenericAPIView):
    """
    POST /api/auth/password-reset-confirm/
    """
    serializer_class = PasswordResetConfirmSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Password reset completed for {user.email}")

        return Response({
            "detail": _("Password reset successfully.")
        }, status=status.HTTP_200_OK)
