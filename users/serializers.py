from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .constants import MIN_FULL_NAME_LENGTH
from .models import Profile
from .session import resolve_session
from .tokens import email_verification_token
from .validators import validate_password_complexity

User = get_user_model()


def _check_password_rules(value):
    try:
        validate_password_complexity(value)
    except DjangoValidationError as exc:
        raise serializers.ValidationError(exc.messages)
    return value


def _user_from_uid(uidb64):
    try:
        uid = force_str(urlsafe_base64_decode(uidb64))
        return User.objects.get(pk=uid)
    except (TypeError, ValueError, OverflowError, User.DoesNotExist):
        return None


class ProfileSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source='pk', read_only=True)
    email_verified = serializers.BooleanField(source='user.email_verified', read_only=True)

    class Meta:
        model = Profile
        fields = [
            'id',
            'email',
            'full_name',
            'role',
            'email_verified',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['email', 'role', 'is_active', 'created_at', 'updated_at']

    def validate_full_name(self, value):
        value = value.strip()
        if len(value) < MIN_FULL_NAME_LENGTH:
            raise serializers.ValidationError(
                _("The name must be at least %(min)d characters long.") % {'min': MIN_FULL_NAME_LENGTH}
            )
        return value


class ProfileSummarySerializer(serializers.ModelSerializer):
    """Identidad mínima embebida en pedidos y entradas de progreso."""

    id = serializers.IntegerField(source='pk', read_only=True)

    class Meta:
        model = Profile
        fields = ['id', 'full_name', 'email']


class UserRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ['email', 'password', 'confirm_password', 'full_name']
        extra_kwargs = {'full_name': {'required': True}}

    def validate_password(self, value):
        return _check_password_rules(value)

    def validate_full_name(self, value):
        value = value.strip()
        if len(value) < MIN_FULL_NAME_LENGTH:
            raise serializers.ValidationError(
                _("The name must be at least %(min)d characters long.") % {'min': MIN_FULL_NAME_LENGTH}
            )
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': _("Passwords do not match.")})
        return attrs

    def create(self, validated_data):
        # El Profile lo crea la señal post_save de User
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            full_name=validated_data['full_name'],
        )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    default_error_messages = {
        'no_active_account': _("Invalid email or password."),
    }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['email_verified'] = user.email_verified
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        session = resolve_session(self.user)
        data['role'] = session.role
        data['full_name'] = session.profile.full_name
        data['email_verified'] = session.email_verified
        return data


class EmailVerificationSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()

    def validate(self, attrs):
        user = _user_from_uid(attrs['uid'])
        if user is None or not email_verification_token.check_token(user, attrs['token']):
            raise serializers.ValidationError(_("Invalid or expired verification link."))
        attrs['user'] = user
        return attrs

    def save(self, **kwargs):
        user = self.validated_data['user']
        user.email_verified = True
        user.save(update_fields=['email_verified'])
        return user


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError(_("The current password is incorrect."))
        return value

    def validate_new_password(self, value):
        return _check_password_rules(value)

    def save(self, **kwargs):
        user = self.context['request'].user
        user.set_password(self.validated_data['new_password'])
        user.save(update_fields=['password'])
        return user


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate_new_password(self, value):
        return _check_password_rules(value)

    def validate(self, attrs):
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': _("Passwords do not match.")})

        user = _user_from_uid(attrs['uid'])
        if user is None or not default_token_generator.check_token(user, attrs['token']):
            raise serializers.ValidationError(_("Invalid or expired token."))
        attrs['user'] = user
        return attrs

    def save(self, **kwargs):
        user = self.validated_data['user']
        user.set_password(self.validated_data['new_password'])
        user.save(update_fields=['password'])
        return user
