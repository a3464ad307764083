from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.utils.translation import gettext_lazy as _
from .managers import CustomUserManager


class User(AbstractBaseUser, PermissionsMixin):
    """Auth identity. Login by email; application data lives in Profile."""

    email = models.EmailField(unique=True)
    full_name = models.CharField(_("Full Name"), max_length=150, blank=True)
    email_verified = models.BooleanField(_("Email Verified"), default=False)

    is_staff = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    def __str__(self):
        return self.email


class Profile(models.Model):
    class Role(models.TextChoices):
        ADMIN = 'admin', _('Administrator')
        WORKER = 'worker', _('Worker')

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='profile'
    )
    email = models.EmailField(_("Email"))
    full_name = models.CharField(_("Full Name"), max_length=150)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        default=Role.WORKER
    )
    is_active = models.BooleanField(_("Active"), default=True)
    deactivated_at = models.DateTimeField(_("Deactivated At"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _('Profile')
        verbose_name_plural = _('Profiles')
        ordering = ['full_name']

    def __str__(self):
        return f"{self.full_name} <{self.email}> ({self.role})"

    @property
    def id(self):
        return self.user_id

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_worker(self):
        return self.role == self.Role.WORKER
