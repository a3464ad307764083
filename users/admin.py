from django.contrib import admin
from .models import User, Profile


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for User model."""

    list_display = ['id', 'email', 'full_name', 'email_verified', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['email_verified', 'is_active', 'is_staff', 'date_joined']
    search_fields = ['email', 'full_name']
    readonly_fields = ['date_joined']
    ordering = ['-date_joined']

    fieldsets = (
        ('Account Info', {
            'fields': ('email', 'password', 'email_verified')
        }),
        ('Personal Info', {
            'fields': ('full_name',)
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser')
        }),
        ('Timestamps', {
            'fields': ('date_joined',)
        }),
    )


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Admin interface for Profile model. Roles are assigned here."""

    list_display = ['user', 'email', 'full_name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'full_name']
    readonly_fields = ['created_at', 'updated_at', 'deactivated_at']

    fieldsets = (
        ('Identity', {
            'fields': ('user', 'email', 'full_name')
        }),
        ('Role', {
            'fields': ('role',)
        }),
        ('Status', {
            'fields': ('is_active', 'deactivated_at')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )
