from django.contrib import admin
from .models import Order, ProgressEntry


class ProgressEntryInline(admin.TabularInline):
    model = ProgressEntry
    extra = 0
    can_delete = False
    fields = ['created_at', 'worker', 'status', 'notes']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer_name', 'status', 'assigned_to', 'total_amount', 'is_paid', 'delivery_date', 'created_at']
    list_filter = ['status', 'is_paid', 'payment_method', 'delivery_date']
    search_fields = ['customer_name', 'customer_phone', 'created_by__email', 'assigned_to__email']
    readonly_fields = ['total_amount', 'created_at', 'updated_at', 'assigned_at']
    inlines = [ProgressEntryInline]

    fieldsets = (
        ('Customer', {
            'fields': ('customer_name', 'customer_phone', 'customer_address')
        }),
        ('Order Details', {
            'fields': ('products', 'total_amount', 'payment_method', 'is_paid', 'delivery_date', 'notes')
        }),
        ('Workflow', {
            'fields': ('status', 'created_by', 'assigned_to', 'assigned_at')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ProgressEntry)
class ProgressEntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'worker', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['order__customer_name', 'worker__email', 'notes']

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
