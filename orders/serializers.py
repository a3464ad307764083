from decimal import Decimal

from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from users.serializers import ProfileSummarySerializer
from .models import Order, ProgressEntry


class ProductLineSerializer(serializers.Serializer):
    product = serializers.CharField(max_length=200)
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01')
    )

    def validate_product(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError(_("The product name is required."))
        return value


class OrderSerializer(serializers.ModelSerializer):
    """Read representation; also the ``record`` of change events."""

    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    payment_method_display = serializers.CharField(
        source='get_payment_method_display',
        read_only=True
    )
    creator = ProfileSummarySerializer(source='created_by', read_only=True)
    assignee = ProfileSummarySerializer(source='assigned_to', read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'customer_name',
            'customer_phone',
            'customer_address',
            'products',
            'delivery_date',
            'is_paid',
            'payment_method',
            'payment_method_display',
            'total_amount',
            'status',
            'status_display',
            'notes',
            'created_by',
            'creator',
            'assigned_to',
            'assignee',
            'assigned_at',
            'created_at',
            'updated_at',
        ]


class OrderCreateSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=200, min_length=2)
    customer_phone = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    customer_address = serializers.CharField(max_length=300, required=False, allow_blank=True, allow_null=True)
    delivery_date = serializers.DateField()
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)
    is_paid = serializers.BooleanField()
    products = ProductLineSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    default_error_messages = {
        'empty_products': _("At least one product is required."),
    }

    def validate_customer_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError(_("The customer name is required."))
        return value

    def validate_products(self, value):
        if not value:
            self.fail('empty_products')
        return value


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class ProgressEntrySerializer(serializers.ModelSerializer):
    worker = ProfileSummarySerializer(read_only=True)
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )

    class Meta:
        model = ProgressEntry
        fields = ['id', 'order', 'worker', 'status', 'status_display', 'notes', 'created_at']


class ProgressCreateSerializer(serializers.Serializer):
    """
    Shape only. Status and notes rules are enforced by
    ``workflow.validate_progress`` so they also apply outside the API.
    """
    status = serializers.CharField()
    notes = serializers.CharField(allow_blank=True, trim_whitespace=False)
