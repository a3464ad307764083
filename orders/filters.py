import django_filters
from .models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Order.Status.choices)
    unassigned = django_filters.BooleanFilter(field_name='assigned_to', lookup_expr='isnull')

    delivery_from = django_filters.DateFilter(field_name='delivery_date', lookup_expr='gte')  # >=
    delivery_to = django_filters.DateFilter(field_name='delivery_date', lookup_expr='lte')  # <=

    class Meta:
        model = Order
        fields = ['status', 'assigned_to', 'created_by', 'is_paid', 'payment_method']
