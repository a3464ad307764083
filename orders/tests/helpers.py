from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model

from users.models import Profile
from orders.repository import order_repository

User = get_user_model()

PASSWORD = 'Testpass123'


def create_profile(email, role=Profile.Role.WORKER, full_name='Usuario Test'):
    """Crea usuario + perfil (el perfil lo crea la señal) con el rol pedido."""
    user = User.objects.create_user(email=email, password=PASSWORD, full_name=full_name)
    profile = Profile.objects.get(user=user)
    if profile.role != role:
        profile.role = role
        profile.save(update_fields=['role', 'updated_at'])
    return profile


def order_draft(**overrides):
    draft = {
        'customer_name': 'María López',
        'customer_phone': '+57 300 123 4567',
        'customer_address': 'Calle 10 # 5-20',
        'delivery_date': date.today() + timedelta(days=2),
        'payment_method': 'cash',
        'is_paid': False,
        'products': [
            {'product': 'Torta de chocolate', 'quantity': 2, 'price': Decimal('10.00')},
            {'product': 'Galletas', 'quantity': 1, 'price': Decimal('5.00')},
        ],
        'notes': 'Entregar en portería',
    }
    draft.update(overrides)
    return draft


def create_order(creator, **overrides):
    return order_repository.create(order_draft(**overrides), creator)
