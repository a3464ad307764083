import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('users', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('customer_name', models.CharField(db_column='nombre_cliente', max_length=200, verbose_name='Customer Name')),
                ('customer_phone', models.CharField(blank=True, max_length=50, null=True, verbose_name='Customer Phone')),
                ('customer_address', models.CharField(blank=True, max_length=300, null=True, verbose_name='Customer Address')),
                ('products', models.JSONField(db_column='lista_productos', default=list, verbose_name='Products')),
                ('delivery_date', models.DateField(db_column='fecha_entrega', verbose_name='Delivery Date')),
                ('is_paid', models.BooleanField(db_column='esta_pagado', default=False, verbose_name='Paid')),
                ('payment_method', models.CharField(choices=[('cash', 'Cash'), ('credit', 'Credit'), ('dollars', 'Dollars'), ('check', 'Check'), ('transfer', 'Bank Transfer')], db_column='metodo_pago', max_length=20, verbose_name='Payment Method')),
                ('total_amount', models.DecimalField(db_column='monto_total', decimal_places=2, max_digits=12, verbose_name='Total Amount')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('completed', 'Completed'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='Status')),
                ('notes', models.TextField(blank=True, db_column='notas', null=True, verbose_name='Notes')),
                ('assigned_at', models.DateTimeField(blank=True, null=True, verbose_name='Assigned At')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='assigned_orders', to='users.profile', verbose_name='Assigned To')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='created_orders', to='users.profile', verbose_name='Created By')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'db_table': 'orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'assigned_to'], name='order_available_idx'),
                    models.Index(fields=['assigned_to', 'assigned_at'], name='order_assignee_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('assigned_to__isnull', True), ('status__in', ['in_progress', 'completed', 'delivered']), _connector='OR'),
                        name='order_assignee_status',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProgressEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('completed', 'Completed'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], max_length=20, verbose_name='Status')),
                ('notes', models.TextField(verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='progress_entries', to='orders.order', verbose_name='Order')),
                ('worker', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='progress_entries', to='users.profile', verbose_name='Worker')),
            ],
            options={
                'verbose_name': 'Progress Entry',
                'verbose_name_plural': 'Progress Entries',
                'db_table': 'order_progress',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
