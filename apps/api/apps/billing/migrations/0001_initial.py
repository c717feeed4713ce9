# Initial billing schema: bills and bill service lines

from decimal import Decimal

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


PAYMENT_STATUSES = [
    ('Unpaid', 'Unpaid'),
    ('Partially Paid', 'Partially Paid'),
    ('Paid', 'Paid'),
    ('Insurance Processing', 'Insurance Processing'),
]

PAYMENT_METHODS = [
    ('Cash', 'Cash'),
    ('Credit Card', 'Credit Card'),
    ('Insurance', 'Insurance'),
    ('Bank Transfer', 'Bank Transfer'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('clinical', '0001_initial'),
        ('reference', '0001_initial'),
    ]

    operations = [
        # Billing
        migrations.CreateModel(
            name='Billing',
            fields=[
                ('bill_id', models.AutoField(primary_key=True, serialize=False)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('paid_amount', models.DecimalField(blank=True, decimal_places=2, default=Decimal('0.00'), max_digits=10, null=True)),
                ('payment_status', models.CharField(blank=True, choices=PAYMENT_STATUSES, default='Unpaid', max_length=20, null=True)),
                ('payment_method', models.CharField(blank=True, choices=PAYMENT_METHODS, max_length=20, null=True)),
                ('payment_date', models.DateField(blank=True, null=True)),
                ('invoice_number', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bills', to='clinical.patient')),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bills', to='clinical.appointment')),
            ],
            options={
                'verbose_name': 'Bill',
                'verbose_name_plural': 'Bills',
                'db_table': 'billing',
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('payment_status__isnull', True), ('payment_status__in', ['Unpaid', 'Partially Paid', 'Paid', 'Insurance Processing']), _connector='OR'),
                        name='billing_payment_status_valid',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(('payment_method__isnull', True), ('payment_method__in', ['Cash', 'Credit Card', 'Insurance', 'Bank Transfer']), _connector='OR'),
                        name='billing_payment_method_valid',
                    ),
                ],
            },
        ),

        # BillService
        migrations.CreateModel(
            name='BillService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.IntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('discount_percentage', models.DecimalField(blank=True, decimal_places=2, default=Decimal('0.00'), max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))])),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('notes', models.TextField(blank=True, null=True)),
                ('bill', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='billing.billing')),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bill_lines', to='reference.service')),
            ],
            options={
                'verbose_name': 'Bill Service',
                'verbose_name_plural': 'Bill Services',
                'db_table': 'bill_services',
                'constraints': [
                    models.UniqueConstraint(fields=('bill', 'service'), name='unique_bill_service'),
                ],
            },
        ),
    ]
