"""
Billing models: bills and their service lines

A bill belongs to a patient (CASCADE) and optionally to the appointment it
was raised for (SET NULL). Service lines reference the service catalogue
with RESTRICT semantics.
"""
from decimal import ROUND_HALF_UP, Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import IntegrityModel

CENTS = Decimal('0.01')


# ============================================================================
# Enums
# ============================================================================

class PaymentStatusChoices(models.TextChoices):
    """Payment status of a bill"""
    UNPAID = 'Unpaid', 'Unpaid'
    PARTIALLY_PAID = 'Partially Paid', 'Partially Paid'
    PAID = 'Paid', 'Paid'
    INSURANCE_PROCESSING = 'Insurance Processing', 'Insurance Processing'


class PaymentMethodChoices(models.TextChoices):
    CASH = 'Cash', 'Cash'
    CREDIT_CARD = 'Credit Card', 'Credit Card'
    INSURANCE = 'Insurance', 'Insurance'
    BANK_TRANSFER = 'Bank Transfer', 'Bank Transfer'


# ============================================================================
# Helpers
# ============================================================================

def line_total(unit_price, quantity, discount_percentage=None):
    """
    unit_price * quantity * (1 - discount_percentage / 100), rounded half-up to cents.

    >>> line_total(Decimal('50.00'), 1, Decimal('10.00'))
    Decimal('45.00')
    """
    discount = Decimal(discount_percentage or 0)
    gross = Decimal(unit_price) * Decimal(quantity)
    return (gross * (Decimal('1') - discount / Decimal('100'))).quantize(CENTS, rounding=ROUND_HALF_UP)


# ============================================================================
# Models
# ============================================================================

class Billing(IntegrityModel):
    """
    Patient bill.

    total_amount is entered by the caller; it is not derived from the lines.
    """
    bill_id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(
        'clinical.Patient',
        on_delete=models.CASCADE,
        related_name='bills'
    )
    appointment = models.ForeignKey(
        'clinical.Appointment',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='bills'
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        blank=True,
        null=True
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatusChoices.choices,
        default=PaymentStatusChoices.UNPAID,
        blank=True,
        null=True
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethodChoices.choices,
        blank=True,
        null=True
    )
    payment_date = models.DateField(blank=True, null=True)
    invoice_number = models.CharField(max_length=50, unique=True, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'billing'
        verbose_name = 'Bill'
        verbose_name_plural = 'Bills'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(payment_status__isnull=True) | models.Q(payment_status__in=PaymentStatusChoices.values),
                name='billing_payment_status_valid'
            ),
            models.CheckConstraint(
                condition=models.Q(payment_method__isnull=True) | models.Q(payment_method__in=PaymentMethodChoices.values),
                name='billing_payment_method_valid'
            ),
        ]

    def __str__(self):
        return f"Bill {self.invoice_number or self.bill_id} ({self.payment_status})"

    @property
    def balance_due(self):
        return self.total_amount - (self.paid_amount or Decimal('0.00'))


class BillService(IntegrityModel):
    """
    One service line of a bill; (bill, service) is unique.

    unit_price defaults to the service cost. total_price defaults to
    compute_total_price() when left empty and is recomputed whenever
    unit_price, quantity or discount_percentage change on a stored line.
    """
    bill = models.ForeignKey(
        'Billing',
        on_delete=models.CASCADE,
        related_name='lines'
    )
    service = models.ForeignKey(
        'reference.Service',
        on_delete=models.PROTECT,
        related_name='bill_lines'
    )
    quantity = models.IntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        blank=True,
        null=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'bill_services'
        verbose_name = 'Bill Service'
        verbose_name_plural = 'Bill Services'
        constraints = [
            models.UniqueConstraint(
                fields=['bill', 'service'],
                name='unique_bill_service'
            ),
        ]

    def __str__(self):
        return f"Bill {self.bill_id} - service {self.service_id} x{self.quantity}"

    def compute_total_price(self):
        return line_total(self.unit_price, self.quantity, self.discount_percentage)

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._stored_pricing = instance._pricing()
        return instance

    def _pricing(self):
        return (
            self.__dict__.get('unit_price'),
            self.__dict__.get('quantity'),
            self.__dict__.get('discount_percentage'),
        )

    def pricing_changed(self):
        """True when unit_price, quantity or discount differ from the stored row."""
        stored = getattr(self, '_stored_pricing', None)
        return stored is not None and stored != self._pricing()

    def prepare_for_write(self):
        if self.unit_price is None and self.service_id is not None:
            from apps.reference.models import Service

            self.unit_price = (
                Service._base_manager.filter(pk=self.service_id)
                .values_list('cost', flat=True)
                .first()
            )
        if self.unit_price is None or self.quantity is None:
            return
        if self.total_price is None or self.pricing_changed():
            self.total_price = self.compute_total_price()

    def save(self, *args, **kwargs):
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and self.pricing_changed():
            kwargs['update_fields'] = set(update_fields) | {'total_price'}
        super().save(*args, **kwargs)
        self._stored_pricing = self._pricing()
