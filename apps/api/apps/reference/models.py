"""
Reference models: the clinic's lookup vocabularies.

Rows here are long-lived and mostly seeded at bootstrap. Transactional rows
reference them with RESTRICT semantics (PROTECT), so a lookup row cannot be
deleted while anything still uses it.

Models exposing a `lookup_field` are cached by the reference vocabulary
(apps.reference.vocabulary) and resolvable by name.
"""
from django.db import models

from apps.core.models import IntegrityModel


# ============================================================================
# Enums
# ============================================================================

class RoomTypeChoices(models.TextChoices):
    """Room types"""
    EXAMINATION = 'Examination', 'Examination'
    OPERATING = 'Operating', 'Operating'
    CONSULTATION = 'Consultation', 'Consultation'
    WAITING = 'Waiting', 'Waiting'
    LABORATORY = 'Laboratory', 'Laboratory'


# ============================================================================
# Models
# ============================================================================

class AppointmentStatus(IntegrityModel):
    """
    Appointment statuses (Scheduled, Confirmed, Completed, ...).

    The status machine is keyed on status_name, so new statuses can be added
    without a schema change.
    """
    lookup_field = 'status_name'

    status_id = models.AutoField(primary_key=True)
    status_name = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        db_table = 'appointment_status'
        verbose_name = 'Appointment Status'
        verbose_name_plural = 'Appointment Statuses'

    def __str__(self):
        return self.status_name


class MedicalSpecialty(IntegrityModel):
    lookup_field = 'specialty_name'

    specialty_id = models.AutoField(primary_key=True)
    specialty_name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'medical_specialties'
        verbose_name = 'Medical Specialty'
        verbose_name_plural = 'Medical Specialties'

    def __str__(self):
        return self.specialty_name


class Department(IntegrityModel):
    lookup_field = 'department_name'

    department_id = models.AutoField(primary_key=True)
    department_name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        db_table = 'departments'
        verbose_name = 'Department'
        verbose_name_plural = 'Departments'

    def __str__(self):
        return self.department_name


class Medication(IntegrityModel):
    """
    Medication catalogue.

    medication_name is not unique: the same drug can be listed per
    manufacturer/dosage form.
    """
    medication_id = models.AutoField(primary_key=True)
    medication_name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    dosage_form = models.CharField(max_length=50, blank=True, null=True)
    manufacturer = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medications'
        verbose_name = 'Medication'
        verbose_name_plural = 'Medications'

    def __str__(self):
        if self.dosage_form:
            return f"{self.medication_name} ({self.dosage_form})"
        return self.medication_name


class Allergy(IntegrityModel):
    lookup_field = 'allergy_name'

    allergy_id = models.AutoField(primary_key=True)
    allergy_name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'allergies'
        verbose_name = 'Allergy'
        verbose_name_plural = 'Allergies'

    def __str__(self):
        return self.allergy_name


class MedicalTest(IntegrityModel):
    lookup_field = 'test_name'

    test_id = models.AutoField(primary_key=True)
    test_name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)
    normal_range = models.CharField(max_length=100, blank=True, null=True)
    cost = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)

    class Meta:
        db_table = 'medical_tests'
        verbose_name = 'Medical Test'
        verbose_name_plural = 'Medical Tests'

    def __str__(self):
        return self.test_name


class Service(IntegrityModel):
    """Billable clinic service; cost is the default unit price on a bill line."""
    lookup_field = 'service_name'

    service_id = models.AutoField(primary_key=True)
    service_name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)
    cost = models.DecimalField(max_digits=10, decimal_places=2)
    duration_minutes = models.IntegerField(blank=True, null=True)

    class Meta:
        db_table = 'services'
        verbose_name = 'Service'
        verbose_name_plural = 'Services'

    def __str__(self):
        return self.service_name


class InsuranceProvider(IntegrityModel):
    lookup_field = 'provider_name'

    provider_id = models.AutoField(primary_key=True)
    provider_name = models.CharField(max_length=100, unique=True)
    contact_person = models.CharField(max_length=100, blank=True, null=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    email = models.CharField(max_length=100, blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'insurance_providers'
        verbose_name = 'Insurance Provider'
        verbose_name_plural = 'Insurance Providers'

    def __str__(self):
        return self.provider_name


class Room(IntegrityModel):
    """
    Clinic rooms.

    room_type is a closed set; department is optional and RESTRICT.
    """
    lookup_field = 'room_number'

    room_id = models.AutoField(primary_key=True)
    room_number = models.CharField(max_length=20, unique=True)
    room_type = models.CharField(max_length=20, choices=RoomTypeChoices.choices)
    capacity = models.IntegerField(blank=True, null=True)
    department = models.ForeignKey(
        'Department',
        on_delete=models.PROTECT,
        blank=True,
        null=True,
        related_name='rooms'
    )
    is_available = models.BooleanField(default=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'rooms'
        verbose_name = 'Room'
        verbose_name_plural = 'Rooms'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(room_type__in=RoomTypeChoices.values),
                name='rooms_room_type_valid'
            ),
        ]

    def __str__(self):
        return f"Room {self.room_number} ({self.room_type})"
