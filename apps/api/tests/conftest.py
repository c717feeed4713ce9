"""
Global test fixtures for pytest.

Provides reusable model instances for the clinic data layer. Reference rows
(statuses, specialties, departments) come from the seed migration.
"""
from datetime import date, time
from decimal import Decimal

import pytest

from apps.authz.models import RoleChoices, User
from apps.billing.models import Billing
from apps.clinical.models import Appointment, Doctor, Patient
from apps.reference.models import (
    AppointmentStatus,
    Department,
    MedicalSpecialty,
    MedicalTest,
    Medication,
    Service,
)
from apps.reference.vocabulary import vocabulary


@pytest.fixture(autouse=True)
def fresh_vocabulary():
    """Every test starts with an empty reference cache."""
    vocabulary.invalidate()
    yield
    vocabulary.invalidate()


# ============================================================================
# Reference data
# ============================================================================

@pytest.fixture
def statuses(db):
    """{status_name: AppointmentStatus} for the seeded statuses."""
    return {status.status_name: status for status in AppointmentStatus.objects.all()}


@pytest.fixture
def cardiology(db):
    return MedicalSpecialty.objects.get(specialty_name='Cardiology')


@pytest.fixture
def cardiology_department(db):
    return Department.objects.get(department_name='Cardiology Department')


@pytest.fixture
def medication(db):
    return Medication.objects.create(
        medication_name='Amoxicillin',
        dosage_form='Capsule',
        manufacturer='Generic Pharma'
    )


@pytest.fixture
def blood_panel(db):
    return MedicalTest.objects.create(
        test_name='Complete Blood Count',
        normal_range='See lab reference',
        cost=Decimal('35.00')
    )


@pytest.fixture
def consultation_service(db):
    return Service.objects.create(
        service_name='General Consultation',
        cost=Decimal('60.00'),
        duration_minutes=30
    )


@pytest.fixture
def lab_service(db):
    return Service.objects.create(
        service_name='Lab Work',
        cost=Decimal('50.00'),
        duration_minutes=15
    )


# ============================================================================
# Identity
# ============================================================================

@pytest.fixture
def user(db):
    return User.objects.create_user(
        username='jdoe',
        email='jdoe@example.com',
        password='correct-horse-battery',
        role=RoleChoices.PATIENT
    )


@pytest.fixture
def patient(db):
    return Patient.objects.create(
        first_name='Jane',
        last_name='Doe',
        date_of_birth=date(1985, 4, 12),
        gender='Female',
        blood_type='O+'
    )


@pytest.fixture
def doctor(db, cardiology):
    return Doctor.objects.create(
        first_name='Gregory',
        last_name='House',
        specialty=cardiology,
        license_number='LIC-0001',
        years_of_experience=20,
        consultation_fee=Decimal('150.00')
    )


@pytest.fixture
def other_doctor(db, cardiology):
    return Doctor.objects.create(
        first_name='Lisa',
        last_name='Cuddy',
        specialty=cardiology,
        license_number='LIC-0002'
    )


# ============================================================================
# Transactions
# ============================================================================

@pytest.fixture
def appointment(db, patient, doctor, statuses):
    return Appointment.objects.create(
        patient=patient,
        doctor=doctor,
        appointment_date=date(2025, 6, 1),
        start_time=time(14, 0),
        end_time=time(14, 30),
        status=statuses['Scheduled'],
        appointment_type='Consultation'
    )


@pytest.fixture
def bill(db, patient):
    return Billing.objects.create(
        patient=patient,
        total_amount=Decimal('100.00'),
        paid_amount=Decimal('0.00'),
        payment_status='Unpaid'
    )
