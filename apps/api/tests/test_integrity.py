"""
Tests for the write-time integrity layer.

Validates the ordered checks run by IntegrityModel.save():
1. Required columns are present (DomainViolation)
2. Enumerated and ranged values stay in their domain (DomainViolation)
3. Unique columns and constraints hold, NULL never collides (UniquenessViolation)
4. Foreign keys resolve (ReferentialViolation)
5. Database errors from concurrent writers map onto the same taxonomy
"""
from datetime import date, time, timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.authz.models import User
from apps.billing.models import Billing
from apps.clinical.models import Appointment, Doctor, Patient
from apps.core.exceptions import (
    DomainViolation,
    IntegrityViolation,
    ReferentialViolation,
    SchedulingConflict,
    UniquenessViolation,
)
from apps.core.integrity import find_violation, translate_integrity_error

pytestmark = pytest.mark.django_db


class TestRequiredFields:

    def test_missing_required_column_is_rejected(self):
        """date_of_birth is NOT NULL."""
        patient = Patient(first_name='No', last_name='Birthday', gender='Male')

        with pytest.raises(DomainViolation) as exc_info:
            patient.save()

        assert 'date_of_birth' in exc_info.value.errors
        assert exc_info.value.code == 'required'
        assert exc_info.value.model_label == 'clinical.Patient'
        assert not Patient.objects.filter(last_name='Birthday').exists()

    def test_omitted_text_columns_are_rejected(self):
        """Omitted CharFields hold '' and still count as missing."""
        patient = Patient(date_of_birth=date(1980, 1, 1), gender='Male')

        with pytest.raises(DomainViolation) as exc_info:
            patient.save()

        assert set(exc_info.value.errors) == {'first_name', 'last_name'}
        assert exc_info.value.code == 'required'
        assert not Patient.objects.exists()

    def test_doctor_without_license_number_is_rejected(self, cardiology):
        doctor = Doctor(first_name='A', last_name='B', specialty=cardiology)

        with pytest.raises(DomainViolation) as exc_info:
            doctor.save()

        assert list(exc_info.value.errors) == ['license_number']
        assert not Doctor.objects.exists()

    def test_user_without_username_is_rejected(self):
        user = User(email='x@example.com', role='admin', password='x')

        with pytest.raises(DomainViolation) as exc_info:
            user.save()

        assert list(exc_info.value.errors) == ['username']
        assert not User.objects.exists()

    def test_blank_allowed_columns_may_stay_empty(self, patient):
        patient.address = ''
        patient.save()

        patient.refresh_from_db()
        assert patient.address == ''

    def test_required_check_runs_before_domain_check(self):
        """The first reported violation is deterministic."""
        patient = Patient(first_name='No', last_name='Birthday', gender='Unknown')

        violation = find_violation(patient)

        assert isinstance(violation, DomainViolation)
        assert list(violation.errors) == ['date_of_birth']


class TestDomainChecks:

    def test_value_outside_enumeration_is_rejected(self):
        patient = Patient(
            first_name='Alex',
            last_name='Smith',
            date_of_birth=date(1990, 1, 1),
            gender='Unknown'
        )

        with pytest.raises(DomainViolation) as exc_info:
            patient.save()

        assert 'gender' in exc_info.value.errors

    def test_nullable_enumeration_accepts_null(self):
        patient = Patient.objects.create(
            first_name='Alex',
            last_name='Smith',
            date_of_birth=date(1990, 1, 1),
            gender='Other',
            blood_type=None
        )

        assert patient.pk is not None

    def test_values_are_normalized_before_write(self):
        """ISO strings are accepted and stored as dates."""
        patient = Patient.objects.create(
            first_name='Alex',
            last_name='Smith',
            date_of_birth='1990-01-01',
            gender='Other'
        )

        assert patient.date_of_birth == date(1990, 1, 1)

    def test_length_limit_is_enforced(self):
        patient = Patient(
            first_name='A' * 51,
            last_name='Smith',
            date_of_birth=date(1990, 1, 1),
            gender='Other'
        )

        with pytest.raises(DomainViolation) as exc_info:
            patient.save()

        assert 'first_name' in exc_info.value.errors


class TestUniqueness:

    def test_duplicate_unique_column_is_rejected(self, doctor):
        duplicate = Doctor(
            first_name='Another',
            last_name='Doctor',
            license_number=doctor.license_number
        )

        with pytest.raises(UniquenessViolation) as exc_info:
            duplicate.save()

        assert 'license_number' in exc_info.value.errors
        assert Doctor.objects.filter(license_number=doctor.license_number).count() == 1

    def test_update_does_not_collide_with_itself(self, doctor):
        doctor.years_of_experience = 21
        doctor.save()

        doctor.refresh_from_db()
        assert doctor.years_of_experience == 21

    def test_update_into_existing_key_is_rejected(self, doctor, other_doctor):
        other_doctor.license_number = doctor.license_number

        with pytest.raises(UniquenessViolation):
            other_doctor.save()

    def test_null_never_collides(self, patient):
        """invoice_number is unique but nullable."""
        Billing.objects.create(patient=patient, total_amount=Decimal('10.00'))
        Billing.objects.create(patient=patient, total_amount=Decimal('20.00'))

        assert Billing.objects.filter(invoice_number__isnull=True).count() == 2

    def test_duplicate_invoice_number_is_rejected(self, patient):
        Billing.objects.create(patient=patient, total_amount=Decimal('10.00'), invoice_number='INV-1')

        with pytest.raises(UniquenessViolation) as exc_info:
            Billing.objects.create(patient=patient, total_amount=Decimal('20.00'), invoice_number='INV-1')

        assert 'invoice_number' in exc_info.value.errors


class TestReferentialIntegrity:

    def test_dangling_foreign_key_is_rejected(self):
        doctor = Doctor(
            first_name='Ghost',
            last_name='Specialist',
            license_number='LIC-GHOST',
            specialty_id=999999
        )

        with pytest.raises(ReferentialViolation) as exc_info:
            doctor.save()

        assert 'specialty' in exc_info.value.errors
        assert not Doctor.objects.filter(license_number='LIC-GHOST').exists()

    def test_null_optional_foreign_key_is_accepted(self):
        doctor = Doctor.objects.create(
            first_name='General',
            last_name='Practitioner',
            license_number='LIC-GP'
        )

        assert doctor.specialty_id is None


class TestTimestamps:

    def test_updated_at_refreshed_on_every_save(self, patient, monkeypatch):
        later = timezone.now() + timedelta(hours=1)
        monkeypatch.setattr(timezone, 'now', lambda: later)

        patient.city = 'Springfield'
        patient.save()

        patient.refresh_from_db()
        assert patient.updated_at == later
        assert patient.created_at < later


class TestErrorTaxonomy:

    def test_violations_are_validation_errors(self):
        for violation_class in (DomainViolation, UniquenessViolation, ReferentialViolation, SchedulingConflict):
            assert issubclass(violation_class, IntegrityViolation)
            assert issubclass(violation_class, ValidationError)

    def test_scheduling_conflict_is_a_uniqueness_violation(self):
        assert issubclass(SchedulingConflict, UniquenessViolation)

    def test_message_dict_lists_offending_fields(self):
        patient = Patient(first_name='No', last_name='Birthday', gender='Male')

        with pytest.raises(ValidationError) as exc_info:
            patient.save()

        assert 'date_of_birth' in exc_info.value.message_dict


class TestDatabaseBackstop:
    """The database constraints stay in place for writers that bypass save()."""

    def test_unique_appointment_constraint_enforced_by_database(self, appointment, statuses):
        duplicate = Appointment(
            patient=appointment.patient,
            doctor=appointment.doctor,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=time(15, 0),
            status=statuses['Scheduled'],
            appointment_type='Follow-up'
        )

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Appointment.objects.bulk_create([duplicate])

    def test_concurrent_duplicate_is_translated(self, appointment, statuses, monkeypatch):
        """A row inserted between the check and the write surfaces as SchedulingConflict."""
        monkeypatch.setattr('apps.core.models.enforce_integrity', lambda instance: None)
        duplicate = Appointment(
            patient=appointment.patient,
            doctor=appointment.doctor,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=time(15, 0),
            status=statuses['Scheduled'],
            appointment_type='Follow-up'
        )

        with pytest.raises(SchedulingConflict) as exc_info:
            duplicate.save()

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert Appointment.objects.filter(doctor=appointment.doctor).count() == 1

    def test_foreign_key_error_message_is_translated(self, patient):
        violation = translate_integrity_error(patient, IntegrityError('FOREIGN KEY constraint failed'))

        assert isinstance(violation, ReferentialViolation)

    def test_check_error_message_is_translated(self, patient):
        violation = translate_integrity_error(patient, IntegrityError('CHECK constraint failed: feedback_rating_range'))

        assert isinstance(violation, DomainViolation)
