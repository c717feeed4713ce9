"""
Tests for the management commands.
"""
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.clinical.models import Appointment, Doctor
from apps.reference.models import Department

pytestmark = pytest.mark.django_db


def _run(*args, **options):
    out = StringIO()
    call_command(*args, stdout=out, **options)
    return out.getvalue()


class TestSeedReferenceData:

    def test_reports_rows_created(self):
        Department.objects.get(department_name='Laboratory').delete()

        output = _run('seed_reference_data')

        assert 'reference.Department: 1 row(s) created' in output
        assert 'reference.MedicalSpecialty: already seeded' in output
        assert Department.objects.count() == 8


class TestAuditIntegrity:

    def test_clean_database(self, appointment):
        output = _run('audit_integrity')

        assert 'No dangling references' in output

    def test_reports_dangling_rows(self, doctor, cardiology):
        # QuerySet.update() skips the integrity layer
        Doctor.objects.filter(pk=doctor.pk).update(specialty_id=999999)
        try:
            output = _run('audit_integrity')
        finally:
            Doctor.objects.filter(pk=doctor.pk).update(specialty_id=cardiology.pk)

        assert f'clinical.Doctor.specialty: 1 dangling row(s) [{doctor.pk}]' in output

    def test_fail_on_error(self, doctor, cardiology):
        Doctor.objects.filter(pk=doctor.pk).update(specialty_id=999999)
        try:
            with pytest.raises(CommandError, match='1 dangling reference'):
                _run('audit_integrity', fail_on_error=True)
        finally:
            Doctor.objects.filter(pk=doctor.pk).update(specialty_id=cardiology.pk)


class TestDeletionPlan:

    def test_patient_closure(self, appointment):
        output = _run('deletion_plan', 'clinical.Patient', str(appointment.patient_id))

        assert 'delete clinical.Appointment: 1' in output
        assert 'delete clinical.Patient: 1' in output
        assert '2 row(s) would be deleted, 0 nullified' in output

    def test_plan_does_not_delete(self, appointment):
        _run('deletion_plan', 'clinical.Patient', str(appointment.patient_id))

        assert Appointment.objects.filter(pk=appointment.pk).exists()

    def test_restricted_deletion(self, doctor, cardiology):
        output = _run('deletion_plan', 'reference.MedicalSpecialty', str(cardiology.pk))

        assert 'blocked by clinical.Doctor.specialty -> reference.MedicalSpecialty [restrict]: 1' in output
        assert 'Deletion would be restricted' in output

    def test_lists_edges(self, patient):
        output = _run('deletion_plan', 'clinical.Patient', str(patient.pk), edges=True)

        assert 'clinical.Appointment.patient -> clinical.Patient [cascade]' in output

    def test_unknown_model(self):
        with pytest.raises(CommandError, match='Unknown model'):
            _run('deletion_plan', 'clinical.Spaceship', '1')

    def test_missing_row(self):
        with pytest.raises(CommandError, match='does not exist'):
            _run('deletion_plan', 'clinical.Patient', '424242')
