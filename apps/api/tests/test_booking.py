"""
Tests for appointment booking and the doctor double-booking guard.

A doctor cannot hold two appointments with the same date and start time,
whatever their end times; the conflict surfaces as SchedulingConflict so
callers can offer another slot.
"""
from datetime import date, time

import pytest
from prometheus_client import REGISTRY

from apps.clinical.models import Appointment
from apps.clinical.services import book_appointment
from apps.core.exceptions import ReferentialViolation, SchedulingConflict, UniquenessViolation
from apps.reference.models import AppointmentStatus

pytestmark = pytest.mark.django_db


def _booked(result):
    return REGISTRY.get_sample_value('clinic_appointments_booked_total', {'result': result}) or 0.0


class TestDoubleBookingGuard:

    def test_same_doctor_date_and_start_time_conflicts(self, patient, doctor, statuses):
        """Second booking fails even though its end time differs."""
        first = Appointment.objects.create(
            patient=patient,
            doctor=doctor,
            appointment_date=date(2025, 6, 1),
            start_time=time(14, 0),
            end_time=time(14, 30),
            status=statuses['Scheduled'],
            appointment_type='Consultation'
        )

        second = Appointment(
            patient=patient,
            doctor=doctor,
            appointment_date=date(2025, 6, 1),
            start_time=time(14, 0),
            end_time=time(15, 0),
            status=statuses['Scheduled'],
            appointment_type='Consultation'
        )

        with pytest.raises(SchedulingConflict) as exc_info:
            second.save()

        assert isinstance(exc_info.value, UniquenessViolation)
        assert exc_info.value.model_label == 'clinical.Appointment'
        assert list(Appointment.objects.filter(doctor=doctor)) == [first]

    def test_no_two_rows_share_the_scheduling_key(self, appointment, statuses):
        for start in (time(14, 0), time(14, 0), time(15, 0)):
            try:
                Appointment.objects.create(
                    patient=appointment.patient,
                    doctor=appointment.doctor,
                    appointment_date=appointment.appointment_date,
                    start_time=start,
                    end_time=time(16, 0),
                    status=statuses['Scheduled'],
                    appointment_type='Follow-up'
                )
            except SchedulingConflict:
                pass

        keys = list(
            Appointment.objects.values_list('doctor_id', 'appointment_date', 'start_time')
        )
        assert len(keys) == len(set(keys)) == 2

    def test_other_doctor_can_take_the_same_slot(self, appointment, other_doctor, statuses):
        parallel = Appointment.objects.create(
            patient=appointment.patient,
            doctor=other_doctor,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=appointment.end_time,
            status=statuses['Scheduled'],
            appointment_type='Consultation'
        )

        assert parallel.pk != appointment.pk

    def test_rescheduling_into_own_slot_is_not_a_conflict(self, appointment):
        appointment.end_time = time(14, 45)
        appointment.save()

        appointment.refresh_from_db()
        assert appointment.end_time == time(14, 45)


class TestBookAppointment:

    def test_books_with_scheduled_status_by_default(self, patient, doctor):
        before = _booked('success')

        appointment = book_appointment(
            patient=patient,
            doctor=doctor,
            appointment_date=date(2025, 6, 2),
            start_time=time(9, 0),
            end_time=time(9, 30),
            appointment_type='Regular Checkup',
            reason_for_visit='Annual checkup'
        )

        appointment.refresh_from_db()
        assert appointment.status.status_name == 'Scheduled'
        assert appointment.status_name == 'Scheduled'
        assert _booked('success') == before + 1

    def test_initial_status_resolved_by_name(self, patient, doctor):
        appointment = book_appointment(
            patient=patient,
            doctor=doctor,
            appointment_date='2025-06-02',
            start_time='10:00',
            end_time='10:30',
            appointment_type='Follow-up',
            status_name='Confirmed'
        )

        assert appointment.status_name == 'Confirmed'
        assert appointment.appointment_date == date(2025, 6, 2)

    def test_conflict_is_counted_and_raised(self, appointment):
        before = _booked('conflict')

        with pytest.raises(SchedulingConflict):
            book_appointment(
                patient=appointment.patient,
                doctor=appointment.doctor,
                appointment_date=appointment.appointment_date,
                start_time=appointment.start_time,
                end_time=time(15, 0),
                appointment_type='Emergency'
            )

        assert _booked('conflict') == before + 1

    def test_unknown_status_name_is_rejected(self, patient, doctor):
        with pytest.raises(ReferentialViolation):
            book_appointment(
                patient=patient,
                doctor=doctor,
                appointment_date=date(2025, 6, 2),
                start_time=time(11, 0),
                end_time=time(11, 30),
                appointment_type='Consultation',
                status_name='Waitlisted'
            )

        assert not Appointment.objects.filter(patient=patient).exists()

    def test_status_usable_once_lookup_row_exists(self, patient, doctor):
        AppointmentStatus.objects.create(status_name='Waitlisted', description='Waiting for a slot')

        appointment = book_appointment(
            patient=patient,
            doctor=doctor,
            appointment_date=date(2025, 6, 2),
            start_time=time(11, 0),
            end_time=time(11, 30),
            appointment_type='Consultation',
            status_name='Waitlisted'
        )

        assert appointment.status_name == 'Waitlisted'
