"""
Tests for the appointment status machine.

Default table:
- Scheduled   -> Confirmed | Cancelled | Rescheduled | No-Show
- Confirmed   -> Completed | Cancelled | Rescheduled | No-Show
- Rescheduled -> Scheduled | Confirmed | Cancelled
- Completed, Cancelled, No-Show are terminal
"""
from datetime import date, time
from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY

from apps.clinical.models import Appointment
from apps.clinical.services import transition_appointment
from apps.core.exceptions import DomainViolation, InvalidStatusTransition, ReferentialViolation
from apps.reference.models import AppointmentStatus

pytestmark = pytest.mark.django_db


def _transitions(from_status, to_status, result):
    labels = {'from_status': from_status, 'to_status': to_status, 'result': result}
    return REGISTRY.get_sample_value('clinic_appointment_transitions_total', labels) or 0.0


class TestTransitionTable:

    def test_default_table(self):
        assert Appointment.allowed_transitions('Scheduled') == ['Confirmed', 'Cancelled', 'Rescheduled', 'No-Show']
        assert Appointment.allowed_transitions('Rescheduled') == ['Scheduled', 'Confirmed', 'Cancelled']
        for terminal in ('Completed', 'Cancelled', 'No-Show'):
            assert Appointment.allowed_transitions(terminal) == []

    def test_unlisted_status_has_no_transitions(self):
        assert Appointment.allowed_transitions('Waitlisted') == []

    def test_setting_overrides_table(self, settings):
        settings.CLINIC_APPOINTMENT_TRANSITIONS = {'Completed': ['Scheduled']}

        assert Appointment.allowed_transitions('Completed') == ['Scheduled']
        assert Appointment.allowed_transitions('Scheduled') == []


class TestTransitionAppointment:

    def test_happy_path_to_completed(self, appointment):
        before = _transitions('Scheduled', 'Confirmed', 'success')

        transition_appointment(appointment, 'Confirmed')
        transition_appointment(appointment, 'Completed')

        appointment.refresh_from_db()
        assert appointment.status.status_name == 'Completed'
        assert _transitions('Scheduled', 'Confirmed', 'success') == before + 1

    def test_rescheduled_back_to_scheduled(self, appointment):
        transition_appointment(appointment, 'Rescheduled')
        transition_appointment(appointment, 'Scheduled')

        assert appointment.status_name == 'Scheduled'

    def test_completed_cannot_return_to_scheduled(self, appointment):
        transition_appointment(appointment, 'Confirmed')
        transition_appointment(appointment, 'Completed')
        before = _transitions('Completed', 'Scheduled', 'rejected')

        with pytest.raises(InvalidStatusTransition) as exc_info:
            transition_appointment(appointment, 'Scheduled')

        assert isinstance(exc_info.value, DomainViolation)
        assert 'terminal' in exc_info.value.errors['status']
        appointment.refresh_from_db()
        assert appointment.status.status_name == 'Completed'
        assert _transitions('Completed', 'Scheduled', 'rejected') == before + 1

    def test_scheduled_cannot_jump_to_completed(self, appointment):
        with pytest.raises(InvalidStatusTransition):
            transition_appointment(appointment, 'Completed')

    def test_same_status_is_a_no_op(self, appointment):
        result = transition_appointment(appointment, 'Scheduled')

        assert result is appointment
        assert appointment.status_name == 'Scheduled'

    @patch('apps.clinical.services.logger')
    def test_same_status_is_logged(self, mock_logger, appointment):
        transition_appointment(appointment, 'Scheduled')

        mock_logger.info.assert_called_once()
        extra = mock_logger.info.call_args[1]['extra']
        assert extra == {'appointment_id': appointment.pk, 'status': 'Scheduled'}

    def test_deleted_appointment_is_a_referential_violation(self, appointment):
        Appointment.objects.filter(pk=appointment.pk).delete()

        with pytest.raises(ReferentialViolation) as exc_info:
            transition_appointment(appointment, 'Confirmed')

        assert list(exc_info.value.errors) == ['appointment']
        assert exc_info.value.model_label == 'clinical.Appointment'

    def test_unknown_status_is_rejected(self, appointment):
        with pytest.raises(ReferentialViolation):
            transition_appointment(appointment, 'Teleported')


class TestTransitionsThroughSave:
    """Direct saves are held to the same table as the service."""

    def test_direct_status_change_is_checked(self, appointment, statuses):
        appointment.status = statuses['Cancelled']
        appointment.save()

        appointment.status = statuses['Scheduled']
        with pytest.raises(InvalidStatusTransition):
            appointment.save()

    def test_new_appointment_may_start_in_any_status(self, patient, doctor, statuses):
        appointment = Appointment.objects.create(
            patient=patient,
            doctor=doctor,
            appointment_date=date(2025, 6, 3),
            start_time=time(8, 0),
            end_time=time(8, 30),
            status=statuses['Completed'],
            appointment_type='Procedure'
        )

        assert appointment.status_name == 'Completed'

    def test_other_fields_editable_in_terminal_status(self, appointment, statuses):
        appointment.status = statuses['Cancelled']
        appointment.save()

        appointment.notes = 'Patient called to cancel'
        appointment.save()

        appointment.refresh_from_db()
        assert appointment.notes == 'Patient called to cancel'

    def test_configured_status_can_join_the_machine(self, appointment, settings):
        AppointmentStatus.objects.create(status_name='Checked-In')
        settings.CLINIC_APPOINTMENT_TRANSITIONS = {
            'Scheduled': ['Checked-In'],
            'Checked-In': ['Completed'],
        }

        transition_appointment(appointment, 'Checked-In')
        transition_appointment(appointment, 'Completed')

        assert appointment.status_name == 'Completed'
