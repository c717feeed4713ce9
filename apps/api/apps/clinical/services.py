"""
Appointment services.

Booking and status changes go through here so the double-booking guard,
the status machine, metrics and domain events stay in one place.
"""
from typing import Optional

from django.db import transaction

from apps.clinical.models import Appointment, Doctor
from apps.core.exceptions import IntegrityViolation, ReferentialViolation, SchedulingConflict
from apps.core.observability.events import log_appointment_transition, log_domain_event
from apps.core.observability.logging import get_sanitized_logger
from apps.core.observability.metrics import metrics
from apps.reference.models import AppointmentStatus
from apps.reference.vocabulary import vocabulary

logger = get_sanitized_logger(__name__)

DEFAULT_BOOKING_STATUS = 'Scheduled'


def book_appointment(
    patient,
    doctor,
    appointment_date,
    start_time,
    end_time,
    appointment_type,
    status_name: str = DEFAULT_BOOKING_STATUS,
    reason_for_visit: Optional[str] = None,
    notes: Optional[str] = None,
) -> Appointment:
    """
    Book an appointment for a patient with a doctor.

    The doctor row is locked for the duration of the booking so two
    concurrent bookings for the same doctor are serialized; the
    unique_appointment constraint remains the final guard.

    Args:
        patient: Patient instance
        doctor: Doctor instance
        appointment_date, start_time, end_time: slot of the visit
        appointment_type: one of AppointmentTypeChoices
        status_name: initial status, resolved through the reference vocabulary

    Returns:
        The saved Appointment

    Raises:
        SchedulingConflict: the doctor already has an appointment at that date/start time
        ReferentialViolation: unknown status name or doctor
        DomainViolation: a value is outside its domain
    """
    status = vocabulary.get(AppointmentStatus, status_name)

    try:
        with transaction.atomic():
            # Serialize bookings per doctor; a missing doctor is reported by save()
            Doctor.objects.select_for_update().filter(pk=doctor.pk).first()

            appointment = Appointment(
                patient=patient,
                doctor_id=doctor.pk,
                appointment_date=appointment_date,
                start_time=start_time,
                end_time=end_time,
                status_id=status.pk,
                appointment_type=appointment_type,
                reason_for_visit=reason_for_visit,
                notes=notes,
            )
            appointment.save()
    except SchedulingConflict:
        metrics.appointments_booked_total.labels(result='conflict').inc()
        raise
    except IntegrityViolation:
        metrics.appointments_booked_total.labels(result='rejected').inc()
        raise

    metrics.appointments_booked_total.labels(result='success').inc()
    log_domain_event(
        'appointment_booked',
        entity_type=Appointment._meta.label,
        entity_id=appointment.pk,
        entity_ids={'doctor_id': appointment.doctor_id, 'patient_id': appointment.patient_id},
        status=status.name,
    )
    return appointment


def transition_appointment(appointment: Appointment, status_name: str) -> Appointment:
    """
    Move an appointment to another status.

    Raises:
        InvalidStatusTransition: the transition table does not allow it
        ReferentialViolation: unknown status name or the appointment no longer exists
    """
    target = vocabulary.get(AppointmentStatus, status_name)

    with transaction.atomic():
        locked = Appointment.objects.select_for_update().filter(pk=appointment.pk).first()
        if locked is None:
            raise ReferentialViolation(
                {'appointment': f'Appointment {appointment.pk!r} does not exist.'},
                model_label=Appointment._meta.label,
            )
        previous = locked.status_name
        if previous == target.name:
            logger.info(
                'Appointment already in requested status',
                extra={'appointment_id': locked.pk, 'status': target.name},
            )
            return appointment

        # save() enforces the transition table
        locked.status_id = target.pk
        locked.save(update_fields=['status', 'updated_at'])

    log_appointment_transition(locked, previous, target.name)

    appointment.status_id = locked.status_id
    appointment.updated_at = locked.updated_at
    return appointment
