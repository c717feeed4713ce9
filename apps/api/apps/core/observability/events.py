"""
Domain events logging helpers.

Provides structured event logging for data-layer operations.
"""
from typing import Any, Dict, Optional

from .logging import get_sanitized_logger, sanitize_dict
from .metrics import metrics

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[Any] = None,
    entity_ids: Optional[Dict[str, Any]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'appointment_booked', 'cascade_deleted')
        entity_type: Model label (e.g., 'clinical.Appointment')
        entity_id: Primary key of the main entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, failure, blocked, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'appointment_booked',
            entity_type='clinical.Appointment',
            entity_id=appointment.pk,
            entity_ids={'doctor_id': appointment.doctor_id},
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id is not None:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    # Log at appropriate level based on result
    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'blocked', 'rejected']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_integrity_violation(violation, instance=None):
    """Log and count a rejected write."""
    model_label = violation.model_label or (instance._meta.label if instance is not None else 'unknown')
    metrics.integrity_violations_total.labels(model=model_label, kind=violation.kind).inc()
    log_domain_event(
        'integrity_violation',
        entity_type=model_label,
        entity_id=getattr(instance, 'pk', None),
        result='rejected',
        violation=violation.__class__.__name__,
        fields=sorted(violation.errors),
    )


def log_cascade_executed(plan, result='success', **extra):
    """Log the outcome of a cascading deletion."""
    root_label = plan.root._meta.label
    metrics.cascade_deletions_total.labels(model=root_label, result=result).inc()
    if result == 'success':
        metrics.cascade_rows_total.labels(action='deleted').inc(plan.delete_count)
        metrics.cascade_rows_total.labels(action='nullified').inc(plan.nullify_count)
    log_domain_event(
        'cascade_delete',
        entity_type=root_label,
        entity_id=plan.root.pk,
        result=result,
        deleted=plan.summary(),
        nullified=plan.nullify_count,
        **extra
    )


def log_appointment_transition(appointment, from_status, to_status, result='success'):
    """Log appointment status transition event."""
    metrics.appointment_transitions_total.labels(
        from_status=from_status or '-',
        to_status=to_status,
        result=result,
    ).inc()
    log_domain_event(
        'appointment_transition',
        entity_type='clinical.Appointment',
        entity_id=appointment.pk,
        entity_ids={'doctor_id': appointment.doctor_id, 'patient_id': appointment.patient_id},
        result=result,
        from_status=from_status,
        to_status=to_status,
    )
