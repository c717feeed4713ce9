"""
Structured logging with PHI/PII protection.

Provides a JSON formatter and helpers that keep patient data out of logs.
"""
import json
import logging
from datetime import datetime, timezone


# Fields that should NEVER be logged (PHI/PII)
SENSITIVE_FIELDS = {
    'password',
    'password_hash',
    'token',
    'secret',
    'first_name',
    'last_name',
    'email',
    'phone',
    'phone_number',
    'address',
    'date_of_birth',
    'emergency_contact_name',
    'emergency_contact_phone',
    'insurance_policy_number',
    'policy_number',
    'group_number',
    'primary_holder_name',
    'diagnosis',
    'treatment_plan',
    'prescription',
    'notes',
    'comments',
    'reason_for_visit',
    'salary',
}

# Attributes present on every LogRecord
_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message',
}


class SanitizedJSONFormatter(logging.Formatter):
    """
    JSON formatter that sanitizes sensitive fields.
    """

    def format(self, record):
        """Format log record as JSON with sanitized fields."""
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Extra fields (from extra={} in logging calls)
        for key, value in record.__dict__.items():
            if key in log_data or key.startswith('_') or key in _RESERVED_ATTRS:
                continue
            if key.lower() in SENSITIVE_FIELDS:
                log_data[key] = '[REDACTED]'
            else:
                log_data[key] = sanitize_value(value)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_sanitized_logger(name):
    """
    Get a logger for domain code.

    Usage:
        logger = get_sanitized_logger(__name__)
        logger.info('Event', extra={'event': 'appointment_booked', 'appointment_id': 3})
    """
    return logging.getLogger(name)


def sanitize_value(value):
    """Sanitize a value recursively."""
    if isinstance(value, dict):
        return sanitize_dict(value)
    if isinstance(value, (list, tuple)):
        return [sanitize_value(v) for v in value]
    return value


def sanitize_dict(data):
    """
    Sanitize a dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize

    Returns:
        Sanitized copy of dictionary
    """
    if not isinstance(data, dict):
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = '[REDACTED]'
        else:
            sanitized[key] = sanitize_value(value)
    return sanitized
