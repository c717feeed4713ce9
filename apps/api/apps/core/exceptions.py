"""
Integrity error taxonomy for the clinic data layer.

Every violation is a Django ValidationError so callers that already catch
ValidationError keep working, while callers that need to react differently
(e.g. offer another slot on SchedulingConflict) can catch the subclass.
"""
from django.core.exceptions import ValidationError


class IntegrityViolation(ValidationError):
    """
    Base class for all data-layer violations.

    Attributes:
        model_label: 'app_label.ModelName' of the offending row
        errors: {field_name: message} for the offending fields
    """
    kind = 'integrity'
    default_code = 'integrity'

    def __init__(self, errors, model_label=None, code=None):
        if isinstance(errors, str):
            errors = {'__all__': errors}
        self.model_label = model_label
        self.errors = dict(errors)
        super().__init__(
            {field: [message] for field, message in self.errors.items()},
        )
        self.code = code or self.default_code

    def __str__(self):
        details = '; '.join(f'{field}: {message}' for field, message in self.errors.items())
        if self.model_label:
            return f'{self.__class__.__name__} on {self.model_label}: {details}'
        return f'{self.__class__.__name__}: {details}'


class DomainViolation(IntegrityViolation):
    """A value is missing, outside its closed set, or outside its declared range."""
    kind = 'domain'
    default_code = 'domain'


class InvalidStatusTransition(DomainViolation):
    """An appointment status change not allowed by the transition table."""
    kind = 'status_transition'
    default_code = 'invalid_transition'


class UniquenessViolation(IntegrityViolation):
    """A write collides with an existing unique key."""
    kind = 'uniqueness'
    default_code = 'unique'


class SchedulingConflict(UniquenessViolation):
    """The doctor already has an appointment at the same date and start time."""
    kind = 'scheduling'
    default_code = 'scheduling_conflict'


class ReferentialViolation(IntegrityViolation):
    """A foreign key points at a row that does not exist."""
    kind = 'referential'
    default_code = 'referential'


class CascadeFailure(IntegrityViolation):
    """A multi-row deletion could not complete; nothing was written."""
    kind = 'cascade'
    default_code = 'cascade_failed'


class DeletionRestricted(CascadeFailure):
    """A restrict edge still has surviving dependents."""
    kind = 'restricted'
    default_code = 'restricted'
