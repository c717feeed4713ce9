"""
Pre-write integrity checks shared by every clinic model.

The checks run in a fixed order so the first reported violation is
deterministic:

1. required (NOT NULL) columns are present          -> DomainViolation
2. enumerated / ranged values are in their domain    -> DomainViolation
3. unique columns and unique constraints hold        -> UniquenessViolation
4. every non-null foreign key resolves               -> ReferentialViolation
5. model-specific conflict constraints               -> e.g. SchedulingConflict

The database constraints stay in place as the atomic backstop; errors the
database raises during the write are translated back into this taxonomy by
translate_integrity_error().
"""
import time

from django.core.exceptions import ValidationError

from apps.core.exceptions import (
    DomainViolation,
    IntegrityViolation,
    ReferentialViolation,
    UniquenessViolation,
)
from apps.core.observability.events import log_integrity_violation
from apps.core.observability.metrics import metrics


def _checked_fields(opts):
    """Concrete columns the caller is responsible for (no auto pk, no auto timestamps)."""
    for field in opts.concrete_fields:
        if field.primary_key:
            continue
        if getattr(field, 'auto_now', False) or getattr(field, 'auto_now_add', False):
            continue
        yield field


def _allowed_values(field):
    return [value for value, _label in field.flatchoices]


def find_missing_fields(instance):
    """
    Return {field: message} for NOT NULL columns left empty.

    Omitted text columns hold '', so any of the field's empty_values counts
    as missing unless the field is declared blank=True.
    """
    errors = {}
    for field in _checked_fields(instance._meta):
        if field.null:
            continue
        value = getattr(instance, field.attname)
        if value is None or (not field.blank and value in field.empty_values):
            errors[field.name] = f'{field.verbose_name} is required.'
    return errors


def find_domain_errors(instance):
    """
    Return {field: message} for values outside their declared domain.

    Values are normalized in place (e.g. '2025-06-01' -> date) the same way
    Model.full_clean() does.
    """
    errors = {}
    for field in _checked_fields(instance._meta):
        raw_value = getattr(instance, field.attname)
        if raw_value is None:
            continue
        try:
            value = field.to_python(raw_value)
            if field.choices and value not in _allowed_values(field):
                allowed = ', '.join(str(v) for v in _allowed_values(field))
                raise ValidationError(f'{value!r} is not one of: {allowed}.')
            field.run_validators(value)
        except ValidationError as exc:
            errors[field.name] = ' '.join(exc.messages)
            continue
        setattr(instance, field.attname, value)
    return errors


def unique_sets(model):
    """
    Yield (constraint_name, fields) for every uniqueness rule of a model.

    Single-column rules are named after the column.
    """
    opts = model._meta
    for field in opts.concrete_fields:
        if field.unique and not field.primary_key:
            yield field.name, (field,)
    for constraint in opts.total_unique_constraints:
        yield constraint.name, tuple(opts.get_field(name) for name in constraint.fields)


def find_unique_collisions(instance, include=None, exclude=()):
    """
    Return [(constraint_name, fields)] whose values already exist on another row.

    NULL never collides with anything, matching SQL semantics.
    """
    collisions = []
    model = type(instance)
    for name, fields in unique_sets(model):
        if include is not None and name not in include:
            continue
        if name in exclude:
            continue
        lookup = {field.attname: getattr(instance, field.attname) for field in fields}
        if any(value is None for value in lookup.values()):
            continue
        queryset = model._base_manager.filter(**lookup)
        if instance.pk is not None:
            queryset = queryset.exclude(pk=instance.pk)
        if queryset.exists():
            collisions.append((name, fields))
    return collisions


def _collision_errors(model, collisions):
    errors = {}
    for _name, fields in collisions:
        names = ', '.join(field.name for field in fields)
        key = fields[0].name if len(fields) == 1 else names
        errors[key] = f'{model._meta.verbose_name} with this {names} already exists.'
    return errors


def find_dangling_references(instance):
    """Return {field: message} for foreign keys whose target row does not exist."""
    errors = {}
    for field in instance._meta.concrete_fields:
        if not field.is_relation:
            continue
        value = getattr(instance, field.attname)
        if value is None:
            continue
        target = field.related_model
        exists = target._base_manager.filter(**{field.remote_field.field_name: value}).exists()
        if not exists:
            errors[field.name] = f'{target._meta.verbose_name} {value!r} does not exist.'
    return errors


def find_violation(instance):
    """
    Run every check in order and return the first violation (or None).

    The model's conflict_constraints map unique constraint names to a
    dedicated violation class; those are checked last.
    """
    model = type(instance)
    label = model._meta.label
    conflicts = getattr(instance, 'conflict_constraints', {}) or {}

    errors = find_missing_fields(instance)
    if errors:
        return DomainViolation(errors, model_label=label, code='required')

    errors = find_domain_errors(instance)
    if errors:
        return DomainViolation(errors, model_label=label)

    collisions = find_unique_collisions(instance, exclude=conflicts)
    if collisions:
        return UniquenessViolation(_collision_errors(model, collisions), model_label=label)

    errors = find_dangling_references(instance)
    if errors:
        return ReferentialViolation(errors, model_label=label)

    for name, violation_class in conflicts.items():
        collisions = find_unique_collisions(instance, include=[name])
        if collisions:
            return violation_class(_collision_errors(model, collisions), model_label=label)

    return None


def enforce_integrity(instance):
    """
    Raise the first integrity violation for an instance about to be written.

    Raises:
        DomainViolation, UniquenessViolation, ReferentialViolation or the
        model's dedicated conflict class (e.g. SchedulingConflict)
    """
    start_time = time.time()
    try:
        violation = find_violation(instance)
    finally:
        metrics.integrity_check_duration_seconds.labels(
            model=instance._meta.label
        ).observe(time.time() - start_time)
    if violation is not None:
        log_integrity_violation(violation, instance)
        raise violation


def translate_integrity_error(instance, exc):
    """
    Map a database IntegrityError raised during a write onto the taxonomy.

    Must be called after the failed statement's savepoint was rolled back,
    since the uniqueness checks are re-run to find the concurrent row.
    """
    model = type(instance)
    label = model._meta.label
    conflicts = getattr(instance, 'conflict_constraints', {}) or {}

    for name, violation_class in conflicts.items():
        collisions = find_unique_collisions(instance, include=[name])
        if collisions:
            return violation_class(_collision_errors(model, collisions), model_label=label)

    collisions = find_unique_collisions(instance)
    if collisions:
        return UniquenessViolation(_collision_errors(model, collisions), model_label=label)

    message = str(exc)
    lowered = message.lower()
    if 'unique' in lowered or 'duplicate' in lowered:
        return UniquenessViolation({'__all__': message}, model_label=label)
    if 'foreign key' in lowered:
        return ReferentialViolation({'__all__': message}, model_label=label)
    if 'check' in lowered or 'not null' in lowered:
        return DomainViolation({'__all__': message}, model_label=label)
    return IntegrityViolation({'__all__': message}, model_label=label)


def audit_references(model_classes):
    """
    Scan stored rows for foreign keys that do not resolve.

    Rows written through IntegrityModel.save() cannot dangle; this catches
    rows written around it (raw SQL, QuerySet.update(), imports).

    Returns:
        [(model_label, field_name, [pk, ...])] for every offending foreign key
    """
    findings = []
    for model in model_classes:
        for field in model._meta.concrete_fields:
            if not field.is_relation:
                continue
            target = field.related_model
            existing = target._base_manager.values(field.remote_field.field_name)
            orphans = list(
                model._base_manager
                .filter(**{f'{field.attname}__isnull': False})
                .exclude(**{f'{field.attname}__in': existing})
                .values_list('pk', flat=True)
            )
            if orphans:
                findings.append((model._meta.label, field.name, orphans))
    return findings
