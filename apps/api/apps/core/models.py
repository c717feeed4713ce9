"""
Core model base: every clinic table inherits the integrity contract from here.
"""
from django.db import IntegrityError, models, router, transaction

from apps.core.integrity import enforce_integrity, translate_integrity_error
from apps.core.observability.events import log_integrity_violation


class IntegrityModel(models.Model):
    """
    Abstract base for all clinic models.

    save():
        1. prepare_for_write() fills derived columns
        2. enforce_integrity() runs the ordered schema checks
        3. check_business_rules() runs model-specific rules
        4. the row is written inside a savepoint; database constraint errors
           (concurrent writers) are translated into the same taxonomy

    delete():
        routed through the deletion graph so cascades, nullifications and
        restrictions are planned first and executed atomically.

    NOTE: QuerySet.update()/delete() bypass these hooks, as in plain Django.
    """

    # {unique constraint name: violation class raised instead of UniquenessViolation}
    conflict_constraints = {}

    class Meta:
        abstract = True

    def prepare_for_write(self):
        """Hook for derived columns; runs before the integrity checks."""

    def check_business_rules(self):
        """Hook for model-specific rules; runs after the schema checks."""

    def save(self, *args, **kwargs):
        using = kwargs.get('using') or router.db_for_write(type(self), instance=self)
        self.prepare_for_write()
        with transaction.atomic(using=using):
            enforce_integrity(self)
            self.check_business_rules()
            try:
                with transaction.atomic(using=using):
                    super().save(*args, **kwargs)
            except IntegrityError as exc:
                violation = translate_integrity_error(self, exc)
                log_integrity_violation(violation, self)
                raise violation from exc

    def delete(self, using=None, keep_parents=False):
        from apps.core.deletion import get_deletion_graph

        return get_deletion_graph().delete(self, using=using)
