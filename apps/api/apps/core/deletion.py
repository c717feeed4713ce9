"""
Explicit deletion graph for the clinic schema.

Every foreign key between clinic models becomes one edge
(parent model -> child model) tagged with its policy:

- cascade:   deleting the parent deletes the child rows
- set_null:  deleting the parent clears the child's foreign key
- restrict:  the parent cannot be deleted while child rows survive

The graph is derived from the models' on_delete declarations so it can never
drift from the schema, but it is a first-class object: edges can be listed
and audited, and a deletion closure is planned by traversal before anything
is written. Plans execute inside one transaction; any failure rolls back the
whole closure.
"""
from collections import OrderedDict
from dataclasses import dataclass, field as dataclass_field
from typing import Dict, List, Optional, Tuple

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, models, router, transaction
from django.utils import timezone

from apps.core.exceptions import CascadeFailure, DeletionRestricted
from apps.core.observability.events import log_cascade_executed, log_integrity_violation
from apps.core.observability.logging import get_sanitized_logger

logger = get_sanitized_logger(__name__)

CASCADE = 'cascade'
SET_NULL = 'set_null'
RESTRICT = 'restrict'

_POLICIES = {
    models.CASCADE: CASCADE,
    models.SET_NULL: SET_NULL,
    models.PROTECT: RESTRICT,
    models.RESTRICT: RESTRICT,
}


@dataclass(frozen=True)
class Edge:
    """One foreign key seen from the referenced (parent) side."""
    parent: type
    child: type
    field: models.Field
    policy: str

    def __str__(self):
        return f'{self.child._meta.label}.{self.field.name} -> {self.parent._meta.label} [{self.policy}]'


@dataclass
class DeletionPlan:
    """
    Closure of a deletion, computed before any write.

    deletions is ordered dependents-first: every row appears before the rows
    it references, so batches can be deleted in order.
    """
    root: models.Model
    deletions: 'OrderedDict[Tuple[type, int], None]' = dataclass_field(default_factory=OrderedDict)
    nullifications: Dict[Edge, set] = dataclass_field(default_factory=dict)
    blockers: Dict[Edge, set] = dataclass_field(default_factory=dict)

    def will_delete(self, model, pk):
        return (model, pk) in self.deletions

    @property
    def delete_count(self):
        return len(self.deletions)

    @property
    def nullify_count(self):
        return sum(len(pks) for pks in self.nullifications.values())

    def batches(self):
        """Group deletions per model, keeping dependents-first order."""
        grouped = OrderedDict()
        for model, pk in self.deletions:
            grouped.setdefault(model, []).append(pk)
        return grouped

    def summary(self):
        """{'app_label.Model': rows} for every model in the closure."""
        return {model._meta.label: len(pks) for model, pks in self.batches().items()}

    def finalize(self):
        """Drop nullifications and blockers for rows that are deleted anyway."""
        for bucket in (self.nullifications, self.blockers):
            for edge in list(bucket):
                survivors = {pk for pk in bucket[edge] if not self.will_delete(edge.child, pk)}
                if survivors:
                    bucket[edge] = survivors
                else:
                    del bucket[edge]
        return self

    def describe(self):
        """Human-readable lines used by the deletion_plan command."""
        lines = [f'delete {label}: {count}' for label, count in self.summary().items()]
        for edge, pks in self.nullifications.items():
            lines.append(f'nullify {edge.child._meta.label}.{edge.field.name}: {len(pks)}')
        for edge, pks in self.blockers.items():
            lines.append(f'blocked by {edge}: {len(pks)}')
        return lines


class DeletionGraph:
    """
    Directed graph of deletion policies over the clinic models.

    Usage:
        graph = DeletionGraph.from_models(apps.get_models())
        graph.edges_into(Patient)
        plan = graph.plan(patient)
        graph.delete(patient)
    """

    def __init__(self, edges):
        self._edges: List[Edge] = list(edges)
        self._into: Dict[type, List[Edge]] = {}
        for edge in self._edges:
            self._into.setdefault(edge.parent, []).append(edge)

    @classmethod
    def from_models(cls, model_classes):
        edges = []
        for model in model_classes:
            for field in model._meta.concrete_fields:
                if not field.is_relation or field.remote_field is None:
                    continue
                on_delete = field.remote_field.on_delete
                policy = _POLICIES.get(on_delete)
                if policy is None:
                    raise ImproperlyConfigured(
                        f'{model._meta.label}.{field.name} uses an unsupported on_delete '
                        f'({getattr(on_delete, "__name__", on_delete)})'
                    )
                if policy == SET_NULL and not field.null:
                    raise ImproperlyConfigured(
                        f'{model._meta.label}.{field.name} is SET_NULL but not nullable'
                    )
                edges.append(Edge(parent=field.related_model, child=model, field=field, policy=policy))
        return cls(edges)

    @property
    def edges(self):
        return list(self._edges)

    def edges_into(self, model):
        """Edges whose parent is model (who depends on it, and how)."""
        return list(self._into.get(model, []))

    def policy(self, child, field_name):
        """Policy of child.field_name, e.g. policy(Appointment, 'patient') == 'cascade'."""
        for edge in self._edges:
            if edge.child is child and edge.field.name == field_name:
                return edge.policy
        raise KeyError(f'{child._meta.label}.{field_name} is not a foreign key in the graph')

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self, instance, using=None):
        """Compute the full deletion closure of instance without writing."""
        if instance.pk is None:
            raise ValueError(
                f"{instance._meta.object_name} object can't be deleted because its "
                f"{instance._meta.pk.attname} attribute is set to None."
            )
        using = using or router.db_for_write(type(instance), instance=instance)
        plan = DeletionPlan(root=instance)
        seen = {(type(instance), instance.pk)}
        self._visit(plan, type(instance), [instance.pk], seen, using)
        return plan.finalize()

    def _visit(self, plan, model, pks, seen, using):
        for edge in self.edges_into(model):
            child_manager = edge.child._base_manager.using(using)
            child_pks = list(
                child_manager.filter(**{f'{edge.field.name}__in': pks}).values_list('pk', flat=True)
            )
            if not child_pks:
                continue
            if edge.policy == CASCADE:
                fresh = [pk for pk in child_pks if (edge.child, pk) not in seen]
                seen.update((edge.child, pk) for pk in fresh)
                if fresh:
                    self._visit(plan, edge.child, fresh, seen, using)
            elif edge.policy == SET_NULL:
                plan.nullifications.setdefault(edge, set()).update(child_pks)
            else:
                plan.blockers.setdefault(edge, set()).update(child_pks)
        # Post-order: dependents were recorded first
        for pk in pks:
            plan.deletions[(model, pk)] = None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def delete(self, instance, using=None):
        """
        Delete instance and its closure atomically.

        Returns:
            (rows_deleted, {'app_label.Model': rows}) like QuerySet.delete()

        Raises:
            DeletionRestricted: a restrict edge still has surviving dependents
            CascadeFailure: the database refused part of the closure
        """
        using = using or router.db_for_write(type(instance), instance=instance)
        plan = None
        try:
            with transaction.atomic(using=using):
                plan = self.plan(instance, using=using)
                if plan.blockers:
                    raise DeletionRestricted(
                        {
                            f'{edge.child._meta.label}.{edge.field.name}': (
                                f'{len(pks)} dependent row(s) still reference this '
                                f'{edge.parent._meta.verbose_name}.'
                            )
                            for edge, pks in plan.blockers.items()
                        },
                        model_label=instance._meta.label,
                    )
                result = self._execute(plan, using)
        except CascadeFailure as violation:
            self._report_failure(plan, instance, violation)
            raise
        except DatabaseError as exc:
            violation = CascadeFailure(
                {'__all__': f'Deletion rolled back: {exc}'},
                model_label=instance._meta.label,
            )
            self._report_failure(plan, instance, violation)
            raise violation from exc

        log_cascade_executed(plan)
        setattr(instance, instance._meta.pk.attname, None)
        return result

    def _execute(self, plan, using):
        now = timezone.now()
        for edge, pks in plan.nullifications.items():
            changes = {edge.field.attname: None}
            if any(f.name == 'updated_at' for f in edge.child._meta.concrete_fields):
                changes['updated_at'] = now
            edge.child._base_manager.using(using).filter(pk__in=pks).update(**changes)

        total = 0
        per_model = {}
        for model, pks in plan.batches().items():
            count, _details = model._base_manager.using(using).filter(pk__in=pks).delete()
            total += count
            per_model[model._meta.label] = per_model.get(model._meta.label, 0) + count
        return total, per_model

    def _report_failure(self, plan, instance, violation):
        log_integrity_violation(violation, instance)
        if plan is not None:
            result = 'restricted' if isinstance(violation, DeletionRestricted) else 'failure'
            log_cascade_executed(plan, result=result)
        else:
            logger.error(
                'Deletion failed before planning completed',
                extra={'event': 'cascade_delete', 'entity_type': instance._meta.label},
            )


_graph: Optional[DeletionGraph] = None


def get_deletion_graph():
    """Graph over every installed clinic model, built once the app registry is ready."""
    global _graph
    if _graph is None:
        from apps.core.models import IntegrityModel

        _graph = DeletionGraph.from_models(
            model for model in apps.get_models() if issubclass(model, IntegrityModel)
        )
    return _graph
