"""
Reference vocabulary: in-memory, immutable views of the lookup tables.

Each lookup model (one with a `lookup_field`) is loaded once into a
read-only mapping name -> LookupEntry. Services resolve statuses,
specialties and departments by name through here instead of querying the
database on every write.

The cache is process-wide. It is dropped automatically when a reference row
is saved or deleted (see apps.reference.signals) and can be reloaded
explicitly with refresh().

Usage:
    from apps.reference.vocabulary import vocabulary

    status = vocabulary.get(AppointmentStatus, 'Scheduled')
    status.pk, status.name, status.description
"""
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Optional, Tuple

from django.conf import settings

from apps.core.exceptions import ReferentialViolation
from apps.core.observability.logging import get_sanitized_logger

logger = get_sanitized_logger(__name__)


@dataclass(frozen=True)
class LookupEntry:
    """Immutable descriptor of one lookup row."""
    pk: int
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class _Table:
    by_name: 'MappingProxyType[str, LookupEntry]'
    by_pk: 'MappingProxyType[int, LookupEntry]'


class ReferenceVocabulary:
    """Thread-safe cache of lookup tables keyed by model class."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tables: Dict[type, _Table] = {}

    @staticmethod
    def _enabled():
        return getattr(settings, 'CLINIC_REFERENCE_CACHE_ENABLED', True)

    @staticmethod
    def _lookup_field(model):
        field_name = getattr(model, 'lookup_field', None)
        if not field_name:
            raise TypeError(f'{model._meta.label} is not a lookup model (no lookup_field)')
        return field_name

    def _load(self, model):
        field_name = self._lookup_field(model)
        has_description = any(f.name == 'description' for f in model._meta.concrete_fields)
        columns = ['pk', field_name] + (['description'] if has_description else [])
        entries = [
            LookupEntry(pk=row[0], name=row[1], description=row[2] if has_description else None)
            for row in model._base_manager.values_list(*columns).order_by('pk')
        ]
        logger.debug(
            'Loaded reference vocabulary',
            extra={'entity_type': model._meta.label, 'count': len(entries)},
        )
        return _Table(
            by_name=MappingProxyType({entry.name: entry for entry in entries}),
            by_pk=MappingProxyType({entry.pk: entry for entry in entries}),
        )

    def table(self, model):
        """Read-only mapping name -> LookupEntry for a lookup model."""
        return self._table(model).by_name

    def _table(self, model):
        if not self._enabled():
            return self._load(model)
        table = self._tables.get(model)
        if table is None:
            with self._lock:
                table = self._tables.get(model)
                if table is None:
                    table = self._load(model)
                    self._tables[model] = table
        return table

    def get(self, model, name):
        """
        Resolve a lookup row by name.

        Raises:
            ReferentialViolation: no row of model carries that name
        """
        entry = self._table(model).by_name.get(name)
        if entry is None:
            raise ReferentialViolation(
                {self._lookup_field(model): f'Unknown {model._meta.verbose_name} {name!r}.'},
                model_label=model._meta.label,
            )
        return entry

    def contains(self, model, name):
        return name in self._table(model).by_name

    def names(self, model) -> Tuple[str, ...]:
        return tuple(self._table(model).by_name)

    def name_for(self, model, pk):
        """Name of the row with primary key pk, or None."""
        entry = self._table(model).by_pk.get(pk)
        return entry.name if entry is not None else None

    def refresh(self, model=None):
        """Reload one lookup table (or every cached one) from the database."""
        with self._lock:
            models_to_load = [model] if model is not None else list(self._tables)
            for lookup_model in models_to_load:
                self._tables[lookup_model] = self._load(lookup_model)

    def invalidate(self, model=None):
        """Drop one cached table (or all); the next access reloads lazily."""
        with self._lock:
            if model is None:
                self._tables.clear()
            else:
                self._tables.pop(model, None)


vocabulary = ReferenceVocabulary()
