"""
Reference signals - keep the vocabulary cache in step with the lookup tables.
"""
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .vocabulary import vocabulary


def _is_lookup(sender):
    return sender._meta.app_label == 'reference' and getattr(sender, 'lookup_field', None)


@receiver(post_save)
@receiver(post_delete)
def on_reference_changed(sender, instance, using=None, **kwargs):
    """
    Drop the cached table of a lookup model whenever one of its rows changes.

    Dropped again on commit so readers in other threads never keep a mapping
    loaded while the write was still in flight.
    """
    if not _is_lookup(sender):
        return
    vocabulary.invalidate(sender)
    transaction.on_commit(lambda: vocabulary.invalidate(sender), using=using)
