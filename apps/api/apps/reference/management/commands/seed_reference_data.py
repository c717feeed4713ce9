"""
Management command to (re)apply the reference-tier bootstrap rows.
"""
from django.core.management.base import BaseCommand

from apps.reference.bootstrap import seed
from apps.reference.vocabulary import vocabulary


class Command(BaseCommand):
    help = 'Insert missing appointment statuses, specialties and departments (idempotent)'

    def handle(self, *args, **options):
        created = seed()
        vocabulary.invalidate()

        for label, count in created.items():
            if count:
                self.stdout.write(
                    self.style.SUCCESS(f'{label}: {count} row(s) created')
                )
            else:
                self.stdout.write(
                    self.style.WARNING(f'{label}: already seeded')
                )
