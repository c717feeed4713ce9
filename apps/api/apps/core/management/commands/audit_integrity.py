"""
Management command to audit stored rows for dangling foreign keys.
"""
from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from apps.core.integrity import audit_references
from apps.core.models import IntegrityModel
from apps.core.observability.events import log_domain_event


class Command(BaseCommand):
    help = 'Report foreign keys that do not resolve to an existing row'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fail-on-error',
            action='store_true',
            help='Exit with an error when dangling references are found',
        )

    def handle(self, *args, **options):
        models_to_scan = [m for m in apps.get_models() if issubclass(m, IntegrityModel)]
        findings = audit_references(models_to_scan)

        if not findings:
            self.stdout.write(
                self.style.SUCCESS(f'No dangling references in {len(models_to_scan)} tables')
            )
            return

        total = 0
        for label, field_name, pks in findings:
            total += len(pks)
            preview = ', '.join(str(pk) for pk in pks[:10])
            suffix = ' ...' if len(pks) > 10 else ''
            self.stdout.write(
                self.style.ERROR(f'{label}.{field_name}: {len(pks)} dangling row(s) [{preview}{suffix}]')
            )

        log_domain_event(
            'integrity_audit',
            result='warning',
            dangling_rows=total,
            fields=[f'{label}.{field_name}' for label, field_name, _ in findings],
        )

        if options['fail_on_error']:
            raise CommandError(f'{total} dangling reference(s) found')
