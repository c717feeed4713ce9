"""
Management command to preview the closure of a deletion without writing.
"""
from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from apps.core.deletion import get_deletion_graph


class Command(BaseCommand):
    help = 'Dry-run a deletion: list rows that would be deleted, nullified or block it'

    def add_arguments(self, parser):
        parser.add_argument('model', help='Model label, e.g. clinical.Patient')
        parser.add_argument('pk', help='Primary key of the row to delete')
        parser.add_argument(
            '--edges',
            action='store_true',
            help='Also list every foreign key that points at the model',
        )

    def handle(self, *args, **options):
        try:
            model = apps.get_model(options['model'])
        except (LookupError, ValueError) as exc:
            raise CommandError(f'Unknown model {options["model"]!r}') from exc

        try:
            instance = model._base_manager.get(pk=options['pk'])
        except (model.DoesNotExist, ValueError) as exc:
            raise CommandError(f'{model._meta.label} {options["pk"]!r} does not exist') from exc

        graph = get_deletion_graph()

        if options['edges']:
            for edge in graph.edges_into(model):
                self.stdout.write(str(edge))

        plan = graph.plan(instance)
        for line in plan.describe():
            self.stdout.write(line)

        if plan.blockers:
            self.stdout.write(self.style.WARNING('Deletion would be restricted'))
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'{plan.delete_count} row(s) would be deleted, '
                    f'{plan.nullify_count} nullified'
                )
            )
