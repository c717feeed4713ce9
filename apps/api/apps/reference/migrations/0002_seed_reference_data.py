# Bootstrap rows for the reference tier (statuses, specialties, departments)

from django.db import migrations

from apps.reference.bootstrap import seed, unseed


def seed_reference_data(apps, schema_editor):
    """Idempotent - safe to run multiple times."""
    seed(apps)


def unseed_reference_data(apps, schema_editor):
    unseed(apps)


class Migration(migrations.Migration):

    dependencies = [
        ('reference', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(
            seed_reference_data,
            unseed_reference_data
        ),
    ]
