"""
Bootstrap rows for the reference tier.

Transactional rows reference these by foreign key, so they must exist
before any appointment, doctor or staff member can be created. Used by the
0002_seed_reference_data migration and the seed_reference_data command.
"""
APPOINTMENT_STATUSES = [
    ('Scheduled', 'Appointment has been scheduled'),
    ('Confirmed', 'Appointment has been confirmed'),
    ('Completed', 'Appointment has been completed'),
    ('Cancelled', 'Appointment has been cancelled'),
    ('No-Show', 'Patient did not show up for the appointment'),
    ('Rescheduled', 'Appointment has been rescheduled'),
]

MEDICAL_SPECIALTIES = [
    ('Cardiology', 'Diagnosis and treatment of heart disorders'),
    ('Dermatology', 'Diagnosis and treatment of skin disorders'),
    ('Orthopedics', 'Diagnosis and treatment of musculoskeletal disorders'),
    ('Pediatrics', 'Medical care of infants, children, and adolescents'),
    ('Neurology', 'Diagnosis and treatment of disorders of the nervous system'),
    ('General Medicine', 'Comprehensive healthcare for adults'),
    ('Gynecology', 'Medical care of the female reproductive system'),
    ('Ophthalmology', 'Diagnosis and treatment of eye disorders'),
]

DEPARTMENTS = [
    ('Cardiology Department', 'Heart treatment and care', 'Building A, Floor 2'),
    ('Dermatology Department', 'Skin care and treatment', 'Building A, Floor 1'),
    ('Orthopedics Department', 'Bone and joint care', 'Building B, Floor 1'),
    ('Pediatrics Department', 'Child healthcare', 'Building C, Floor 1'),
    ('Neurology Department', 'Brain and nervous system care', 'Building B, Floor 2'),
    ('Emergency Department', '24/7 emergency care services', 'Building D, Ground Floor'),
    ('Laboratory', 'Medical testing and diagnostics', 'Building E, Ground Floor'),
    ('Radiology', 'Imaging services', 'Building E, Floor 1'),
]


def seed(apps_registry=None):
    """
    Insert the bootstrap rows that are missing.

    Idempotent - safe to run multiple times; existing rows are left as they
    are. Pass the migration's app registry when called from a migration.

    Returns:
        {'app_label.Model': rows_created}
    """
    if apps_registry is None:
        from django.apps import apps as apps_registry

    AppointmentStatus = apps_registry.get_model('reference', 'AppointmentStatus')
    MedicalSpecialty = apps_registry.get_model('reference', 'MedicalSpecialty')
    Department = apps_registry.get_model('reference', 'Department')

    created = {
        'reference.AppointmentStatus': 0,
        'reference.MedicalSpecialty': 0,
        'reference.Department': 0,
    }

    for name, description in APPOINTMENT_STATUSES:
        _obj, was_created = AppointmentStatus.objects.get_or_create(
            status_name=name, defaults={'description': description}
        )
        created['reference.AppointmentStatus'] += int(was_created)

    for name, description in MEDICAL_SPECIALTIES:
        _obj, was_created = MedicalSpecialty.objects.get_or_create(
            specialty_name=name, defaults={'description': description}
        )
        created['reference.MedicalSpecialty'] += int(was_created)

    for name, description, location in DEPARTMENTS:
        _obj, was_created = Department.objects.get_or_create(
            department_name=name, defaults={'description': description, 'location': location}
        )
        created['reference.Department'] += int(was_created)

    return created


def unseed(apps_registry):
    """Remove bootstrap rows nothing references any more (migration reverse)."""
    from django.db.models import ProtectedError

    lookups = [
        ('AppointmentStatus', 'status_name', [name for name, _ in APPOINTMENT_STATUSES]),
        ('MedicalSpecialty', 'specialty_name', [name for name, _ in MEDICAL_SPECIALTIES]),
        ('Department', 'department_name', [name for name, _, _ in DEPARTMENTS]),
    ]
    for model_name, field_name, names in lookups:
        model = apps_registry.get_model('reference', model_name)
        for obj in model.objects.filter(**{f'{field_name}__in': names}):
            try:
                obj.delete()
            except ProtectedError:
                continue
