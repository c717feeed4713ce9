# Initial clinical schema: patients, doctors, scheduling, records and associations

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


GENDERS = [('Male', 'Male'), ('Female', 'Female'), ('Other', 'Other')]

BLOOD_TYPES = [
    ('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-'),
]

DAYS = [
    ('Monday', 'Monday'), ('Tuesday', 'Tuesday'), ('Wednesday', 'Wednesday'),
    ('Thursday', 'Thursday'), ('Friday', 'Friday'), ('Saturday', 'Saturday'),
    ('Sunday', 'Sunday'),
]

APPOINTMENT_TYPES = [
    ('Regular Checkup', 'Regular Checkup'),
    ('Follow-up', 'Follow-up'),
    ('Emergency', 'Emergency'),
    ('Consultation', 'Consultation'),
    ('Procedure', 'Procedure'),
]

SEVERITIES = [('Mild', 'Mild'), ('Moderate', 'Moderate'), ('Severe', 'Severe')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('authz', '0001_initial'),
        ('reference', '0001_initial'),
    ]

    operations = [
        # Patient
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('patient_id', models.AutoField(primary_key=True, serialize=False)),
                ('first_name', models.CharField(max_length=50)),
                ('last_name', models.CharField(max_length=50)),
                ('date_of_birth', models.DateField()),
                ('gender', models.CharField(choices=GENDERS, max_length=10)),
                ('blood_type', models.CharField(blank=True, choices=BLOOD_TYPES, max_length=3, null=True)),
                ('address', models.CharField(blank=True, max_length=255, null=True)),
                ('city', models.CharField(blank=True, max_length=50, null=True)),
                ('state', models.CharField(blank=True, max_length=50, null=True)),
                ('postal_code', models.CharField(blank=True, max_length=20, null=True)),
                ('emergency_contact_name', models.CharField(blank=True, max_length=100, null=True)),
                ('emergency_contact_phone', models.CharField(blank=True, max_length=20, null=True)),
                ('insurance_provider', models.CharField(blank=True, max_length=100, null=True)),
                ('insurance_policy_number', models.CharField(blank=True, max_length=50, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='patient_profile', to='authz.user')),
            ],
            options={
                'verbose_name': 'Patient',
                'verbose_name_plural': 'Patients',
                'db_table': 'patients',
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('gender__in', ['Male', 'Female', 'Other'])),
                        name='patients_gender_valid',
                    ),
                    models.CheckConstraint(
                        condition=models.Q(('blood_type__isnull', True), ('blood_type__in', ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']), _connector='OR'),
                        name='patients_blood_type_valid',
                    ),
                ],
            },
        ),

        # Doctor
        migrations.CreateModel(
            name='Doctor',
            fields=[
                ('doctor_id', models.AutoField(primary_key=True, serialize=False)),
                ('first_name', models.CharField(max_length=50)),
                ('last_name', models.CharField(max_length=50)),
                ('license_number', models.CharField(max_length=50, unique=True)),
                ('years_of_experience', models.IntegerField(blank=True, null=True)),
                ('biography', models.TextField(blank=True, null=True)),
                ('consultation_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='doctor_profile', to='authz.user')),
                ('specialty', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='doctors', to='reference.medicalspecialty')),
            ],
            options={
                'verbose_name': 'Doctor',
                'verbose_name_plural': 'Doctors',
                'db_table': 'doctors',
            },
        ),

        # DoctorAvailability
        migrations.CreateModel(
            name='DoctorAvailability',
            fields=[
                ('availability_id', models.AutoField(primary_key=True, serialize=False)),
                ('day_of_week', models.CharField(choices=DAYS, max_length=10)),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('is_available', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='availability', to='clinical.doctor')),
            ],
            options={
                'verbose_name': 'Doctor Availability',
                'verbose_name_plural': 'Doctor Availability',
                'db_table': 'doctor_availability',
                'constraints': [
                    models.UniqueConstraint(fields=('doctor', 'day_of_week', 'start_time', 'end_time'), name='unique_doctor_schedule'),
                    models.CheckConstraint(
                        condition=models.Q(('day_of_week__in', ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'])),
                        name='doctor_availability_day_valid',
                    ),
                ],
            },
        ),

        # Appointment
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('appointment_id', models.AutoField(primary_key=True, serialize=False)),
                ('appointment_date', models.DateField()),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('appointment_type', models.CharField(choices=APPOINTMENT_TYPES, max_length=20)),
                ('reason_for_visit', models.TextField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='clinical.patient')),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='clinical.doctor')),
                ('status', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='appointments', to='reference.appointmentstatus')),
            ],
            options={
                'verbose_name': 'Appointment',
                'verbose_name_plural': 'Appointments',
                'db_table': 'appointments',
                'constraints': [
                    models.UniqueConstraint(fields=('doctor', 'appointment_date', 'start_time'), name='unique_appointment'),
                    models.CheckConstraint(
                        condition=models.Q(('appointment_type__in', ['Regular Checkup', 'Follow-up', 'Emergency', 'Consultation', 'Procedure'])),
                        name='appointments_type_valid',
                    ),
                ],
            },
        ),

        # MedicalRecord
        migrations.CreateModel(
            name='MedicalRecord',
            fields=[
                ('record_id', models.AutoField(primary_key=True, serialize=False)),
                ('diagnosis', models.TextField(blank=True, null=True)),
                ('treatment_plan', models.TextField(blank=True, null=True)),
                ('prescription', models.TextField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_records', to='clinical.patient')),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_records', to='clinical.doctor')),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='medical_records', to='clinical.appointment')),
            ],
            options={
                'verbose_name': 'Medical Record',
                'verbose_name_plural': 'Medical Records',
                'db_table': 'medical_records',
            },
        ),

        # Prescription
        migrations.CreateModel(
            name='Prescription',
            fields=[
                ('prescription_id', models.AutoField(primary_key=True, serialize=False)),
                ('dosage', models.CharField(max_length=50)),
                ('frequency', models.CharField(max_length=50)),
                ('duration', models.CharField(max_length=50)),
                ('instructions', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('medical_record', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prescriptions', to='clinical.medicalrecord')),
                ('medication', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='prescriptions', to='reference.medication')),
            ],
            options={
                'verbose_name': 'Prescription',
                'verbose_name_plural': 'Prescriptions',
                'db_table': 'prescriptions',
            },
        ),

        # PatientAllergy
        migrations.CreateModel(
            name='PatientAllergy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('severity', models.CharField(choices=SEVERITIES, max_length=10)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allergies', to='clinical.patient')),
                ('allergy', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='patient_allergies', to='reference.allergy')),
            ],
            options={
                'verbose_name': 'Patient Allergy',
                'verbose_name_plural': 'Patient Allergies',
                'db_table': 'patient_allergies',
                'constraints': [
                    models.UniqueConstraint(fields=('patient', 'allergy'), name='unique_patient_allergy'),
                    models.CheckConstraint(
                        condition=models.Q(('severity__in', ['Mild', 'Moderate', 'Severe'])),
                        name='patient_allergies_severity_valid',
                    ),
                ],
            },
        ),

        # PatientTest
        migrations.CreateModel(
            name='PatientTest',
            fields=[
                ('patient_test_id', models.AutoField(primary_key=True, serialize=False)),
                ('test_date', models.DateField()),
                ('result', models.TextField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tests', to='clinical.patient')),
                ('test', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='patient_tests', to='reference.medicaltest')),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ordered_tests', to='clinical.doctor')),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='patient_tests', to='clinical.appointment')),
            ],
            options={
                'verbose_name': 'Patient Test',
                'verbose_name_plural': 'Patient Tests',
                'db_table': 'patient_tests',
            },
        ),

        # PatientInsurance
        migrations.CreateModel(
            name='PatientInsurance',
            fields=[
                ('insurance_id', models.AutoField(primary_key=True, serialize=False)),
                ('policy_number', models.CharField(max_length=50)),
                ('group_number', models.CharField(blank=True, max_length=50, null=True)),
                ('coverage_start_date', models.DateField()),
                ('coverage_end_date', models.DateField(blank=True, null=True)),
                ('primary_holder_name', models.CharField(blank=True, max_length=100, null=True)),
                ('relationship_to_patient', models.CharField(blank=True, max_length=50, null=True)),
                ('coverage_details', models.TextField(blank=True, null=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='insurance_policies', to='clinical.patient')),
                ('provider', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='policies', to='reference.insuranceprovider')),
            ],
            options={
                'verbose_name': 'Patient Insurance',
                'verbose_name_plural': 'Patient Insurance',
                'db_table': 'patient_insurance',
                'constraints': [
                    models.UniqueConstraint(fields=('patient', 'provider', 'policy_number'), name='unique_patient_policy'),
                ],
            },
        ),

        # DoctorDepartment
        migrations.CreateModel(
            name='DoctorDepartment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='department_links', to='clinical.doctor')),
                ('department', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='doctor_links', to='reference.department')),
            ],
            options={
                'verbose_name': 'Doctor Department',
                'verbose_name_plural': 'Doctor Departments',
                'db_table': 'doctor_departments',
                'constraints': [
                    models.UniqueConstraint(fields=('doctor', 'department'), name='unique_doctor_department'),
                ],
            },
        ),

        # RoomAssignment
        migrations.CreateModel(
            name='RoomAssignment',
            fields=[
                ('assignment_id', models.AutoField(primary_key=True, serialize=False)),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('appointment', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='room_assignment', to='clinical.appointment')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='reference.room')),
            ],
            options={
                'verbose_name': 'Room Assignment',
                'verbose_name_plural': 'Room Assignments',
                'db_table': 'room_assignments',
            },
        ),

        # Feedback
        migrations.CreateModel(
            name='Feedback',
            fields=[
                ('feedback_id', models.AutoField(primary_key=True, serialize=False)),
                ('rating', models.IntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('comments', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='feedback', to='clinical.patient')),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='feedback', to='clinical.appointment')),
                ('doctor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='feedback', to='clinical.doctor')),
            ],
            options={
                'verbose_name': 'Feedback',
                'verbose_name_plural': 'Feedback',
                'db_table': 'feedback',
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(('rating__gte', 1), ('rating__lte', 5)),
                        name='feedback_rating_range',
                    ),
                ],
            },
        ),
    ]
