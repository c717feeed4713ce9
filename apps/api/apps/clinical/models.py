"""
Clinical models: patient, doctor, availability, appointment, medical records,
prescriptions, tests, allergies, insurance, room assignment, feedback

Deletion policies (see apps.core.deletion):
- everything a patient owns cascades with the patient
- everything a doctor owns cascades with the doctor, except feedback
  (SET NULL, the patient's feedback survives)
- links to an appointment from records, tests and feedback are SET NULL
- lookup rows (status, specialty, medication, test, provider) are RESTRICT
"""
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.exceptions import InvalidStatusTransition, SchedulingConflict
from apps.core.models import IntegrityModel
from apps.core.observability.events import log_appointment_transition
from apps.reference.models import AppointmentStatus
from apps.reference.vocabulary import vocabulary


# ============================================================================
# Enums
# ============================================================================

class GenderChoices(models.TextChoices):
    """Patient gender"""
    MALE = 'Male', 'Male'
    FEMALE = 'Female', 'Female'
    OTHER = 'Other', 'Other'


class BloodTypeChoices(models.TextChoices):
    A_POSITIVE = 'A+', 'A+'
    A_NEGATIVE = 'A-', 'A-'
    B_POSITIVE = 'B+', 'B+'
    B_NEGATIVE = 'B-', 'B-'
    AB_POSITIVE = 'AB+', 'AB+'
    AB_NEGATIVE = 'AB-', 'AB-'
    O_POSITIVE = 'O+', 'O+'
    O_NEGATIVE = 'O-', 'O-'


class DayOfWeekChoices(models.TextChoices):
    MONDAY = 'Monday', 'Monday'
    TUESDAY = 'Tuesday', 'Tuesday'
    WEDNESDAY = 'Wednesday', 'Wednesday'
    THURSDAY = 'Thursday', 'Thursday'
    FRIDAY = 'Friday', 'Friday'
    SATURDAY = 'Saturday', 'Saturday'
    SUNDAY = 'Sunday', 'Sunday'


class AppointmentTypeChoices(models.TextChoices):
    """Appointment types"""
    REGULAR_CHECKUP = 'Regular Checkup', 'Regular Checkup'
    FOLLOW_UP = 'Follow-up', 'Follow-up'
    EMERGENCY = 'Emergency', 'Emergency'
    CONSULTATION = 'Consultation', 'Consultation'
    PROCEDURE = 'Procedure', 'Procedure'


class SeverityChoices(models.TextChoices):
    """Allergy severity"""
    MILD = 'Mild', 'Mild'
    MODERATE = 'Moderate', 'Moderate'
    SEVERE = 'Severe', 'Severe'


# ============================================================================
# Identity
# ============================================================================

class Patient(IntegrityModel):
    """
    Patient demographics and contact data.

    user is an optional account link (SET NULL), never an inheritance.
    insurance_provider/insurance_policy_number are free-text summaries;
    structured coverage lives in PatientInsurance.
    """
    patient_id = models.AutoField(primary_key=True)
    user = models.OneToOneField(
        'authz.User',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='patient_profile'
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=GenderChoices.choices)
    blood_type = models.CharField(max_length=3, choices=BloodTypeChoices.choices, blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=50, blank=True, null=True)
    state = models.CharField(max_length=50, blank=True, null=True)
    postal_code = models.CharField(max_length=20, blank=True, null=True)
    emergency_contact_name = models.CharField(max_length=100, blank=True, null=True)
    emergency_contact_phone = models.CharField(max_length=20, blank=True, null=True)
    insurance_provider = models.CharField(max_length=100, blank=True, null=True)
    insurance_policy_number = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients'
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(gender__in=GenderChoices.values),
                name='patients_gender_valid'
            ),
            models.CheckConstraint(
                condition=models.Q(blood_type__isnull=True) | models.Q(blood_type__in=BloodTypeChoices.values),
                name='patients_blood_type_valid'
            ),
        ]

    def __str__(self):
        return f"{self.first_name} {self.last_name}"


class Doctor(IntegrityModel):
    """
    Doctor profile.

    specialty is RESTRICT: a specialty cannot be removed while doctors hold it.
    """
    doctor_id = models.AutoField(primary_key=True)
    user = models.OneToOneField(
        'authz.User',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='doctor_profile'
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    specialty = models.ForeignKey(
        'reference.MedicalSpecialty',
        on_delete=models.PROTECT,
        blank=True,
        null=True,
        related_name='doctors'
    )
    license_number = models.CharField(max_length=50, unique=True)
    years_of_experience = models.IntegerField(blank=True, null=True)
    biography = models.TextField(blank=True, null=True)
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'doctors'
        verbose_name = 'Doctor'
        verbose_name_plural = 'Doctors'

    def __str__(self):
        return f"Dr. {self.first_name} {self.last_name}"


class DoctorAvailability(IntegrityModel):
    """Weekly working hours of a doctor."""
    availability_id = models.AutoField(primary_key=True)
    doctor = models.ForeignKey(
        'Doctor',
        on_delete=models.CASCADE,
        related_name='availability'
    )
    day_of_week = models.CharField(max_length=10, choices=DayOfWeekChoices.choices)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'doctor_availability'
        verbose_name = 'Doctor Availability'
        verbose_name_plural = 'Doctor Availability'
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'day_of_week', 'start_time', 'end_time'],
                name='unique_doctor_schedule'
            ),
            models.CheckConstraint(
                condition=models.Q(day_of_week__in=DayOfWeekChoices.values),
                name='doctor_availability_day_valid'
            ),
        ]

    def __str__(self):
        return f"{self.doctor} {self.day_of_week} {self.start_time}-{self.end_time}"


# ============================================================================
# Appointments
# ============================================================================

class Appointment(IntegrityModel):
    """
    Patient appointment with a doctor.

    BUSINESS RULES:
    1. A doctor cannot have two appointments with the same date and start
       time (unique_appointment). Violations raise SchedulingConflict.
    2. Status changes on an existing appointment must follow the transition
       table. A new appointment may start in any status.
    """
    appointment_id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(
        'Patient',
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    doctor = models.ForeignKey(
        'Doctor',
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    appointment_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    status = models.ForeignKey(
        'reference.AppointmentStatus',
        on_delete=models.PROTECT,
        related_name='appointments'
    )
    appointment_type = models.CharField(max_length=20, choices=AppointmentTypeChoices.choices)
    reason_for_visit = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    conflict_constraints = {'unique_appointment': SchedulingConflict}

    # BUSINESS RULE: Allowed status transitions (keyed by status_name)
    _ALLOWED_TRANSITIONS = {
        'Scheduled': ['Confirmed', 'Cancelled', 'Rescheduled', 'No-Show'],
        'Confirmed': ['Completed', 'Cancelled', 'Rescheduled', 'No-Show'],
        'Rescheduled': ['Scheduled', 'Confirmed', 'Cancelled'],
        'Completed': [],  # Terminal state
        'Cancelled': [],  # Terminal state
        'No-Show': [],    # Terminal state
    }

    class Meta:
        db_table = 'appointments'
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'appointment_date', 'start_time'],
                name='unique_appointment'
            ),
            models.CheckConstraint(
                condition=models.Q(appointment_type__in=AppointmentTypeChoices.values),
                name='appointments_type_valid'
            ),
        ]

    def __str__(self):
        return f"Appointment {self.appointment_date} {self.start_time} - {self.patient_id}"

    @classmethod
    def allowed_transitions(cls, status_name):
        """Statuses reachable from status_name (CLINIC_APPOINTMENT_TRANSITIONS overrides the default table)."""
        table = getattr(settings, 'CLINIC_APPOINTMENT_TRANSITIONS', None) or cls._ALLOWED_TRANSITIONS
        return list(table.get(status_name, []))

    @property
    def status_name(self):
        if self.status_id is None:
            return None
        return vocabulary.name_for(AppointmentStatus, self.status_id)

    def stored_status_name(self):
        """Status name of the row as currently persisted (None for a new row)."""
        if self.pk is None:
            return None
        status_id = (
            type(self)._base_manager
            .filter(pk=self.pk)
            .values_list('status_id', flat=True)
            .first()
        )
        if status_id is None:
            return None
        return vocabulary.name_for(AppointmentStatus, status_id)

    def check_transition(self, from_status, to_status):
        """
        Raise InvalidStatusTransition unless from_status -> to_status is allowed.
        """
        allowed = self.allowed_transitions(from_status)
        if to_status in allowed:
            return
        if not allowed:
            message = f'Status "{from_status}" is terminal and cannot be changed.'
        else:
            message = (
                f'Transition not allowed: {from_status} -> {to_status}. '
                f'Valid transitions: {", ".join(allowed)}'
            )
        log_appointment_transition(self, from_status, to_status, result='rejected')
        raise InvalidStatusTransition({'status': message}, model_label=self._meta.label)

    def check_business_rules(self):
        if self.pk is None:
            return
        previous = self.stored_status_name()
        if previous is None:
            return
        current = self.status_name
        if current != previous:
            self.check_transition(previous, current)


# ============================================================================
# Medical records
# ============================================================================

class MedicalRecord(IntegrityModel):
    """
    Clinical notes of a visit.

    appointment is SET NULL: the record outlives a deleted appointment.
    """
    record_id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(
        'Patient',
        on_delete=models.CASCADE,
        related_name='medical_records'
    )
    doctor = models.ForeignKey(
        'Doctor',
        on_delete=models.CASCADE,
        related_name='medical_records'
    )
    appointment = models.ForeignKey(
        'Appointment',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='medical_records'
    )
    diagnosis = models.TextField(blank=True, null=True)
    treatment_plan = models.TextField(blank=True, null=True)
    prescription = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medical_records'
        verbose_name = 'Medical Record'
        verbose_name_plural = 'Medical Records'

    def __str__(self):
        return f"Medical record {self.record_id} - patient {self.patient_id}"


class Prescription(IntegrityModel):
    """Dosage, frequency and duration are free text (e.g. '500 mg', 'twice daily')."""
    prescription_id = models.AutoField(primary_key=True)
    medical_record = models.ForeignKey(
        'MedicalRecord',
        on_delete=models.CASCADE,
        related_name='prescriptions'
    )
    medication = models.ForeignKey(
        'reference.Medication',
        on_delete=models.PROTECT,
        related_name='prescriptions'
    )
    dosage = models.CharField(max_length=50)
    frequency = models.CharField(max_length=50)
    duration = models.CharField(max_length=50)
    instructions = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'prescriptions'
        verbose_name = 'Prescription'
        verbose_name_plural = 'Prescriptions'

    def __str__(self):
        return f"{self.medication_id}: {self.dosage} {self.frequency}"


class PatientAllergy(IntegrityModel):
    patient = models.ForeignKey(
        'Patient',
        on_delete=models.CASCADE,
        related_name='allergies'
    )
    allergy = models.ForeignKey(
        'reference.Allergy',
        on_delete=models.CASCADE,
        related_name='patient_allergies'
    )
    severity = models.CharField(max_length=10, choices=SeverityChoices.choices)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patient_allergies'
        verbose_name = 'Patient Allergy'
        verbose_name_plural = 'Patient Allergies'
        constraints = [
            models.UniqueConstraint(
                fields=['patient', 'allergy'],
                name='unique_patient_allergy'
            ),
            models.CheckConstraint(
                condition=models.Q(severity__in=SeverityChoices.values),
                name='patient_allergies_severity_valid'
            ),
        ]

    def __str__(self):
        return f"{self.patient_id} - {self.allergy_id} ({self.severity})"


class PatientTest(IntegrityModel):
    patient_test_id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(
        'Patient',
        on_delete=models.CASCADE,
        related_name='tests'
    )
    test = models.ForeignKey(
        'reference.MedicalTest',
        on_delete=models.PROTECT,
        related_name='patient_tests'
    )
    doctor = models.ForeignKey(
        'Doctor',
        on_delete=models.CASCADE,
        related_name='ordered_tests'
    )
    appointment = models.ForeignKey(
        'Appointment',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='patient_tests'
    )
    test_date = models.DateField()
    result = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patient_tests'
        verbose_name = 'Patient Test'
        verbose_name_plural = 'Patient Tests'

    def __str__(self):
        return f"Test {self.test_id} for patient {self.patient_id} on {self.test_date}"


class PatientInsurance(IntegrityModel):
    """
    Insurance coverage of a patient.

    provider is RESTRICT; (patient, provider, policy_number) is unique.
    """
    insurance_id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(
        'Patient',
        on_delete=models.CASCADE,
        related_name='insurance_policies'
    )
    provider = models.ForeignKey(
        'reference.InsuranceProvider',
        on_delete=models.PROTECT,
        related_name='policies'
    )
    policy_number = models.CharField(max_length=50)
    group_number = models.CharField(max_length=50, blank=True, null=True)
    coverage_start_date = models.DateField()
    coverage_end_date = models.DateField(blank=True, null=True)
    primary_holder_name = models.CharField(max_length=100, blank=True, null=True)
    relationship_to_patient = models.CharField(max_length=50, blank=True, null=True)
    coverage_details = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'patient_insurance'
        verbose_name = 'Patient Insurance'
        verbose_name_plural = 'Patient Insurance'
        constraints = [
            models.UniqueConstraint(
                fields=['patient', 'provider', 'policy_number'],
                name='unique_patient_policy'
            ),
        ]

    def __str__(self):
        return f"Policy {self.insurance_id} (provider {self.provider_id})"


class DoctorDepartment(IntegrityModel):
    doctor = models.ForeignKey(
        'Doctor',
        on_delete=models.CASCADE,
        related_name='department_links'
    )
    department = models.ForeignKey(
        'reference.Department',
        on_delete=models.CASCADE,
        related_name='doctor_links'
    )

    class Meta:
        db_table = 'doctor_departments'
        verbose_name = 'Doctor Department'
        verbose_name_plural = 'Doctor Departments'
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'department'],
                name='unique_doctor_department'
            ),
        ]

    def __str__(self):
        return f"{self.doctor_id} - {self.department_id}"


class RoomAssignment(IntegrityModel):
    """One room per appointment; start/end are full date-times."""
    assignment_id = models.AutoField(primary_key=True)
    appointment = models.OneToOneField(
        'Appointment',
        on_delete=models.CASCADE,
        related_name='room_assignment'
    )
    room = models.ForeignKey(
        'reference.Room',
        on_delete=models.CASCADE,
        related_name='assignments'
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'room_assignments'
        verbose_name = 'Room Assignment'
        verbose_name_plural = 'Room Assignments'

    def __str__(self):
        return f"Room {self.room_id} for appointment {self.appointment_id}"


class Feedback(IntegrityModel):
    """
    Patient feedback; rating must be between 1 and 5.
    """
    feedback_id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(
        'Patient',
        on_delete=models.CASCADE,
        related_name='feedback'
    )
    appointment = models.ForeignKey(
        'Appointment',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='feedback'
    )
    doctor = models.ForeignKey(
        'Doctor',
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='feedback'
    )
    rating = models.IntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comments = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'feedback'
        verbose_name = 'Feedback'
        verbose_name_plural = 'Feedback'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=1, rating__lte=5),
                name='feedback_rating_range'
            ),
        ]

    def __str__(self):
        return f"Feedback {self.feedback_id}: {self.rating}/5"
