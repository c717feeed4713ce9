"""
Authz models: users, staff, notifications

A User is an account, not a person record. Patients, doctors and staff link
to at most one user through an optional one-to-one association that is
cleared (SET NULL) when the account is deleted.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models

from apps.core.models import IntegrityModel


# ============================================================================
# Enums
# ============================================================================

class RoleChoices(models.TextChoices):
    """Account roles"""
    ADMIN = 'admin', 'Admin'
    DOCTOR = 'doctor', 'Doctor'
    NURSE = 'nurse', 'Nurse'
    RECEPTIONIST = 'receptionist', 'Receptionist'
    PATIENT = 'patient', 'Patient'


class NotificationTypeChoices(models.TextChoices):
    APPOINTMENT = 'Appointment', 'Appointment'
    LAB_RESULT = 'Lab Result', 'Lab Result'
    BILL = 'Bill', 'Bill'
    GENERAL = 'General', 'General'
    REMINDER = 'Reminder', 'Reminder'


# ============================================================================
# User Management
# ============================================================================

class UserManager(BaseUserManager):
    """Manager for username-based accounts."""

    def create_user(self, username, email, password=None, role=RoleChoices.PATIENT, **extra_fields):
        if not username:
            raise ValueError('Username is required')
        if not email:
            raise ValueError('Email is required')
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, role=role, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, email, password=None, **extra_fields):
        extra_fields.setdefault('is_active', True)
        return self.create_user(username, email, password, role=RoleChoices.ADMIN, **extra_fields)


class User(AbstractBaseUser, IntegrityModel):
    """
    Clinic account.

    The salted hash produced by set_password() is stored in the
    password_hash column; plaintext is never persisted.
    """
    user_id = models.AutoField(primary_key=True)
    username = models.CharField(max_length=50, unique=True)
    password = models.CharField(max_length=255, db_column='password_hash')
    email = models.EmailField(max_length=100, unique=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=20, choices=RoleChoices.choices)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Not part of the clinic schema
    last_login = None

    objects = UserManager()

    USERNAME_FIELD = 'username'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['email', 'role']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=RoleChoices.values),
                name='users_role_valid'
            ),
        ]

    def __str__(self):
        return self.username


# ============================================================================
# Staff
# ============================================================================

class Staff(IntegrityModel):
    """
    Non-doctor staff member.

    department is optional and RESTRICT: a department cannot be removed
    while staff are assigned to it.
    """
    staff_id = models.AutoField(primary_key=True)
    user = models.OneToOneField(
        User,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='staff_profile'
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    department = models.ForeignKey(
        'reference.Department',
        on_delete=models.PROTECT,
        blank=True,
        null=True,
        related_name='staff'
    )
    position = models.CharField(max_length=100)
    hire_date = models.DateField()
    salary = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)

    class Meta:
        db_table = 'staff'
        verbose_name = 'Staff Member'
        verbose_name_plural = 'Staff'

    def __str__(self):
        return f"{self.first_name} {self.last_name} ({self.position})"


# ============================================================================
# Notifications
# ============================================================================

class Notification(IntegrityModel):
    notification_id = models.AutoField(primary_key=True)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    title = models.CharField(max_length=100)
    message = models.TextField()
    notification_type = models.CharField(max_length=20, choices=NotificationTypeChoices.choices)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(notification_type__in=NotificationTypeChoices.values),
                name='notifications_type_valid'
            ),
        ]

    def __str__(self):
        return f"{self.notification_type}: {self.title}"

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.save(update_fields=['is_read'])
