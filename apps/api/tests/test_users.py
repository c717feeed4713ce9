"""
Tests for accounts, staff and notifications.
"""
from datetime import date
from decimal import Decimal

import pytest
from django.db import connection

from apps.authz.models import Notification, RoleChoices, Staff, User
from apps.clinical.models import Doctor, Patient
from apps.core.exceptions import DomainViolation, UniquenessViolation

pytestmark = pytest.mark.django_db


class TestUser:

    def test_password_is_stored_hashed(self, user):
        with connection.cursor() as cursor:
            cursor.execute('SELECT password_hash FROM users WHERE user_id = %s', [user.pk])
            (stored,) = cursor.fetchone()

        assert stored != 'correct-horse-battery'
        assert 'correct-horse-battery' not in stored
        assert user.check_password('correct-horse-battery')
        assert not user.check_password('wrong')

    def test_defaults(self, user):
        assert user.is_active is True
        assert user.role == RoleChoices.PATIENT
        assert user.created_at is not None

    def test_unknown_role_is_rejected(self):
        with pytest.raises(DomainViolation) as exc_info:
            User.objects.create_user(
                username='mallory',
                email='mallory@example.com',
                password='secret-pass',
                role='superhero'
            )

        assert 'role' in exc_info.value.errors
        assert not User.objects.filter(username='mallory').exists()

    def test_invalid_email_is_rejected(self):
        with pytest.raises(DomainViolation) as exc_info:
            User.objects.create_user(username='nomail', email='not-an-email', password='secret-pass')

        assert 'email' in exc_info.value.errors

    def test_duplicate_username_is_rejected(self, user):
        with pytest.raises(UniquenessViolation) as exc_info:
            User.objects.create_user(username='jdoe', email='other@example.com', password='secret-pass')

        assert 'username' in exc_info.value.errors

    def test_duplicate_email_is_rejected(self, user):
        with pytest.raises(UniquenessViolation) as exc_info:
            User.objects.create_user(username='jdoe2', email='jdoe@example.com', password='secret-pass')

        assert 'email' in exc_info.value.errors

    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser('root', 'root@example.com', 'secret-pass')

        assert admin.role == RoleChoices.ADMIN

    def test_username_required(self):
        with pytest.raises(ValueError):
            User.objects.create_user(username='', email='x@example.com')


class TestProfileLinks:

    def test_user_links_to_at_most_one_patient(self, user, patient):
        patient.user = user
        patient.save()

        second = Patient(
            user=user,
            first_name='Jane',
            last_name='Twin',
            date_of_birth=date(1985, 4, 12),
            gender='Female'
        )
        with pytest.raises(UniquenessViolation) as exc_info:
            second.save()

        assert 'user' in exc_info.value.errors
        assert Patient.objects.get(user=user) == patient

    def test_user_links_to_at_most_one_doctor(self, user, doctor):
        doctor.user = user
        doctor.save()

        with pytest.raises(UniquenessViolation):
            Doctor.objects.create(
                user=user,
                first_name='Dup',
                last_name='Licate',
                license_number='LIC-DUP'
            )


class TestStaff:

    def test_staff_in_department(self, user, cardiology_department):
        staff = Staff.objects.create(
            user=user,
            first_name='Nora',
            last_name='Nurse',
            department=cardiology_department,
            position='Head Nurse',
            hire_date=date(2020, 3, 1),
            salary=Decimal('52000.00')
        )

        assert list(cardiology_department.staff.all()) == [staff]
        assert user.staff_profile == staff

    def test_hire_date_required(self):
        with pytest.raises(DomainViolation) as exc_info:
            Staff.objects.create(first_name='No', last_name='Date', position='Porter')

        assert list(exc_info.value.errors) == ['hire_date']


class TestNotification:

    def test_mark_read(self, user):
        notification = Notification.objects.create(
            user=user,
            title='Appointment reminder',
            message='See you tomorrow',
            notification_type='Reminder'
        )
        assert notification.is_read is False

        notification.mark_read()

        notification.refresh_from_db()
        assert notification.is_read is True

    def test_unknown_type_is_rejected(self, user):
        with pytest.raises(DomainViolation):
            Notification.objects.create(
                user=user,
                title='Hello',
                message='World',
                notification_type='Spam'
            )

    def test_deleting_user_removes_notifications(self, user):
        Notification.objects.create(user=user, title='t', message='m', notification_type='General')

        user.delete()

        assert not Notification.objects.exists()
