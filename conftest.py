"""
Pytest configuration for the entire test suite.

Forces an in-memory SQLite database so tests run without a database server.
"""
from django.conf import settings


def pytest_configure():
    """Configure Django settings for tests."""
    # Force SQLite for tests (faster, no Docker dependency)
    settings.DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',  # In-memory database for speed
        }
    }

    # Fast hashing; password storage itself is covered by test_users.py
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
