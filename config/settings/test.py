"""
Test settings: in-memory SQLite, fast hashing, throwaway media root.
"""
import os
import tempfile

os.environ.setdefault('DATABASE_URL', 'sqlite://:memory:')

from .base import *

DEBUG = False

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

MEDIA_ROOT = tempfile.mkdtemp(prefix='coursehub-test-media-')

LOGGING['root']['level'] = 'WARNING'
