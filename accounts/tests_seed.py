"""
seed_default_users management command.
"""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from accounts.models import User


class SeedDefaultUsersTests(TestCase):
    def test_creates_missing_accounts_once(self):
        call_command("seed_default_users", "--student-password", "s3cret", stdout=StringIO())
        call_command("seed_default_users", stdout=StringIO())
        self.assertEqual(User.objects.filter(email__endswith="@gmail.com").count(), 3)
        admin = User.objects.get(email="admin@gmail.com")
        self.assertTrue(admin.is_admin)
        self.assertTrue(admin.check_password("admin"))
        self.assertTrue(User.objects.get(email="student@gmail.com").check_password("s3cret"))
