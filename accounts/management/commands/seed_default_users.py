"""
Create the default admin, teacher and student accounts if they are missing.
Existing accounts are left untouched.
Usage: python manage.py seed_default_users [--admin-password ...] [--teacher-password ...] [--student-password ...]
"""
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

User = get_user_model()

DEFAULT_USERS = [
    ('admin@gmail.com', 'admin', User.ROLE_ADMIN, 'Main Administrator'),
    ('teacher@gmail.com', 'teacher', User.ROLE_TEACHER, 'Default Teacher'),
    ('student@gmail.com', 'student', User.ROLE_STUDENT, 'Default Student'),
]


class Command(BaseCommand):
    help = 'Create default admin/teacher/student accounts when they do not exist'

    def add_arguments(self, parser):
        for _, _, role, _ in DEFAULT_USERS:
            parser.add_argument(f'--{role}-password', dest=f'{role}_password', default=None)

    def handle(self, *args, **options):
        created = 0
        for email, default_password, role, full_name in DEFAULT_USERS:
            if User.objects.filter(email__iexact=email).exists():
                self.stdout.write(f'Exists: {email}')
                continue
            password = options.get(f'{role}_password') or default_password
            User.objects.create_user(
                email=email,
                password=password,
                full_name=full_name,
                role=role,
                is_staff=role == User.ROLE_ADMIN,
                is_superuser=role == User.ROLE_ADMIN,
            )
            created += 1
            self.stdout.write(self.style.SUCCESS(f'Created {role}: {email}'))
        self.stdout.write(self.style.SUCCESS(f'Done. Created {created} user(s).'))
