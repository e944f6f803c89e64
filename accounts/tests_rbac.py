"""
Minimal RBAC tests: role-based access control.
- Student token hitting manage/admin endpoints returns 403
- Teacher token hitting student/admin endpoints returns 403
- Login and user administration round trips
"""
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from core.testing import CourseFixture, auth_header
from courses.models import Subject


class RBACTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.client = APIClient()

    def test_student_hitting_manage_endpoint_returns_403(self):
        self.client.credentials(**auth_header(self.fx.student))
        res = self.client.get("/api/manage/subjects")
        self.assertEqual(res.status_code, 403)

    def test_student_hitting_admin_endpoint_returns_403(self):
        self.client.credentials(**auth_header(self.fx.student))
        res = self.client.get("/api/admin/users/")
        self.assertEqual(res.status_code, 403)

    def test_teacher_hitting_student_endpoint_returns_403(self):
        self.client.credentials(**auth_header(self.fx.teacher))
        res = self.client.get("/api/student/subjects")
        self.assertEqual(res.status_code, 403)

    def test_teacher_hitting_admin_endpoint_returns_403(self):
        self.client.credentials(**auth_header(self.fx.teacher))
        res = self.client.get("/api/admin/groups/")
        self.assertEqual(res.status_code, 403)

    def test_teacher_sees_only_assigned_subjects(self):
        Subject.objects.create(title="Unassigned")
        self.client.credentials(**auth_header(self.fx.teacher))
        res = self.client.get("/api/manage/subjects")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([s["id"] for s in res.data], [self.fx.subject.pk])

    def test_no_token_returns_401(self):
        res = self.client.get("/api/auth/me")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["code"], "not_authenticated")


class LoginTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.client = APIClient()

    def test_login_success(self):
        res = self.client.post(
            "/api/auth/login", {"email": "STUDENT@test.local", "password": "pass12345"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn("accessToken", res.data)
        self.assertEqual(res.data["user"]["role"], "student")
        self.assertEqual(res.data["user"]["groupId"], self.fx.group.pk)

    def test_login_wrong_password_returns_401(self):
        res = self.client.post(
            "/api/auth/login", {"email": "student@test.local", "password": "nope"}, format="json"
        )
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["code"], "invalid_credentials")

    def test_login_missing_fields_returns_400(self):
        res = self.client.post("/api/auth/login", {"email": "student@test.local"}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_change_password(self):
        self.client.credentials(**auth_header(self.fx.student))
        res = self.client.post(
            "/api/auth/change-password",
            {"currentPassword": "pass12345", "newPassword": "brand-new-pass"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.fx.student.refresh_from_db()
        self.assertTrue(self.fx.student.check_password("brand-new-pass"))


class AdminUsersTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.client = APIClient()
        self.client.credentials(**auth_header(self.fx.admin))

    def test_create_student_in_group(self):
        res = self.client.post(
            "/api/admin/users/",
            {
                "email": "new@test.local",
                "fullName": "New Student",
                "role": "student",
                "password": "secret",
                "groupId": self.fx.group.pk,
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["groupId"], self.fx.group.pk)
        self.assertEqual(User.objects.get(email="new@test.local").group, self.fx.group)

    def test_create_requires_password(self):
        res = self.client.post(
            "/api/admin/users/",
            {"email": "nopw@test.local", "fullName": "No Password", "role": "student"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("password", res.data["errors"])

    def test_duplicate_email_rejected(self):
        res = self.client.post(
            "/api/admin/users/",
            {"email": "Student@test.local", "fullName": "Dup", "role": "student", "password": "secret"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("email", res.data["errors"])

    def test_teacher_subjects_replaced(self):
        other = Subject.objects.create(title="Geometry")
        res = self.client.put(
            f"/api/admin/users/{self.fx.teacher.pk}",
            {
                "email": self.fx.teacher.email,
                "fullName": "Teacher",
                "role": "teacher",
                "subjectIds": [other.pk],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["subjectIds"], [other.pk])
        self.fx.teacher.refresh_from_db()
        self.assertTrue(self.fx.teacher.check_password("pass12345"))

    def test_admin_cannot_delete_self(self):
        res = self.client.delete(f"/api/admin/users/{self.fx.admin.pk}")
        self.assertEqual(res.status_code, 400)
        self.assertTrue(User.objects.filter(pk=self.fx.admin.pk).exists())

    def test_delete_student(self):
        res = self.client.delete(f"/api/admin/users/{self.fx.outsider.pk}")
        self.assertEqual(res.status_code, 204)
        self.assertFalse(User.objects.filter(pk=self.fx.outsider.pk).exists())
