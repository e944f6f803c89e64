"""
Enrollment store: group membership and subject enrollment replacement.
"""
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from core.testing import CourseFixture, auth_header, make_user
from courses.models import Subject
from groups.models import Group
from groups.services import (
    get_enrolled_subjects,
    get_groups_for_student,
    is_student_enrolled,
    set_group_students,
    set_student_group,
    set_subject_groups,
)


class EnrollmentServiceTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.g2 = Group.objects.create(name="G2")

    def test_groups_for_student(self):
        self.assertEqual(get_groups_for_student(self.fx.student.pk), {self.fx.group.pk})
        self.assertEqual(get_groups_for_student(self.fx.outsider.pk), set())
        self.assertEqual(get_groups_for_student(self.fx.teacher.pk), set())

    def test_enrolled_subjects(self):
        self.assertEqual(get_enrolled_subjects(self.fx.group.pk), {self.fx.subject.pk})
        self.assertEqual(get_enrolled_subjects(self.g2.pk), set())

    def test_is_student_enrolled(self):
        self.assertTrue(is_student_enrolled(self.fx.student.pk, self.fx.subject.pk))
        self.assertFalse(is_student_enrolled(self.fx.outsider.pk, self.fx.subject.pk))

    def test_set_group_students_replaces_members(self):
        set_group_students(self.fx.group, [self.fx.outsider.pk, self.fx.teacher.pk])
        self.fx.student.refresh_from_db()
        self.fx.outsider.refresh_from_db()
        self.fx.teacher.refresh_from_db()
        self.assertIsNone(self.fx.student.group)
        self.assertEqual(self.fx.outsider.group, self.fx.group)
        self.assertIsNone(self.fx.teacher.group)

    def test_set_group_students_moves_from_other_group(self):
        set_group_students(self.g2, [self.fx.student.pk])
        self.fx.student.refresh_from_db()
        self.assertEqual(self.fx.student.group, self.g2)
        self.assertFalse(is_student_enrolled(self.fx.student.pk, self.fx.subject.pk))

    def test_set_student_group(self):
        set_student_group(self.fx.outsider, self.g2.pk)
        self.assertEqual(get_groups_for_student(self.fx.outsider.pk), {self.g2.pk})
        set_student_group(self.fx.outsider, None)
        self.assertEqual(get_groups_for_student(self.fx.outsider.pk), set())

    def test_set_subject_groups_full_replacement(self):
        set_subject_groups(self.fx.subject, [self.g2.pk, 99999])
        self.assertEqual(set(self.fx.subject.enrolled_groups.all()), {self.g2})
        self.assertFalse(is_student_enrolled(self.fx.student.pk, self.fx.subject.pk))

    def test_deleting_group_detaches_students(self):
        self.fx.group.delete()
        self.fx.student.refresh_from_db()
        self.assertIsNone(self.fx.student.group)
        self.assertTrue(User.objects.filter(pk=self.fx.student.pk).exists())


class AdminGroupApiTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.client = APIClient()
        self.client.credentials(**auth_header(self.fx.admin))

    def test_create_and_duplicate_name(self):
        res = self.client.post("/api/admin/groups/", {"name": "G2"}, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["studentCount"], 0)
        res = self.client.post("/api/admin/groups/", {"name": "g1"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("name", res.data["errors"])

    def test_replace_students(self):
        extra = make_user("extra@test.local", User.ROLE_STUDENT)
        res = self.client.put(
            f"/api/admin/groups/{self.fx.group.pk}/students", {"studentIds": [extra.pk]}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual([s["id"] for s in res.data], [extra.pk])

    def test_replace_students_rejects_non_list(self):
        res = self.client.put(
            f"/api/admin/groups/{self.fx.group.pk}/students", {"studentIds": 5}, format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_subject_groups_endpoint(self):
        g2 = Group.objects.create(name="G2")
        self.client.credentials(**auth_header(self.fx.teacher))
        res = self.client.put(
            f"/api/manage/subjects/{self.fx.subject.pk}/groups", {"groupIds": [g2.pk]}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        selected = {g["name"]: g["selected"] for g in res.data}
        self.assertEqual(selected, {"G1": False, "G2": True})
        self.assertEqual(list(Subject.objects.get(pk=self.fx.subject.pk).enrolled_groups.all()), [g2])

    def test_missing_group_404(self):
        self.assertEqual(self.client.get("/api/admin/groups/99999").status_code, 404)
