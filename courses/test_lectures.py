"""
Lecture file lifecycle and the download endpoint.
"""
from unittest import mock

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from core.testing import CourseFixture, auth_header
from courses.models import Lecture
from courses.services import lectures as lecture_services
from courses.services.lectures import (
    LectureRejected,
    create_lecture,
    delete_lecture,
    replace_lecture_file,
)
from courses.storage import LectureFileTooLarge


def pdf(name="notes.pdf", body=b"%PDF-1.4 test"):
    return SimpleUploadedFile(name, body, content_type="application/pdf")


class CreateLectureTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()

    def test_file_stored_with_random_name(self):
        lecture = create_lecture(self.fx.subject, "Week 1", pdf("Week 1.PDF"))
        self.assertTrue(lecture.file.startswith("lectures/"))
        self.assertTrue(lecture.file.endswith(".pdf"))
        self.assertEqual(lecture.original_filename, "Week 1.PDF")
        self.assertEqual(lecture.status, Lecture.Status.HIDDEN)
        self.assertTrue(default_storage.exists(lecture.file))

    def test_publish_on_create_without_file_rejected(self):
        with self.assertRaises(LectureRejected):
            create_lecture(self.fx.subject, "Empty", None, Lecture.Status.PUBLISHED)
        self.assertFalse(Lecture.objects.filter(title="Empty").exists())

    def test_publish_on_create_with_file(self):
        lecture = create_lecture(self.fx.subject, "Ready", pdf(), Lecture.Status.PUBLISHED)
        self.assertEqual(lecture.status, Lecture.Status.PUBLISHED)

    def test_failed_insert_removes_stored_file(self):
        real_delete = lecture_services.delete_lecture_file
        with mock.patch.object(Lecture, "save", side_effect=IntegrityError("boom")), \
                mock.patch.object(lecture_services, "delete_lecture_file", wraps=real_delete) as deleted:
            with self.assertRaises(IntegrityError):
                create_lecture(self.fx.subject, "Broken", pdf())
        path = deleted.call_args[0][0]
        self.assertTrue(path.startswith("lectures/"))
        self.assertFalse(default_storage.exists(path))
        self.assertFalse(Lecture.objects.filter(title="Broken").exists())

    @override_settings(LECTURE_MAX_UPLOAD_MB=0)
    def test_too_large_rejected_before_storing(self):
        with self.assertRaises(LectureFileTooLarge):
            create_lecture(self.fx.subject, "Big", pdf())
        self.assertFalse(Lecture.objects.filter(title="Big").exists())


class ReplaceAndDeleteTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.lecture = create_lecture(self.fx.subject, "Week 1", pdf("old.pdf"))

    def test_replace_drops_old_file(self):
        old_path = self.lecture.file
        replace_lecture_file(self.lecture, pdf("new.pdf"))
        self.lecture.refresh_from_db()
        self.assertNotEqual(self.lecture.file, old_path)
        self.assertEqual(self.lecture.original_filename, "new.pdf")
        self.assertFalse(default_storage.exists(old_path))
        self.assertTrue(default_storage.exists(self.lecture.file))

    def test_delete_removes_file_after_commit(self):
        path = self.lecture.file
        with self.captureOnCommitCallbacks(execute=True):
            delete_lecture(self.lecture)
        self.assertFalse(Lecture.objects.filter(title="Week 1").exists())
        self.assertFalse(default_storage.exists(path))

    def test_delete_takes_subject_lock(self):
        with mock.patch.object(
            lecture_services, "lock_subject", wraps=lecture_services.lock_subject
        ) as lock, self.captureOnCommitCallbacks(execute=True):
            delete_lecture(self.lecture)
        lock.assert_called_once_with(self.fx.subject.pk)


class LectureDownloadApiTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.client = APIClient()
        self.stored = create_lecture(self.fx.subject, "Slides", pdf("slides.pdf"), Lecture.Status.PUBLISHED)

    def _get(self, user, lecture_id):
        self.client.credentials(**auth_header(user))
        return self.client.get(f"/api/student/lectures/{lecture_id}/download")

    def test_enrolled_student_downloads(self):
        response = self._get(self.fx.student, self.stored.pk)
        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment", response["Content-Disposition"])
        self.assertIn("slides.pdf", response["Content-Disposition"])
        self.assertEqual(b"".join(response.streaming_content), b"%PDF-1.4 test")

    def test_outsider_gets_404(self):
        self.assertEqual(self._get(self.fx.outsider, self.stored.pk).status_code, 404)

    def test_hidden_lecture_looks_missing(self):
        self.stored.status = Lecture.Status.HIDDEN
        self.stored.save()
        response = self._get(self.fx.student, self.stored.pk)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "not_found")

    def test_unknown_id_404(self):
        self.assertEqual(self._get(self.fx.student, 99999).status_code, 404)

    def test_missing_stored_file(self):
        response = self._get(self.fx.student, self.fx.lecture.pk)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "file_missing")

    def test_teacher_downloads_hidden_lecture(self):
        self.stored.status = Lecture.Status.HIDDEN
        self.stored.save()
        self.assertEqual(self._get(self.fx.teacher, self.stored.pk).status_code, 200)
        self.assertEqual(self._get(self.fx.other_teacher, self.stored.pk).status_code, 404)

    def test_anonymous_rejected(self):
        response = APIClient().get(f"/api/student/lectures/{self.stored.pk}/download")
        self.assertEqual(response.status_code, 401)


class ManageLectureApiTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.client = APIClient()
        self.client.credentials(**auth_header(self.fx.teacher))

    def test_upload_creates_hidden_lecture(self):
        response = self.client.post(
            f"/api/manage/subjects/{self.fx.subject.pk}/lectures",
            {"title": "Week 2", "file": pdf()},
            format="multipart",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "hidden")
        self.assertTrue(response.data["hasFile"])

    def test_upload_published_without_file_rejected(self):
        response = self.client.post(
            f"/api/manage/subjects/{self.fx.subject.pk}/lectures",
            {"title": "Week 2", "status": "published"},
            format="multipart",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "publish_rejected")

    def test_unassigned_teacher_forbidden(self):
        self.client.credentials(**auth_header(self.fx.other_teacher))
        response = self.client.get(f"/api/manage/subjects/{self.fx.subject.pk}/lectures")
        self.assertEqual(response.status_code, 403)

    def test_missing_subject_404(self):
        response = self.client.get("/api/manage/subjects/99999/lectures")
        self.assertEqual(response.status_code, 404)

    def test_status_endpoint(self):
        lecture = Lecture.objects.create(subject=self.fx.subject, title="No file")
        response = self.client.post(f"/api/manage/lectures/{lecture.pk}/status", {"status": "published"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["accepted"])
        self.assertEqual(response.data["reason"], "lecture has no file")

        response = self.client.post(f"/api/manage/lectures/{self.fx.lecture.pk}/status", {"status": "hidden"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"accepted": True, "status": "hidden"})

    def test_student_cannot_manage(self):
        self.client.credentials(**auth_header(self.fx.student))
        response = self.client.get(f"/api/manage/lectures/{self.fx.lecture.pk}")
        self.assertEqual(response.status_code, 403)
