"""
Publishing rules:
- lecture needs a file, has no draft
- test needs at least one question
- subject needs lectures, tests and a test with questions; all reasons reported together
- hiding is always accepted; nothing cascades
"""
from unittest import mock

from django.test import TestCase

from assessments.models import Test as Quiz
from core.testing import make_question
from courses.models import Lecture, Subject
from courses.services import publishing
from courses.services.publishing import (
    REASON_LECTURE_NO_FILE,
    REASON_SUBJECT_NO_LECTURES,
    REASON_SUBJECT_NO_TESTS,
    REASON_SUBJECT_TESTS_EMPTY,
    REASON_TEST_NO_QUESTIONS,
    request_status_change,
    request_status_change_by_kind,
)


class LecturePublishingTests(TestCase):
    def setUp(self):
        self.subject = Subject.objects.create(title="S")

    def test_publish_without_file_rejected(self):
        lecture = Lecture.objects.create(subject=self.subject, title="L")
        result = request_status_change(lecture, Lecture.Status.PUBLISHED)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, REASON_LECTURE_NO_FILE)
        lecture.refresh_from_db()
        self.assertEqual(lecture.status, Lecture.Status.HIDDEN)

    def test_publish_with_file_accepted(self):
        lecture = Lecture.objects.create(subject=self.subject, title="L", file="lectures/a.pdf")
        result = request_status_change(lecture, Lecture.Status.PUBLISHED)
        self.assertTrue(result.accepted)
        lecture.refresh_from_db()
        self.assertEqual(lecture.status, Lecture.Status.PUBLISHED)

    def test_blank_file_path_counts_as_missing(self):
        lecture = Lecture.objects.create(subject=self.subject, title="L", file="   ")
        self.assertFalse(request_status_change(lecture, Lecture.Status.PUBLISHED).accepted)

    def test_hide_always_accepted(self):
        lecture = Lecture.objects.create(
            subject=self.subject, title="L", file="lectures/a.pdf", status=Lecture.Status.PUBLISHED
        )
        lecture.file = ""
        lecture.save()
        self.assertTrue(request_status_change(lecture, Lecture.Status.HIDDEN).accepted)

    def test_draft_not_supported_for_lecture(self):
        lecture = Lecture.objects.create(subject=self.subject, title="L", file="lectures/a.pdf")
        result = request_status_change(lecture, "draft")
        self.assertFalse(result.accepted)
        self.assertIn("unsupported status", result.reason)


class TestPublishingTests(TestCase):
    def setUp(self):
        self.subject = Subject.objects.create(title="S")
        self.quiz = Quiz.objects.create(subject=self.subject, title="T")

    def test_publish_without_questions_rejected(self):
        result = request_status_change(self.quiz, Quiz.Status.PUBLISHED)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, REASON_TEST_NO_QUESTIONS)
        self.quiz.refresh_from_db()
        self.assertEqual(self.quiz.status, Quiz.Status.DRAFT)

    def test_publish_with_question_accepted(self):
        make_question(self.quiz)
        self.assertTrue(request_status_change(self.quiz, Quiz.Status.PUBLISHED).accepted)
        self.quiz.refresh_from_db()
        self.assertEqual(self.quiz.status, Quiz.Status.PUBLISHED)

    def test_status_change_locks_owning_subject(self):
        make_question(self.quiz)
        with mock.patch.object(publishing, "lock_subject", wraps=publishing.lock_subject) as lock:
            request_status_change(self.quiz, Quiz.Status.PUBLISHED)
        lock.assert_called_once_with(self.subject.pk)

    def test_draft_and_hidden_always_accepted(self):
        self.assertTrue(request_status_change(self.quiz, Quiz.Status.HIDDEN).accepted)
        self.assertTrue(request_status_change(self.quiz, Quiz.Status.DRAFT).accepted)

    def test_unknown_status_rejected_not_raised(self):
        result = request_status_change(self.quiz, "archived")
        self.assertFalse(result.accepted)
        self.assertIn("archived", result.reason)


class SubjectPublishingTests(TestCase):
    def setUp(self):
        self.subject = Subject.objects.create(title="S")

    def test_empty_subject_reports_lectures_and_tests(self):
        result = request_status_change(self.subject, Subject.Status.PUBLISHED)
        self.assertFalse(result.accepted)
        self.assertIn(REASON_SUBJECT_NO_LECTURES, result.reason)
        self.assertIn(REASON_SUBJECT_NO_TESTS, result.reason)

    def test_no_lectures_and_empty_tests_reported_together(self):
        Quiz.objects.create(subject=self.subject, title="T")
        result = request_status_change(self.subject, Subject.Status.PUBLISHED)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, f"{REASON_SUBJECT_NO_LECTURES}; {REASON_SUBJECT_TESTS_EMPTY}")

    def test_tests_without_questions_rejected(self):
        Lecture.objects.create(subject=self.subject, title="L", file="lectures/a.pdf")
        Quiz.objects.create(subject=self.subject, title="T1")
        Quiz.objects.create(subject=self.subject, title="T2")
        result = request_status_change(self.subject, Subject.Status.PUBLISHED)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, REASON_SUBJECT_TESTS_EMPTY)

    def test_one_test_with_questions_is_enough(self):
        Lecture.objects.create(subject=self.subject, title="L")
        Quiz.objects.create(subject=self.subject, title="empty")
        make_question(Quiz.objects.create(subject=self.subject, title="full"))
        result = request_status_change(self.subject, Subject.Status.PUBLISHED)
        self.assertTrue(result.accepted)
        self.subject.refresh_from_db()
        self.assertEqual(self.subject.status, Subject.Status.PUBLISHED)

    def test_publish_does_not_cascade(self):
        lecture = Lecture.objects.create(subject=self.subject, title="L", file="lectures/a.pdf")
        quiz = Quiz.objects.create(subject=self.subject, title="T")
        make_question(quiz)
        self.assertTrue(request_status_change(self.subject, Subject.Status.PUBLISHED).accepted)
        lecture.refresh_from_db()
        quiz.refresh_from_db()
        self.assertEqual(lecture.status, Lecture.Status.HIDDEN)
        self.assertEqual(quiz.status, Quiz.Status.DRAFT)

    def test_hide_does_not_cascade(self):
        lecture = Lecture.objects.create(
            subject=self.subject, title="L", file="lectures/a.pdf", status=Lecture.Status.PUBLISHED
        )
        self.subject.status = Subject.Status.PUBLISHED
        self.subject.save()
        self.assertTrue(request_status_change(self.subject, Subject.Status.HIDDEN).accepted)
        lecture.refresh_from_db()
        self.assertEqual(lecture.status, Lecture.Status.PUBLISHED)

    def test_recheck_on_every_transition(self):
        lecture = Lecture.objects.create(subject=self.subject, title="L")
        quiz = Quiz.objects.create(subject=self.subject, title="T")
        question, _ = make_question(quiz)
        self.assertTrue(request_status_change(self.subject, Subject.Status.PUBLISHED).accepted)
        self.assertTrue(request_status_change(self.subject, Subject.Status.DRAFT).accepted)
        question.delete()
        lecture.delete()
        self.assertFalse(request_status_change(self.subject, Subject.Status.PUBLISHED).accepted)


class StatusChangeByKindTests(TestCase):
    def test_missing_item_returns_none(self):
        self.assertIsNone(request_status_change_by_kind("subject", 999, "published"))

    def test_unknown_kind_returns_none(self):
        self.assertIsNone(request_status_change_by_kind("course", 1, "published"))

    def test_dispatches_by_kind(self):
        subject = Subject.objects.create(title="S")
        lecture = Lecture.objects.create(subject=subject, title="L", file="lectures/a.pdf")
        result = request_status_change_by_kind("lecture", lecture.pk, "published")
        self.assertEqual(result.as_dict(), {"accepted": True, "status": "published"})
