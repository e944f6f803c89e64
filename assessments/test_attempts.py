"""
Attempt lifecycle: resume the open attempt, create within the ceiling, block past it.
"""
import random
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone

from assessments.models import Test as Quiz
from assessments.models import TestAttempt as Attempt
from assessments.services import attempts as attempt_services
from assessments.services.attempts import (
    BLOCKED_MAX_ATTEMPTS,
    attempt_deadline,
    attempts_left,
    present_questions,
    start_or_resume,
)
from assessments.services.grading import submit
from core.testing import CourseFixture, make_question
from courses.models import Subject


class StartOrResumeTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()

    def test_first_start_creates_attempt(self):
        result = start_or_resume(self.fx.student, self.fx.test.pk)
        self.assertFalse(result.blocked)
        self.assertTrue(result.created)
        self.assertFalse(result.attempt.is_completed)
        self.assertEqual(result.attempts_used, 0)
        self.assertEqual(len(result.questions), 1)

    def test_second_start_resumes_same_attempt(self):
        first = start_or_resume(self.fx.student, self.fx.test.pk)
        second = start_or_resume(self.fx.student, self.fx.test.pk)
        self.assertFalse(second.created)
        self.assertEqual(second.attempt.pk, first.attempt.pk)
        self.assertEqual(second.attempt.start_time, first.attempt.start_time)
        self.assertEqual(Attempt.objects.filter(student=self.fx.student).count(), 1)

    def test_new_attempt_after_submit(self):
        first = start_or_resume(self.fx.student, self.fx.test.pk)
        submit(first.attempt.pk, self.fx.student, {})
        second = start_or_resume(self.fx.student, self.fx.test.pk)
        self.assertTrue(second.created)
        self.assertNotEqual(second.attempt.pk, first.attempt.pk)
        self.assertEqual(second.attempts_used, 1)

    def test_blocked_after_max_attempts(self):
        self.fx.test.max_attempts = 2
        self.fx.test.save()
        for _ in range(2):
            started = start_or_resume(self.fx.student, self.fx.test.pk)
            submit(started.attempt.pk, self.fx.student, {})
        result = start_or_resume(self.fx.student, self.fx.test.pk)
        self.assertTrue(result.blocked)
        self.assertEqual(result.blocked_reason, BLOCKED_MAX_ATTEMPTS)
        self.assertIsNone(result.attempt)
        self.assertEqual(result.attempts_used, 2)
        self.assertEqual(Attempt.objects.filter(student=self.fx.student).count(), 2)

    def test_open_attempt_resumed_even_at_ceiling(self):
        self.fx.test.max_attempts = 1
        self.fx.test.save()
        first = start_or_resume(self.fx.student, self.fx.test.pk)
        again = start_or_resume(self.fx.student, self.fx.test.pk)
        self.assertFalse(again.blocked)
        self.assertEqual(again.attempt.pk, first.attempt.pk)

    def test_unlimited_attempts(self):
        for _ in range(4):
            started = start_or_resume(self.fx.student, self.fx.test.pk)
            submit(started.attempt.pk, self.fx.student, {})
        self.assertTrue(start_or_resume(self.fx.student, self.fx.test.pk).created)

    def test_not_visible_returns_none(self):
        self.assertIsNone(start_or_resume(self.fx.outsider, self.fx.test.pk))
        self.assertIsNone(start_or_resume(self.fx.student, 99999))
        self.assertIsNone(start_or_resume(self.fx.teacher, self.fx.test.pk))

    def test_draft_test_returns_none(self):
        self.fx.test.status = Quiz.Status.DRAFT
        self.fx.test.save()
        self.assertIsNone(start_or_resume(self.fx.student, self.fx.test.pk))

    def test_subject_status_does_not_block_start(self):
        self.fx.subject.status = Subject.Status.HIDDEN
        self.fx.subject.save()
        self.assertIsNotNone(start_or_resume(self.fx.student, self.fx.test.pk).attempt)

    def test_lost_race_returns_winning_attempt(self):
        winner = Attempt.objects.create(test=self.fx.test, student=self.fx.student)
        # First lookup misses the winner, the insert then hits the unique constraint
        with mock.patch.object(
            attempt_services, "get_open_attempt", side_effect=[None, winner]
        ), mock.patch.object(
            Attempt.objects, "create", side_effect=IntegrityError("uniq_open_attempt_per_student_test")
        ):
            result = start_or_resume(self.fx.student, self.fx.test.pk)
        self.assertFalse(result.created)
        self.assertEqual(result.attempt.pk, winner.pk)

    def test_open_attempt_unique_at_database_level(self):
        Attempt.objects.create(test=self.fx.test, student=self.fx.student)
        with self.assertRaises(IntegrityError):
            Attempt.objects.create(test=self.fx.test, student=self.fx.student)


class PresentationTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()

    def test_no_correctness_flags(self):
        questions = present_questions(self.fx.test)
        self.assertEqual(questions[0]["questionId"], self.fx.question.pk)
        for option in questions[0]["options"]:
            self.assertEqual(set(option), {"id", "text"})

    def test_questions_keep_order_options_shuffled(self):
        make_question(self.fx.test, count=5)
        rng = random.Random(7)
        questions = present_questions(self.fx.test, rng=rng)
        self.assertEqual([q["questionId"] for q in questions], sorted(q["questionId"] for q in questions))
        expected = [{"id": o.id, "text": o.text} for o in self.fx.test.questions.order_by("id")[1].options.all()]
        self.assertCountEqual(questions[1]["options"], expected)

    def test_attempts_left(self):
        self.assertIsNone(attempts_left(self.fx.test, 3))
        self.fx.test.max_attempts = 2
        self.assertEqual(attempts_left(self.fx.test, 1), 1)
        self.assertEqual(attempts_left(self.fx.test, 5), 0)

    def test_deadline(self):
        attempt = Attempt(test=self.fx.test, student=self.fx.student, start_time=timezone.now())
        self.assertIsNone(attempt_deadline(attempt, self.fx.test))
        self.fx.test.time_limit_minutes = 15
        self.assertEqual((attempt_deadline(attempt, self.fx.test) - attempt.start_time).total_seconds(), 900)
