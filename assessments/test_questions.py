"""
Question rules and the delete-and-reinsert option save.
"""
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from assessments.models import AnswerOption, Question, StudentAnswer
from assessments.models import TestAttempt as Attempt
from assessments.services import questions as question_services
from assessments.services.grading import submit
from assessments.services.questions import QuestionLocked, delete_question, save_question
from assessments.validation import validate_question
from core.testing import CourseFixture


def opts(*flags):
    return [{"text": f"option {i}", "is_correct": flag} for i, flag in enumerate(flags)]


class ValidateQuestionTests(SimpleTestCase):
    def test_valid_single(self):
        self.assertEqual(validate_question("2+2?", "Single", 1, opts(False, True)), [])

    def test_valid_multiple(self):
        self.assertEqual(validate_question("Primes?", "Multiple", 10, opts(True, True, False)), [])

    def test_single_needs_exactly_one_correct(self):
        self.assertIn(
            "single choice requires exactly one correct answer",
            validate_question("Q", "Single", 1, opts(True, True)),
        )
        self.assertIn(
            "single choice requires exactly one correct answer",
            validate_question("Q", "Single", 1, opts(False, False)),
        )

    def test_multiple_needs_a_correct_option(self):
        self.assertEqual(
            validate_question("Q", "Multiple", 1, opts(False, False)),
            ["multiple choice requires at least one correct answer"],
        )

    def test_points_bounds(self):
        for points in (0, 101, "abc", None):
            self.assertIn(
                "points must be between 1 and 100",
                validate_question("Q", "Single", points, opts(True, False)),
            )
        self.assertEqual(validate_question("Q", "Single", 100, opts(True, False)), [])

    def test_option_count_and_text(self):
        errors = validate_question("Q", "Single", 1, [{"text": " ", "is_correct": True}])
        self.assertIn("at least 2 answer options are required", errors)
        self.assertIn("every answer option needs text", errors)

    def test_all_problems_reported_together(self):
        errors = validate_question("", "Essay", 0, [])
        self.assertIn("question text is required", errors)
        self.assertIn("points must be between 1 and 100", errors)
        self.assertIn("at least 2 answer options are required", errors)
        self.assertTrue(any(e.startswith("question type must be one of") for e in errors))


class SaveQuestionTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()

    def test_create_assigns_order_from_position(self):
        question = save_question(self.fx.test, " New ", "Multiple", 4, opts(True, False, True))
        self.assertEqual(question.text, "New")
        options = list(question.options.all())
        self.assertEqual([o.order_index for o in options], [0, 1, 2])
        self.assertEqual([o.is_correct for o in options], [True, False, True])

    def test_update_replaces_options(self):
        old_ids = set(self.fx.question.options.values_list("id", flat=True))
        save_question(self.fx.test, "Edited", "Single", 2, opts(True, False), question=self.fx.question)
        self.fx.question.refresh_from_db()
        self.assertEqual(self.fx.question.text, "Edited")
        self.assertEqual(self.fx.question.points, 2)
        new_ids = set(self.fx.question.options.values_list("id", flat=True))
        self.assertEqual(len(new_ids), 2)
        self.assertFalse(old_ids & new_ids)
        self.assertFalse(AnswerOption.objects.filter(id__in=old_ids).exists())

    def test_invalid_question_changes_nothing(self):
        with self.assertRaises(ValidationError) as ctx:
            save_question(self.fx.test, "Edited", "Single", 2, opts(True, True), question=self.fx.question)
        self.assertIn("single choice requires exactly one correct answer", ctx.exception.messages)
        self.fx.question.refresh_from_db()
        self.assertEqual(self.fx.question.text, "Q1")
        self.assertEqual(self.fx.question.options.count(), 3)

    def test_save_takes_subject_lock(self):
        with mock.patch.object(
            question_services, "lock_subject", wraps=question_services.lock_subject
        ) as lock:
            save_question(self.fx.test, "Edited", "Single", 2, opts(True, False), question=self.fx.question)
        lock.assert_called_once_with(self.fx.subject.pk)

    def test_rejected_create_adds_no_question(self):
        with self.assertRaises(ValidationError):
            save_question(self.fx.test, "Bad", "Multiple", 1, opts(False, False))
        self.assertEqual(Question.objects.filter(test=self.fx.test).count(), 1)


class AttemptedQuestionFreezeTests(TestCase):
    def setUp(self):
        self.fx = CourseFixture()
        self.attempt = Attempt.objects.create(test=self.fx.test, student=self.fx.student)
        correct = self.fx.options[1].pk
        self.assertEqual(submit(self.attempt.pk, self.fx.student, {self.fx.question.pk: {correct}}).score, 5)

    def _answer(self):
        return StudentAnswer.objects.get(attempt=self.attempt, question=self.fx.question)

    def test_edit_refused_and_graded_answer_kept(self):
        with self.assertRaises(QuestionLocked):
            save_question(self.fx.test, "Edited", "Single", 2, opts(True, False), question=self.fx.question)
        self.fx.question.refresh_from_db()
        self.assertEqual(self.fx.question.text, "Q1")
        self.assertEqual(self.fx.question.options.count(), 3)
        self.assertEqual(list(self._answer().selected_options.values_list("id", flat=True)), [self.fx.options[1].pk])

    def test_delete_refused_and_answers_kept(self):
        with self.assertRaises(QuestionLocked):
            delete_question(self.fx.question)
        self.assertTrue(Question.objects.filter(pk=self.fx.question.pk).exists())
        self.assertEqual(StudentAnswer.objects.filter(attempt=self.attempt).count(), 1)
        self.attempt.refresh_from_db()
        self.assertEqual(self.attempt.score, 5)

    def test_open_attempt_also_freezes(self):
        Attempt.objects.filter(pk=self.attempt.pk).delete()
        Attempt.objects.create(test=self.fx.test, student=self.fx.student)
        with self.assertRaises(QuestionLocked):
            delete_question(self.fx.question)

    def test_new_question_still_allowed(self):
        question = save_question(self.fx.test, "Extra", "Single", 1, opts(False, True))
        self.assertEqual(question.test_id, self.fx.test.pk)

    def test_delete_without_attempts(self):
        Attempt.objects.filter(test=self.fx.test).delete()
        delete_question(self.fx.question)
        self.assertFalse(Question.objects.filter(pk=self.fx.question.pk).exists())
