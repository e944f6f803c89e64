"""
Question authoring. Options are rebuilt on every save: the old ones are
deleted and the submitted list is inserted with order_index = position.

Once a test has attempts its existing questions are frozen: editing or
deleting them would drop the options and answers graded scores point at.
New questions can still be added.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from assessments.models import AnswerOption, Question, Test, TestAttempt
from assessments.validation import validate_question
from courses.services.publishing import lock_subject

logger = logging.getLogger(__name__)

REASON_TEST_HAS_ATTEMPTS = 'test already has attempts; its existing questions cannot be changed'


class QuestionLocked(Exception):
    """Existing question of a test that students have already attempted."""

    def __init__(self, reason=REASON_TEST_HAS_ATTEMPTS):
        super().__init__(reason)
        self.reason = reason


def _lock_test(test):
    # subject before test, the order status changes lock in
    lock_subject(test.subject_id)
    Test.objects.select_for_update().filter(pk=test.pk).first()


def _ensure_editable(test, question):
    if TestAttempt.objects.filter(test_id=test.pk).exists():
        logger.info('Question %s on test %s is locked by existing attempts', question.pk, test.pk)
        raise QuestionLocked()


@transaction.atomic
def save_question(test, text, question_type, points, options, question=None):
    """
    Create (question=None) or update a question of `test`.
    options: list of {'text', 'is_correct'} in display order.
    Raises django ValidationError listing every problem, QuestionLocked when
    updating a question whose test already has attempts.
    """
    errors = validate_question(text, question_type, points, options)
    if errors:
        raise ValidationError(errors)

    _lock_test(test)
    if question is None:
        question = Question(test=test)
    else:
        _ensure_editable(test, question)
    question.text = text.strip()
    question.type = question_type
    question.points = int(points)
    question.save()

    question.options.all().delete()
    AnswerOption.objects.bulk_create([
        AnswerOption(
            question=question,
            text=o['text'].strip(),
            is_correct=bool(o.get('is_correct')),
            order_index=index,
        )
        for index, o in enumerate(options)
    ])
    logger.info('Question %s saved on test %s (%s options)', question.pk, test.pk, len(options))
    return question


@transaction.atomic
def delete_question(question):
    """Delete a question; QuestionLocked when its test already has attempts."""
    test = question.test
    _lock_test(test)
    _ensure_editable(test, question)
    question_id = question.pk
    question.delete()
    logger.info('Question %s deleted from test %s', question_id, test.pk)
