"""
Attempt lifecycle: start a new attempt, resume the open one, or refuse when
the attempt ceiling is reached.

Per (student, test):
  open attempt exists              -> returned unchanged (same timer)
  completed < max_attempts / no max -> new attempt created
  completed >= max_attempts         -> blocked, "max attempts reached"

A second concurrent start that loses the race on the open-attempt unique
constraint gets the winner's attempt back instead of an error.
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from assessments.models import Test, TestAttempt
from core.utils import now
from courses.services.access import can_view

logger = logging.getLogger(__name__)

BLOCKED_MAX_ATTEMPTS = 'max attempts reached'


@dataclass
class AttemptStart:
    test: Test
    attempt: Optional[TestAttempt] = None
    blocked_reason: Optional[str] = None
    attempts_used: int = 0
    created: bool = False
    questions: list = field(default_factory=list)

    @property
    def blocked(self):
        return self.blocked_reason is not None


def get_open_attempt(student, test):
    return TestAttempt.objects.filter(student=student, test=test, is_completed=False).first()


def completed_attempts(student, test):
    return TestAttempt.objects.filter(student=student, test=test, is_completed=True)


def attempts_left(test, used):
    """Remaining attempts, or None when unlimited."""
    if test.max_attempts is None:
        return None
    return max(test.max_attempts - used, 0)


def attempt_deadline(attempt, test):
    """start + limit, or None for untimed tests. The grace period is not included."""
    if not test.has_time_limit:
        return None
    return attempt.start_time + timedelta(minutes=test.time_limit_minutes)


def present_questions(test, rng=None):
    """
    Questions in their fixed order, options shuffled on every call.
    Correctness flags are never included.
    """
    rng = rng or random
    questions = []
    for q in test.questions.prefetch_related('options').order_by('id'):
        options = [{'id': o.id, 'text': o.text} for o in q.options.all()]
        rng.shuffle(options)
        questions.append({
            'questionId': q.id,
            'text': q.text,
            'type': q.type,
            'points': q.points,
            'options': options,
        })
    return questions


def get_startable_test(student, test_id):
    """The test when the student may start it (published and enrolled), else None."""
    if not getattr(student, 'is_student', False):
        return None
    test = Test.objects.select_related('subject').filter(pk=test_id).first()
    if test is None or test.status != Test.Status.PUBLISHED:
        return None
    if not can_view(student, test):
        return None
    return test


def start_or_resume(student, test_id, rng=None):
    """
    Returns None when the test is missing or not visible to the student;
    otherwise an AttemptStart that is either blocked or carries the attempt
    and its presented questions.
    """
    test = get_startable_test(student, test_id)
    if test is None:
        logger.info('start_or_resume test_id=%s user_id=%s not_visible', test_id, student.pk)
        return None

    with transaction.atomic():
        # Serializes concurrent starts of the same student
        get_user_model().objects.select_for_update().filter(pk=student.pk).first()

        attempt = get_open_attempt(student, test)
        used = completed_attempts(student, test).count()
        created = False
        if attempt is None:
            if test.max_attempts is not None and used >= test.max_attempts:
                logger.info(
                    'start_or_resume test_id=%s user_id=%s blocked used=%s max=%s',
                    test.pk, student.pk, used, test.max_attempts,
                )
                return AttemptStart(test=test, blocked_reason=BLOCKED_MAX_ATTEMPTS, attempts_used=used)
            try:
                with transaction.atomic():
                    attempt = TestAttempt.objects.create(
                        test=test,
                        student=student,
                        start_time=now(),
                        is_completed=False,
                        score=0,
                    )
                created = True
            except IntegrityError:
                attempt = get_open_attempt(student, test)
                if attempt is None:
                    raise
                logger.warning(
                    'start_or_resume test_id=%s user_id=%s duplicate_start attempt_id=%s',
                    test.pk, student.pk, attempt.pk,
                )

    if created:
        logger.info('Attempt %s started test_id=%s user_id=%s', attempt.pk, test.pk, student.pk)
    else:
        logger.info('Attempt %s resumed test_id=%s user_id=%s', attempt.pk, test.pk, student.pk)

    return AttemptStart(
        test=test,
        attempt=attempt,
        attempts_used=used,
        created=created,
        questions=present_questions(test, rng=rng),
    )


def attempt_history(student, test):
    """Completed attempts, newest first."""
    return completed_attempts(student, test).order_by('-end_time', '-id')
