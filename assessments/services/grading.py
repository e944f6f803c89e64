"""
Grading engine.

submit() completes an attempt exactly once:
  1. lock and re-read the attempt; already completed -> existing result, no rescoring
  2. stamp end_time and is_completed before any scoring
  3. over time_limit + grace -> score 0, no answers stored
  4. otherwise grade each answered question all-or-nothing:
       Single   -> exactly one selected and it is the correct option
       Multiple -> selected set equals the correct set
  5. score = sum of awarded points
All writes happen in the same transaction.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.db import transaction

from assessments.models import Question, StudentAnswer, TestAttempt
from core.utils import now

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    attempt: TestAttempt
    already_submitted: bool = False
    late: bool = False

    @property
    def score(self):
        return self.attempt.score

    @property
    def completed_at(self):
        return self.attempt.end_time


def grace_period():
    return timedelta(seconds=settings.ATTEMPT_GRACE_SECONDS)


def is_late(start_time, end_time, limit_minutes, grace=None):
    """True when a timed attempt ran longer than limit + grace. Untimed tests are never late."""
    if not limit_minutes or limit_minutes <= 0:
        return False
    grace = grace_period() if grace is None else grace
    return (end_time - start_time) > timedelta(minutes=limit_minutes) + grace


def is_answer_correct(question_type, correct_ids, selected_ids):
    """All-or-nothing correctness; no partial credit."""
    correct_ids = set(correct_ids)
    selected_ids = set(selected_ids)
    if question_type == Question.Type.SINGLE:
        return len(selected_ids) == 1 and len(correct_ids) == 1 and selected_ids == correct_ids
    if question_type == Question.Type.MULTIPLE:
        return bool(correct_ids) and selected_ids == correct_ids
    return False


def normalize_answers(payload):
    """
    Request body answers -> {question_id: set(option_ids)}.
    Accepts [{"questionId", "selectedOptionIds"}] (snake_case too) or a
    {question_id: [option_ids]} mapping. Unparseable entries are skipped.
    """
    answers = {}
    if isinstance(payload, dict):
        items = [{'questionId': k, 'selectedOptionIds': v} for k, v in payload.items()]
    elif isinstance(payload, list):
        items = payload
    else:
        return answers

    for item in items:
        if not isinstance(item, dict):
            continue
        qid = item.get('questionId', item.get('question_id'))
        selected = item.get('selectedOptionIds', item.get('selected_option_ids'))
        if selected is None:
            selected = item.get('optionIds', item.get('option_ids', []))
        if isinstance(selected, (int, str)):
            selected = [selected]
        try:
            qid = int(qid)
            selected = {int(o) for o in selected or []}
        except (TypeError, ValueError):
            continue
        answers.setdefault(qid, set()).update(selected)
    return answers


def _grade(attempt, answers):
    total = 0
    questions = attempt.test.questions.prefetch_related('options').order_by('id')
    for question in questions:
        selected = answers.get(question.id)
        if not selected:
            continue
        options = list(question.options.all())
        correct_ids = {o.id for o in options if o.is_correct}
        awarded = question.points if is_answer_correct(question.type, correct_ids, selected) else 0
        answer = StudentAnswer.objects.create(
            attempt=attempt,
            question=question,
            points_awarded=awarded,
        )
        answer.selected_options.set([o for o in options if o.id in selected])
        total += awarded
    return total


def submit(attempt_id, student, answers):
    """
    answers: {question_id: set(option_ids)} (see normalize_answers).
    Returns None when the attempt does not exist or belongs to someone else.
    """
    with transaction.atomic():
        attempt = (
            TestAttempt.objects.select_for_update()
            .filter(pk=attempt_id, student_id=student.pk)
            .first()
        )
        if attempt is None:
            logger.warning('submit attempt_id=%s user_id=%s attempt_not_found', attempt_id, student.pk)
            return None

        if attempt.is_completed:
            logger.warning('submit attempt_id=%s user_id=%s already_submitted', attempt.pk, student.pk)
            return SubmissionResult(attempt=attempt, already_submitted=True)

        test = attempt.test
        attempt.end_time = now()
        attempt.is_completed = True

        late = is_late(attempt.start_time, attempt.end_time, test.time_limit_minutes)
        if late:
            attempt.score = 0
        else:
            attempt.score = _grade(attempt, answers or {})
        attempt.save(update_fields=['end_time', 'is_completed', 'score'])

    if late:
        logger.warning(
            'submit attempt_id=%s user_id=%s late elapsed=%s limit_min=%s score=0',
            attempt.pk, student.pk, attempt.end_time - attempt.start_time, test.time_limit_minutes,
        )
    else:
        logger.info('submit attempt_id=%s user_id=%s score=%s', attempt.pk, student.pk, attempt.score)
    return SubmissionResult(attempt=attempt, late=late)
