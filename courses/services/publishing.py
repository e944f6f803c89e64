"""
Publishing rule engine.

request_status_change(item, requested_status) checks the structural
preconditions of a status transition and, when they hold, writes the new
status. Rejection is a normal outcome returned as a value with a reason that
names every unmet condition. Nothing cascades: children and parents keep
their own status.

Preconditions for "published":
  - Lecture: a file is attached
  - Test: at least one question
  - Subject: at least one lecture, at least one test, and at least one of
    its tests has a question
Any other status allowed for the kind is accepted unconditionally.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from assessments.models import Question, Test
from courses.models import Lecture, Subject
from courses.services.access import get_item

logger = logging.getLogger(__name__)

REASON_LECTURE_NO_FILE = 'lecture has no file'
REASON_TEST_NO_QUESTIONS = 'test has no questions'
REASON_SUBJECT_NO_LECTURES = 'subject has no lectures'
REASON_SUBJECT_NO_TESTS = 'subject has no tests'
REASON_SUBJECT_TESTS_EMPTY = 'tests have no questions'


@dataclass
class StatusChangeResult:
    accepted: bool
    status: str
    reason: Optional[str] = None

    def as_dict(self):
        data = {'accepted': self.accepted, 'status': self.status}
        if self.reason:
            data['reason'] = self.reason
        return data


def _kind_label(item):
    return type(item).__name__.lower()


def _unmet_conditions(item):
    """Reasons a transition to published is not allowed (empty list = allowed)."""
    if isinstance(item, Lecture):
        return [] if item.has_file else [REASON_LECTURE_NO_FILE]

    if isinstance(item, Test):
        has_questions = Question.objects.filter(test_id=item.pk).exists()
        return [] if has_questions else [REASON_TEST_NO_QUESTIONS]

    if isinstance(item, Subject):
        reasons = []
        if not Lecture.objects.filter(subject_id=item.pk).exists():
            reasons.append(REASON_SUBJECT_NO_LECTURES)
        if not Test.objects.filter(subject_id=item.pk).exists():
            reasons.append(REASON_SUBJECT_NO_TESTS)
        elif not Question.objects.filter(test__subject_id=item.pk).exists():
            reasons.append(REASON_SUBJECT_TESTS_EMPTY)
        return reasons

    raise TypeError(f'Unsupported content item: {type(item).__name__}')


def check_status_change(item, requested_status):
    """Evaluate a transition without writing anything."""
    allowed = type(item).Status.values
    if requested_status not in allowed:
        return StatusChangeResult(
            accepted=False,
            status=item.status,
            reason=f"unsupported status '{requested_status}' for {_kind_label(item)}",
        )
    if requested_status == type(item).Status.PUBLISHED:
        reasons = _unmet_conditions(item)
        if reasons:
            return StatusChangeResult(accepted=False, status=item.status, reason='; '.join(reasons))
    return StatusChangeResult(accepted=True, status=requested_status)


def lock_subject(subject_id):
    """
    Row-lock a subject inside the caller's transaction.
    Content edits that can break a publishing precondition (lecture delete,
    question save or delete, test delete) take this lock, as does a subject
    status change, so the two serialize.
    """
    return Subject.objects.select_for_update().filter(pk=subject_id).first()


def request_status_change(item, requested_status):
    """
    Check preconditions and persist the new status in one transaction.
    The owning subject row is locked before the item row, the same order
    content edits use, so a concurrent delete cannot slip between the check
    and the write.
    """
    model = type(item)
    subject_id = item.pk if isinstance(item, Subject) else item.subject_id
    with transaction.atomic():
        lock_subject(subject_id)
        locked = model.objects.select_for_update().get(pk=item.pk)
        result = check_status_change(locked, requested_status)
        if result.accepted and locked.status != requested_status:
            locked.status = requested_status
            update_fields = ['status']
            if hasattr(locked, 'updated_at'):
                update_fields.append('updated_at')
            locked.save(update_fields=update_fields)

    if result.accepted:
        item.status = result.status
        logger.info('%s %s status -> %s', _kind_label(item), item.pk, result.status)
    else:
        logger.info('%s %s status change to %s rejected: %s',
                    _kind_label(item), item.pk, requested_status, result.reason)
    return result


def request_status_change_by_kind(kind, item_id, requested_status):
    """Kind/id entry point; None when the item does not exist."""
    item = get_item(kind, item_id)
    if item is None:
        return None
    return request_status_change(item, requested_status)
