"""
Lecture lifecycle around file storage.
A Lecture row never points at a file that failed to store, and a stored file
is removed again when its row could not be written.
"""
import logging

from django.db import transaction
from django.utils import timezone

from courses.models import Lecture
from courses.services.publishing import check_status_change, lock_subject
from courses.storage import delete_lecture_file, store_lecture_file

logger = logging.getLogger(__name__)


class LectureRejected(Exception):
    """Requested initial status is not allowed (e.g. published without a file)."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


def create_lecture(subject, title, uploaded=None, status=Lecture.Status.HIDDEN):
    """
    Store the file (if any), then create the row.
    Storage errors propagate with nothing created; a failed insert deletes the stored file.
    """
    draft = Lecture(subject=subject, title=title, status=Lecture.Status.HIDDEN)
    path = store_lecture_file(uploaded) if uploaded is not None else ''
    draft.file = path
    draft.original_filename = getattr(uploaded, 'name', '') or ''

    result = check_status_change(draft, status)
    if not result.accepted:
        delete_lecture_file(path)
        raise LectureRejected(result.reason)
    draft.status = status

    try:
        with transaction.atomic():
            draft.created_at = timezone.now()
            draft.save()
    except Exception:
        logger.exception('Lecture insert failed, removing stored file path=%s', path)
        delete_lecture_file(path)
        raise
    logger.info('Lecture %s created in subject %s file=%s', draft.pk, subject.pk, path or '-')
    return draft


def replace_lecture_file(lecture, uploaded):
    """Store the new file, point the lecture at it, then drop the old file."""
    old_path = lecture.file
    new_path = store_lecture_file(uploaded)
    try:
        with transaction.atomic():
            lecture.file = new_path
            lecture.original_filename = uploaded.name or ''
            lecture.created_at = timezone.now()
            lecture.save(update_fields=['file', 'original_filename', 'created_at'])
    except Exception:
        logger.exception('Lecture %s file update failed, removing path=%s', lecture.pk, new_path)
        lecture.file = old_path
        delete_lecture_file(new_path)
        raise
    delete_lecture_file(old_path)
    return lecture


def delete_lecture(lecture):
    """Delete under the subject lock so a concurrent subject publish sees the result."""
    path = lecture.file
    with transaction.atomic():
        lock_subject(lecture.subject_id)
        lecture.delete()
        transaction.on_commit(lambda: delete_lecture_file(path))


def delete_subject(subject):
    """Delete a subject with its lectures, tests and their stored files."""
    paths = list(subject.lectures.exclude(file='').values_list('file', flat=True))
    subject.delete()
    for path in paths:
        transaction.on_commit(lambda p=path: delete_lecture_file(p))
