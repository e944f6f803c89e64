"""
Subject administration: teacher assignment in both directions.
Each call fully replaces the association set (clear, then add).
"""
import logging

from django.db import transaction

from accounts.models import User
from courses.models import Subject

logger = logging.getLogger(__name__)


@transaction.atomic
def set_subject_teachers(subject, teacher_ids):
    teachers = list(User.objects.teachers().filter(pk__in=set(teacher_ids or [])))
    subject.teachers.clear()
    subject.teachers.add(*teachers)
    logger.info('Subject %s teachers replaced: %s', subject.pk, [t.pk for t in teachers])
    return teachers


@transaction.atomic
def set_teacher_subjects(teacher, subject_ids):
    subjects = list(Subject.objects.filter(pk__in=set(subject_ids or [])))
    teacher.assigned_subjects.clear()
    teacher.assigned_subjects.add(*subjects)
    logger.info('Teacher %s subjects replaced: %s', teacher.pk, [s.pk for s in subjects])
    return subjects
