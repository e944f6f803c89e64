"""
Group services - enrollment store.
Single source of truth for "which groups is a student in" and
"which subjects is a group enrolled in". Association updates are full
replacements: the old set is cleared, then the new set is added.
"""
import logging

from django.db import transaction

from accounts.models import User
from .models import Group

logger = logging.getLogger(__name__)


def get_groups_for_student(student_id):
    """Group ids of a student (zero or one; a student sits in at most one group)."""
    group_id = (
        User.objects.filter(pk=student_id, role=User.ROLE_STUDENT)
        .values_list('group_id', flat=True)
        .first()
    )
    return {group_id} if group_id else set()


def get_enrolled_subjects(group_id):
    """Subject ids the group is enrolled in."""
    from courses.models import Subject
    return set(
        Subject.objects.filter(enrolled_groups__id=group_id).values_list('id', flat=True)
    )


def is_student_enrolled(student_id, subject_id):
    """True iff one of the student's groups is enrolled in the subject."""
    for group_id in get_groups_for_student(student_id):
        if subject_id in get_enrolled_subjects(group_id):
            return True
    return False


def get_students_for_group(group):
    """Canonical queryset: students in group."""
    return User.objects.students().filter(group=group).order_by('full_name')


@transaction.atomic
def set_group_students(group, student_ids):
    """
    Replace the group's students with student_ids.
    Current members are detached, then the listed students are attached
    (moving them out of any other group). Non-student ids are ignored.
    """
    ids = {int(sid) for sid in student_ids or []}
    User.objects.filter(group=group).update(group=None)
    attached = User.objects.students().filter(pk__in=ids).update(group=group)
    logger.info('Group %s students replaced: %s attached', group.pk, attached)
    return attached


@transaction.atomic
def set_student_group(student, group_id):
    """Place a student in a group (or none when group_id is empty)."""
    group = Group.objects.get(pk=group_id) if group_id else None
    student.group = group
    student.save(update_fields=['group', 'updated_at'])
    return group


@transaction.atomic
def set_subject_groups(subject, group_ids):
    """Replace the subject's enrolled groups with group_ids (unknown ids ignored)."""
    groups = list(Group.objects.filter(pk__in={int(g) for g in group_ids or []}))
    subject.enrolled_groups.clear()
    subject.enrolled_groups.add(*groups)
    logger.info('Subject %s enrollment replaced: %s groups', subject.pk, len(groups))
    return groups
