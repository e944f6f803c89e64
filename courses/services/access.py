"""
Enrollment/access resolver.

can_manage(actor, subject_id): admin always; teacher iff assigned to the subject.
can_view(actor, item) for a Subject, Lecture or Test:
  - admin: always
  - teacher: iff can_manage on the item's subject
  - student: subject -> enrolled and subject published
             lecture -> can_view(subject) and lecture published
             test    -> enrolled in the subject and test published
                        (the subject's own status does not matter)

Every content-reading view goes through these functions or through the
queryset helpers below, which express the same rules as filters.
"""
from assessments.models import Test
from courses.models import Lecture, Subject
from groups.services import get_groups_for_student

KIND_SUBJECT = 'subject'
KIND_LECTURE = 'lecture'
KIND_TEST = 'test'

_KIND_MODELS = {
    KIND_SUBJECT: Subject,
    KIND_LECTURE: Lecture,
    KIND_TEST: Test,
}


def _is_authenticated(actor):
    return actor is not None and getattr(actor, 'is_authenticated', False)


def can_manage(actor, subject_id):
    if not _is_authenticated(actor):
        return False
    if actor.is_admin:
        return True
    if actor.is_teacher:
        return Subject.teachers.through.objects.filter(
            subject_id=subject_id, user_id=actor.pk
        ).exists()
    return False


def is_enrolled(actor, subject_id):
    group_ids = get_groups_for_student(actor.pk)
    if not group_ids:
        return False
    return Subject.enrolled_groups.through.objects.filter(
        subject_id=subject_id, group_id__in=group_ids
    ).exists()


def subject_id_of(item):
    if isinstance(item, Subject):
        return item.pk
    return item.subject_id


def can_view(actor, item):
    if not _is_authenticated(actor):
        return False
    if actor.is_admin:
        return True
    if actor.is_teacher:
        return can_manage(actor, subject_id_of(item))
    if not actor.is_student:
        return False

    if isinstance(item, Subject):
        return item.status == Subject.Status.PUBLISHED and is_enrolled(actor, item.pk)
    if isinstance(item, Lecture):
        return item.status == Lecture.Status.PUBLISHED and can_view(actor, item.subject)
    if isinstance(item, Test):
        return item.status == Test.Status.PUBLISHED and is_enrolled(actor, item.subject_id)
    raise TypeError(f'Unsupported content item: {type(item).__name__}')


def get_item(kind, item_id):
    """Load a content item by kind; None when the kind is unknown or the row is missing."""
    model = _KIND_MODELS.get(kind)
    if model is None:
        return None
    qs = model.objects.all()
    if model is not Subject:
        qs = qs.select_related('subject')
    return qs.filter(pk=item_id).first()


def can_view_kind(actor, kind, item_id):
    item = get_item(kind, item_id)
    return item is not None and can_view(actor, item)


def get_viewable(actor, kind, item_id):
    """The item when the actor may view it, else None (missing and hidden look the same)."""
    item = get_item(kind, item_id)
    if item is None or not can_view(actor, item):
        return None
    return item


# Queryset forms of the same rules, used by listings.

def managed_subjects(actor):
    if actor.is_admin:
        return Subject.objects.all()
    if actor.is_teacher:
        return Subject.objects.filter(teachers=actor)
    return Subject.objects.none()


def visible_subjects(actor):
    if actor.is_admin or actor.is_teacher:
        return managed_subjects(actor)
    group_ids = get_groups_for_student(actor.pk)
    return Subject.objects.filter(
        status=Subject.Status.PUBLISHED,
        enrolled_groups__id__in=group_ids,
    ).distinct()


def visible_lectures(actor, subject):
    if not can_view(actor, subject):
        return Lecture.objects.none()
    qs = Lecture.objects.filter(subject=subject)
    if actor.is_student:
        qs = qs.filter(status=Lecture.Status.PUBLISHED)
    return qs


def visible_tests(actor, subject=None):
    if actor.is_admin or actor.is_teacher:
        qs = Test.objects.filter(subject__in=managed_subjects(actor))
    else:
        group_ids = get_groups_for_student(actor.pk)
        qs = Test.objects.filter(
            status=Test.Status.PUBLISHED,
            subject__enrolled_groups__id__in=group_ids,
        ).distinct()
    if subject is not None:
        qs = qs.filter(subject=subject)
    return qs
