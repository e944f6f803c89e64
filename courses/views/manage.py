"""
Content management API for admins and assigned teachers (/api/manage/)
Subjects, subject enrollment, lectures and status changes.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count

from accounts.permissions import IsAdminOrTeacher
from assessments.models import Test
from courses.models import Lecture, Subject
from courses.serializers import (
    LectureSerializer,
    LectureUpdateSerializer,
    LectureUploadSerializer,
    StatusChangeSerializer,
    SubjectSerializer,
)
from courses.services.access import managed_subjects
from courses.services.lectures import (
    LectureRejected,
    create_lecture,
    delete_lecture,
    replace_lecture_file,
)
from courses.services.publishing import request_status_change
from courses.storage import LectureFileTooLarge
from courses.views.helpers import bad_request, load_managed, status_change_response
from groups.models import Group
from groups.services import set_subject_groups
from core.utils import parse_id_list

logger = logging.getLogger(__name__)


def _with_counts(qs):
    return qs.annotate(
        lecture_count=Count('lectures', distinct=True),
        test_count=Count('tests', distinct=True),
    )


def _test_summary(test):
    return {
        'id': test.id,
        'title': test.title,
        'status': test.status,
        'questionCount': test.question_count,
        'timeLimitMinutes': test.time_limit_minutes,
        'maxAttempts': test.max_attempts,
        'daysToComplete': test.days_to_complete,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_subjects_view(request):
    """
    GET /api/manage/subjects
    Admin: all subjects. Teacher: assigned subjects.
    """
    subjects = _with_counts(managed_subjects(request.user)).order_by('title')
    return Response(SubjectSerializer(subjects, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_subject_detail_view(request, pk):
    """
    GET /api/manage/subjects/{id}
    Subject with all lectures, tests (with question counts) and enrolled groups.
    """
    subject, error = load_managed(request, Subject, pk, 'Subject', queryset=_with_counts(Subject.objects.all()))
    if error:
        return error
    data = SubjectSerializer(subject).data
    data['lectures'] = LectureSerializer(subject.lectures.order_by('created_at', 'id'), many=True).data
    tests = Test.objects.filter(subject=subject).annotate(question_count=Count('questions')).order_by('created_at', 'id')
    data['tests'] = [_test_summary(t) for t in tests]
    data['groups'] = [{'id': g.id, 'name': g.name} for g in subject.enrolled_groups.order_by('name')]
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_subject_status_view(request, pk):
    """
    POST /api/manage/subjects/{id}/status  Body: {status: hidden|draft|published}
    200 {accepted: true, status}  |  400 {accepted: false, reason, code: publish_rejected}
    """
    subject, error = load_managed(request, Subject, pk, 'Subject')
    if error:
        return error
    serializer = StatusChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return status_change_response(request_status_change(subject, serializer.validated_data['status']))


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_subject_groups_view(request, pk):
    """
    GET /api/manage/subjects/{id}/groups  -> all groups with "selected" flag
    PUT /api/manage/subjects/{id}/groups  Body: {groupIds: [...]}  (full replacement)
    """
    subject, error = load_managed(request, Subject, pk, 'Subject')
    if error:
        return error

    if request.method == 'PUT':
        group_ids, ok = parse_id_list(request.data.get('groupIds', request.data.get('group_ids')))
        if not ok:
            return bad_request('groupIds must be a list of integers')
        set_subject_groups(subject, group_ids)

    selected = set(subject.enrolled_groups.values_list('id', flat=True))
    groups = Group.objects.annotate(student_count=Count('students')).order_by('name')
    return Response([
        {'id': g.id, 'name': g.name, 'studentCount': g.student_count, 'selected': g.id in selected}
        for g in groups
    ])


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def manage_subject_lectures_view(request, pk):
    """
    GET /api/manage/subjects/{id}/lectures
    POST /api/manage/subjects/{id}/lectures  multipart: title, file, status (hidden|published)
    """
    subject, error = load_managed(request, Subject, pk, 'Subject')
    if error:
        return error

    if request.method == 'GET':
        return Response(LectureSerializer(subject.lectures.order_by('created_at', 'id'), many=True).data)

    serializer = LectureUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        lecture = create_lecture(subject, data['title'], data.get('file'), data['status'])
    except LectureFileTooLarge as e:
        return bad_request(str(e), code='file_too_large')
    except LectureRejected as e:
        return bad_request(e.reason, code='publish_rejected')
    return Response(LectureSerializer(lecture).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def manage_lecture_detail_view(request, pk):
    """
    GET /api/manage/lectures/{id}
    PATCH /api/manage/lectures/{id}  title and/or file (replaces the stored file)
    DELETE /api/manage/lectures/{id}  (row and stored file)
    """
    lecture, error = load_managed(request, Lecture, pk, 'Lecture')
    if error:
        return error

    if request.method == 'GET':
        return Response(LectureSerializer(lecture).data)

    if request.method == 'DELETE':
        delete_lecture(lecture)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = LectureUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    if 'title' in data:
        title = data['title'].strip()
        if not title:
            return bad_request('Title is required.')
        lecture.title = title
        lecture.save(update_fields=['title'])
    if data.get('file') is not None:
        try:
            replace_lecture_file(lecture, data['file'])
        except LectureFileTooLarge as e:
            return bad_request(str(e), code='file_too_large')
    return Response(LectureSerializer(lecture).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_lecture_status_view(request, pk):
    """
    POST /api/manage/lectures/{id}/status  Body: {status: hidden|published}
    """
    lecture, error = load_managed(request, Lecture, pk, 'Lecture')
    if error:
        return error
    serializer = StatusChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return status_change_response(request_status_change(lecture, serializer.validated_data['status']))
