"""
Student API views for subjects and lectures (/api/student/)
Anything the student may not view answers 404, same as a missing id.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.http import FileResponse

from accounts.permissions import IsStudent
from courses.serializers import StudentLectureSerializer, StudentSubjectSerializer
from courses.services.access import (
    KIND_LECTURE,
    KIND_SUBJECT,
    get_viewable,
    visible_lectures,
    visible_subjects,
    visible_tests,
)
from courses.storage import lecture_file_exists, open_lecture_file
from courses.views.helpers import not_found

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudent])
def student_subjects_view(request):
    """
    GET /api/student/subjects
    Published subjects enrolled through the student's group, ordered by title.
    """
    subjects = visible_subjects(request.user).order_by('title')
    return Response(StudentSubjectSerializer(subjects, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudent])
def student_subject_detail_view(request, pk):
    """
    GET /api/student/subjects/{id}
    Subject with its published lectures and published tests.
    """
    subject = get_viewable(request.user, KIND_SUBJECT, pk)
    if subject is None:
        return not_found('Subject not found')
    data = StudentSubjectSerializer(subject).data
    data['lectures'] = StudentLectureSerializer(
        visible_lectures(request.user, subject).order_by('created_at', 'id'), many=True
    ).data
    data['tests'] = [
        {
            'id': t.id,
            'title': t.title,
            'timeLimitMinutes': t.time_limit_minutes,
            'maxAttempts': t.max_attempts,
            'daysToComplete': t.days_to_complete,
        }
        for t in visible_tests(request.user, subject).order_by('created_at', 'id')
    ]
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lecture_download_view(request, pk):
    """
    GET /api/student/lectures/{id}/download
    Students: published lecture of a published, enrolled subject.
    Admins and managing teachers may download any lecture of their subjects.
    404 when not viewable; 404 code=file_missing when the stored file is gone.
    """
    lecture = get_viewable(request.user, KIND_LECTURE, pk)
    if lecture is None:
        return not_found('Lecture not found')
    if not lecture.has_file or not lecture_file_exists(lecture.file):
        logger.warning('lecture_download lecture_id=%s user_id=%s file_missing path=%s',
                       lecture.pk, request.user.pk, lecture.file)
        return not_found('Lecture file not found', code='file_missing')

    filename = lecture.original_filename or lecture.file.rsplit('/', 1)[-1]
    return FileResponse(open_lecture_file(lecture.file), as_attachment=True, filename=filename)
