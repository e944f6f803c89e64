"""
Admin subjects API (/api/admin/subjects/)
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Count, Q

from accounts.permissions import IsAdmin
from courses.models import Subject
from courses.serializers import AdminSubjectSerializer, SubjectWriteSerializer
from courses.services.lectures import delete_subject
from courses.services.subjects import set_subject_teachers


def _subjects_queryset():
    return Subject.objects.annotate(
        lecture_count=Count('lectures', distinct=True),
        test_count=Count('tests', distinct=True),
    ).prefetch_related('teachers')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def admin_subjects_view(request):
    """
    GET /api/admin/subjects?search=
    POST /api/admin/subjects  Body: {title, description, teacherIds}
    New subjects start hidden; status only changes through the status endpoint.
    """
    if request.method == 'GET':
        subjects = _subjects_queryset()
        search = (request.query_params.get('search') or '').strip()
        if search:
            subjects = subjects.filter(Q(title__icontains=search) | Q(description__icontains=search))
        return Response(AdminSubjectSerializer(subjects.order_by('title'), many=True).data)

    serializer = SubjectWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    teacher_ids = serializer.validated_data.pop('teacherIds', [])
    with transaction.atomic():
        subject = Subject.objects.create(**serializer.validated_data)
        set_subject_teachers(subject, teacher_ids)
    return Response(AdminSubjectSerializer(_subjects_queryset().get(pk=subject.pk)).data,
                    status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def admin_subject_detail_view(request, pk):
    """
    GET /api/admin/subjects/{id}
    PUT /api/admin/subjects/{id}  Body: {title, description, teacherIds}  (teachers fully replaced when teacherIds is sent)
    DELETE /api/admin/subjects/{id}  (lectures, tests and attempts are deleted; groups and teachers detached)
    """
    try:
        subject = _subjects_queryset().get(pk=pk)
    except Subject.DoesNotExist:
        return Response({'detail': 'Subject not found', 'code': 'not_found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(AdminSubjectSerializer(subject).data)

    if request.method == 'DELETE':
        with transaction.atomic():
            delete_subject(subject)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = SubjectWriteSerializer(subject, data=request.data)
    serializer.is_valid(raise_exception=True)
    # teacherIds left out keeps the current assignment
    teacher_ids = serializer.validated_data.pop('teacherIds', None)
    with transaction.atomic():
        serializer.save()
        if teacher_ids is not None:
            set_subject_teachers(subject, teacher_ids)
    return Response(AdminSubjectSerializer(_subjects_queryset().get(pk=subject.pk)).data)
