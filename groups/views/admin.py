"""
Admin API views for groups (/api/admin/groups/)
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, Q

from accounts.permissions import IsAdmin
from groups.models import Group
from groups.serializers import GroupSerializer, GroupStudentSerializer
from groups.services import get_students_for_group, set_group_students


def _groups_queryset():
    return Group.objects.annotate(student_count=Count('students'))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def admin_groups_view(request):
    """
    GET /api/admin/groups?search=
    POST /api/admin/groups  Body: {name}
    """
    if request.method == 'GET':
        groups = _groups_queryset()
        search = (request.query_params.get('search') or '').strip()
        if search:
            groups = groups.filter(Q(name__icontains=search))
        return Response(GroupSerializer(groups.order_by('name'), many=True).data)

    serializer = GroupSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    group = serializer.save()
    return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def admin_group_detail_view(request, pk):
    """
    GET /api/admin/groups/{id}
    PATCH /api/admin/groups/{id}  Body: {name}
    DELETE /api/admin/groups/{id}  (students are detached, not deleted)
    """
    try:
        group = _groups_queryset().get(pk=pk)
    except Group.DoesNotExist:
        return Response({'detail': 'Group not found', 'code': 'not_found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        data = GroupSerializer(group).data
        data['students'] = GroupStudentSerializer(get_students_for_group(group), many=True).data
        return Response(data)

    if request.method == 'PATCH':
        serializer = GroupSerializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    group.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsAdmin])
def admin_group_students_view(request, pk):
    """
    GET /api/admin/groups/{id}/students
    PUT /api/admin/groups/{id}/students  Body: {studentIds: [...]}  (full replacement)
    """
    try:
        group = Group.objects.get(pk=pk)
    except Group.DoesNotExist:
        return Response({'detail': 'Group not found', 'code': 'not_found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'PUT':
        student_ids = request.data.get('studentIds', request.data.get('student_ids', []))
        if not isinstance(student_ids, list):
            return Response(
                {'detail': 'studentIds must be a list', 'code': 'validation_error'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            set_group_students(group, student_ids)
        except (TypeError, ValueError):
            return Response(
                {'detail': 'studentIds must contain integers', 'code': 'validation_error'},
                status=status.HTTP_400_BAD_REQUEST,
            )

    students = get_students_for_group(group)
    return Response(GroupStudentSerializer(students, many=True).data)
