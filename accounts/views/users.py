"""
Users Management API (admin only).
list (paginated, role/search filters), create, retrieve, update, delete.
Students carry a groupId; teachers carry subjectIds (full replacement on update).
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Q

from accounts.models import User
from accounts.permissions import IsAdmin
from accounts.serializers import AdminUserWriteSerializer
from courses.services.subjects import set_teacher_subjects
from groups.models import Group
from groups.services import set_student_group

logger = logging.getLogger(__name__)


class UsersPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _user_to_dict(u):
    """Convert User to API response shape."""
    data = {
        'id': u.id,
        'email': u.email,
        'fullName': u.full_name,
        'description': u.description,
        'role': u.role,
        'isActive': u.is_active,
        'createdAt': u.date_joined.isoformat() if u.date_joined else None,
    }
    if u.is_student:
        data['groupId'] = u.group_id
        data['groupName'] = u.group.name if u.group_id else None
    if u.is_teacher:
        data['subjectIds'] = sorted(u.assigned_subjects.values_list('id', flat=True))
    return data


def _apply_associations(user, validated):
    if user.is_student:
        set_student_group(user, validated.get('group_id'))
    elif user.group_id:
        set_student_group(user, None)

    if user.is_teacher:
        if 'subject_ids' in validated:
            set_teacher_subjects(user, validated['subject_ids'])
    else:
        user.assigned_subjects.clear()


def _group_error(validated):
    group_id = validated.get('group_id')
    if group_id and not Group.objects.filter(pk=group_id).exists():
        return Response({'detail': 'Group not found', 'code': 'validation_error'},
                        status=status.HTTP_400_BAD_REQUEST)
    return None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def users_list_or_create_view(request):
    """
    GET /api/admin/users?role=&search=&page=
    POST /api/admin/users  Body: email, password, fullName, role, description, groupId, subjectIds
    """
    if request.method == 'GET':
        qs = User.objects.select_related('group').order_by('full_name', 'id')
        role_filter = request.query_params.get('role')
        if role_filter in dict(User.ROLE_CHOICES):
            qs = qs.filter(role=role_filter)
        search = (request.query_params.get('search') or '').strip()
        if search:
            qs = qs.filter(Q(email__icontains=search) | Q(full_name__icontains=search))
        paginator = UsersPagination()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response([_user_to_dict(u) for u in page])

    serializer = AdminUserWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    validated = serializer.validated_data
    error = _group_error(validated)
    if error:
        return error

    with transaction.atomic():
        user = User.objects.create_user(
            email=validated['email'],
            password=validated['password'],
            full_name=validated['full_name'],
            description=validated.get('description', ''),
            role=validated['role'],
            is_staff=validated['role'] == User.ROLE_ADMIN,
        )
        _apply_associations(user, validated)
    logger.info('User %s created role=%s by admin %s', user.pk, user.role, request.user.pk)
    return Response(_user_to_dict(user), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def users_detail_view(request, pk):
    """
    GET /api/admin/users/{id}
    PUT /api/admin/users/{id}  (empty password keeps the current one)
    DELETE /api/admin/users/{id}  (attempts cascade; groups and subjects are detached)
    """
    try:
        user = User.objects.select_related('group').get(pk=pk)
    except User.DoesNotExist:
        return Response({'detail': 'User not found', 'code': 'not_found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(_user_to_dict(user))

    if request.method == 'DELETE':
        if user.pk == request.user.pk:
            return Response({'detail': 'You cannot delete your own account', 'code': 'validation_error'},
                            status=status.HTTP_400_BAD_REQUEST)
        user.delete()
        logger.info('User %s deleted by admin %s', pk, request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = AdminUserWriteSerializer(user, data=request.data)
    serializer.is_valid(raise_exception=True)
    validated = serializer.validated_data
    error = _group_error(validated)
    if error:
        return error

    with transaction.atomic():
        user.email = validated['email']
        user.full_name = validated['full_name']
        user.description = validated.get('description', '')
        user.role = validated['role']
        if validated.get('password'):
            user.set_password(validated['password'])
        user.save()
        _apply_associations(user, validated)
    user.refresh_from_db()
    return Response(_user_to_dict(user))
