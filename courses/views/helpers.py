"""
Response helpers shared by the content views.

Student-facing endpoints answer 404 for anything the student may not view,
exactly as for a missing id. Management endpoints answer 404 for a missing
item and 403 for an existing item on a subject the actor does not manage.
"""
from rest_framework import status
from rest_framework.response import Response

from courses.services.access import can_manage, subject_id_of


def not_found(detail='Not found', code='not_found'):
    return Response({'detail': detail, 'code': code}, status=status.HTTP_404_NOT_FOUND)


def denied(detail='You do not manage this subject'):
    return Response({'detail': detail, 'code': 'permission_denied'}, status=status.HTTP_403_FORBIDDEN)


def bad_request(detail, code='validation_error', **extra):
    data = {'detail': detail, 'code': code}
    data.update(extra)
    return Response(data, status=status.HTTP_400_BAD_REQUEST)


def conflict(detail, code):
    return Response({'detail': detail, 'code': code}, status=status.HTTP_409_CONFLICT)


def load_managed(request, model, pk, label, queryset=None):
    """
    Fetch a content item for the management surface.
    Returns (item, None) or (None, error_response).
    """
    qs = queryset if queryset is not None else model.objects.all()
    item = qs.filter(pk=pk).first()
    if item is None:
        return None, not_found(f'{label} not found')
    if not can_manage(request.user, subject_id_of(item)):
        return None, denied()
    return item, None


def status_change_response(result):
    """Map a publishing result to HTTP: 200 when accepted, 400 with the reason otherwise."""
    if result.accepted:
        return Response(result.as_dict())
    data = result.as_dict()
    data['detail'] = result.reason
    data['code'] = 'publish_rejected'
    return Response(data, status=status.HTTP_400_BAD_REQUEST)
