"""
Test authoring API for admins and assigned teachers (/api/manage/)
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count

from accounts.permissions import IsAdminOrTeacher
from assessments.models import Question, Test
from assessments.serializers import (
    QuestionInputSerializer,
    QuestionSerializer,
    TestSerializer,
    TestWriteSerializer,
)
from assessments.services.questions import QuestionLocked, delete_question, save_question
from assessments.services.stats import test_results
from courses.models import Subject
from courses.serializers import StatusChangeSerializer
from courses.services.access import can_manage
from courses.services.publishing import lock_subject, request_status_change
from courses.views.helpers import (
    bad_request,
    conflict,
    denied,
    load_managed,
    not_found,
    status_change_response,
)

logger = logging.getLogger(__name__)


def _tests_with_counts():
    return Test.objects.annotate(question_count=Count('questions'))


def _save_question_from_request(request, test, question=None):
    serializer = QuestionInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        question = save_question(
            test,
            data['text'],
            data['type'],
            data['points'],
            [dict(o) for o in data['options']],
            question=question,
        )
    except DjangoValidationError as e:
        return None, bad_request('; '.join(e.messages), errors=e.messages)
    except QuestionLocked as e:
        return None, conflict(e.reason, 'question_locked')
    return question, None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_subject_tests_view(request, pk):
    """
    GET /api/manage/subjects/{id}/tests
    POST /api/manage/subjects/{id}/tests  Body: {title, timeLimitMinutes, maxAttempts, daysToComplete}
    New tests start as draft.
    """
    subject, error = load_managed(request, Subject, pk, 'Subject')
    if error:
        return error

    if request.method == 'GET':
        tests = _tests_with_counts().filter(subject=subject).order_by('created_at', 'id')
        return Response(TestSerializer(tests, many=True).data)

    serializer = TestWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    test = serializer.save(subject=subject, status=Test.Status.DRAFT)
    logger.info('Test %s created in subject %s by user %s', test.pk, subject.pk, request.user.pk)
    return Response(TestSerializer(test).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_test_detail_view(request, pk):
    """
    GET /api/manage/tests/{id}  (with questions and correct answers)
    PATCH /api/manage/tests/{id}
    DELETE /api/manage/tests/{id}  (questions and attempts are deleted with it)
    """
    test, error = load_managed(request, Test, pk, 'Test', queryset=_tests_with_counts())
    if error:
        return error

    if request.method == 'GET':
        data = TestSerializer(test).data
        questions = test.questions.prefetch_related('options').order_by('id')
        data['questions'] = QuestionSerializer(questions, many=True).data
        return Response(data)

    if request.method == 'DELETE':
        with transaction.atomic():
            lock_subject(test.subject_id)
            test.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = TestWriteSerializer(test, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(TestSerializer(test).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_test_status_view(request, pk):
    """
    POST /api/manage/tests/{id}/status  Body: {status: hidden|draft|published}
    """
    test, error = load_managed(request, Test, pk, 'Test')
    if error:
        return error
    serializer = StatusChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return status_change_response(request_status_change(test, serializer.validated_data['status']))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_test_questions_view(request, pk):
    """
    GET /api/manage/tests/{id}/questions
    POST /api/manage/tests/{id}/questions
      Body: {text, type: Single|Multiple, points: 1..100, options: [{text, isCorrect}]}
    """
    test, error = load_managed(request, Test, pk, 'Test')
    if error:
        return error

    if request.method == 'GET':
        questions = test.questions.prefetch_related('options').order_by('id')
        return Response(QuestionSerializer(questions, many=True).data)

    question, error = _save_question_from_request(request, test)
    if error:
        return error
    return Response(QuestionSerializer(question).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_question_detail_view(request, pk):
    """
    GET /api/manage/questions/{id}
    PUT /api/manage/questions/{id}  (options are replaced as a whole)
    DELETE /api/manage/questions/{id}
    PUT and DELETE answer 409 once the test has attempts.
    """
    question = Question.objects.select_related('test').filter(pk=pk).first()
    if question is None:
        return not_found('Question not found')
    if not can_manage(request.user, question.test.subject_id):
        return denied()

    if request.method == 'GET':
        return Response(QuestionSerializer(question).data)

    if request.method == 'DELETE':
        try:
            delete_question(question)
        except QuestionLocked as e:
            return conflict(e.reason, 'question_locked')
        return Response(status=status.HTTP_204_NO_CONTENT)

    question, error = _save_question_from_request(request, question.test, question=question)
    if error:
        return error
    return Response(QuestionSerializer(question).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrTeacher])
def manage_test_results_view(request, pk):
    """
    GET /api/manage/tests/{id}/results
    One row per student: attempts, best score, last attempt, passed.
    """
    test, error = load_managed(request, Test, pk, 'Test')
    if error:
        return error
    return Response({
        'test': TestSerializer(test).data,
        'results': test_results(test),
    })
