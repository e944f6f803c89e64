"""
Student tests API (/api/student/)
Start or resume an attempt, submit it, and look at past results.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsStudent
from assessments.models import TestAttempt
from assessments.serializers import AttemptSerializer
from assessments.services.attempts import (
    attempt_deadline,
    attempt_history,
    attempts_left,
    completed_attempts,
    get_open_attempt,
    start_or_resume,
)
from assessments.services.grading import normalize_answers, submit
from courses.services.access import KIND_TEST, get_viewable, visible_tests
from courses.views.helpers import bad_request, not_found

logger = logging.getLogger(__name__)


def _iso(value):
    return value.isoformat() if value else None


def _test_card(test, student):
    used = completed_attempts(student, test).count()
    left = attempts_left(test, used)
    open_attempt = get_open_attempt(student, test)
    return {
        'id': test.id,
        'subjectId': test.subject_id,
        'subjectTitle': test.subject.title,
        'title': test.title,
        'timeLimitMinutes': test.time_limit_minutes,
        'maxAttempts': test.max_attempts,
        'daysToComplete': test.days_to_complete,
        'attemptsUsed': used,
        'attemptsLeft': left,
        'openAttemptId': open_attempt.id if open_attempt else None,
        'canStart': open_attempt is not None or left is None or left > 0,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudent])
def student_tests_view(request):
    """
    GET /api/student/tests?subjectId=
    Published tests of subjects the student is enrolled in.
    """
    tests = visible_tests(request.user).select_related('subject').order_by('subject__title', 'created_at', 'id')
    subject_id = request.query_params.get('subjectId')
    if subject_id and subject_id.isdigit():
        tests = tests.filter(subject_id=int(subject_id))
    return Response([_test_card(t, request.user) for t in tests])


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudent])
def student_test_detail_view(request, pk):
    """
    GET /api/student/tests/{id}
    """
    test = get_viewable(request.user, KIND_TEST, pk)
    if test is None:
        return not_found('Test not found')
    data = _test_card(test, request.user)
    data['attempts'] = AttemptSerializer(attempt_history(request.user, test), many=True).data
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudent])
def student_test_start_view(request, pk):
    """
    POST /api/student/tests/{id}/start
    201 new attempt | 200 resumed attempt | 404 not visible | 409 max attempts reached
    Options are shuffled on every call; correct answers are never sent.
    """
    result = start_or_resume(request.user, pk)
    if result is None:
        return not_found('Test not found')

    test = result.test
    if result.blocked:
        return Response({
            'detail': result.blocked_reason,
            'blocked': result.blocked_reason,
            'code': 'max_attempts_reached',
            'testId': test.id,
            'attemptsUsed': result.attempts_used,
            'maxAttempts': test.max_attempts,
            'attempts': AttemptSerializer(attempt_history(request.user, test), many=True).data,
        }, status=status.HTTP_409_CONFLICT)

    attempt = result.attempt
    return Response({
        'attemptId': attempt.id,
        'testId': test.id,
        'title': test.title,
        'startTime': _iso(attempt.start_time),
        'timeLimitMinutes': test.time_limit_minutes,
        'deadline': _iso(attempt_deadline(attempt, test)),
        'attemptsUsed': result.attempts_used,
        'maxAttempts': test.max_attempts,
        'resumed': not result.created,
        'questions': result.questions,
    }, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudent])
def student_attempt_submit_view(request, pk):
    """
    POST /api/student/attempts/{id}/submit
    Body: {answers: [{questionId, selectedOptionIds: [...]}]}
    A repeated submit returns the stored result with alreadySubmitted=true.
    """
    if not isinstance(request.data, dict):
        return bad_request('Request body must be an object with an "answers" list')
    answers = normalize_answers(request.data.get('answers', []))
    result = submit(pk, request.user, answers)
    if result is None:
        return not_found('Attempt not found')

    attempt = result.attempt
    return Response({
        'attemptId': attempt.id,
        'testId': attempt.test_id,
        'score': attempt.score,
        'maxScore': attempt.test.total_points,
        'completedAt': _iso(attempt.end_time),
        'late': result.late,
        'alreadySubmitted': result.already_submitted,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudent])
def student_test_attempts_view(request, pk):
    """
    GET /api/student/tests/{id}/attempts
    Completed attempts, newest first.
    """
    test = get_viewable(request.user, KIND_TEST, pk)
    if test is None:
        return not_found('Test not found')
    used = completed_attempts(request.user, test).count()
    return Response({
        'testId': test.id,
        'title': test.title,
        'maxScore': test.total_points,
        'attemptsUsed': used,
        'maxAttempts': test.max_attempts,
        'attempts': AttemptSerializer(attempt_history(request.user, test), many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudent])
def student_attempt_detail_view(request, pk):
    """
    GET /api/student/attempts/{id}
    Own attempt with per-question answers once completed.
    """
    attempt = (
        TestAttempt.objects.select_related('test')
        .filter(pk=pk, student=request.user)
        .first()
    )
    if attempt is None:
        return not_found('Attempt not found')

    data = AttemptSerializer(attempt).data
    data['testTitle'] = attempt.test.title
    data['maxScore'] = attempt.test.total_points
    if attempt.is_completed:
        answers = attempt.answers.select_related('question').prefetch_related('selected_options')
        data['answers'] = [
            {
                'questionId': a.question_id,
                'questionText': a.question.text,
                'selectedOptionIds': sorted(o.id for o in a.selected_options.all()),
                'pointsAwarded': a.points_awarded,
                'points': a.question.points,
            }
            for a in answers
        ]
    return Response(data)
