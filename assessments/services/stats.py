"""
Per-test results for teachers: one row per student who completed the test.
"""
from django.conf import settings
from django.db.models import Count, Max

from assessments.models import TestAttempt


def pass_threshold(total_points):
    return total_points * settings.TEST_PASS_RATIO


def test_results(test):
    total = test.total_points
    rows = (
        TestAttempt.objects.filter(test=test, is_completed=True)
        .values('student_id', 'student__full_name', 'student__email', 'student__group__name')
        .annotate(
            attempts_count=Count('id'),
            best_score=Max('score'),
            last_attempt_at=Max('end_time'),
        )
        .order_by('student__full_name', 'student_id')
    )
    results = []
    for row in rows:
        best = row['best_score'] or 0
        results.append({
            'studentId': row['student_id'],
            'studentName': row['student__full_name'],
            'email': row['student__email'],
            'groupName': row['student__group__name'],
            'attemptsCount': row['attempts_count'],
            'bestScore': best,
            'maxScore': total,
            'lastAttemptAt': row['last_attempt_at'].isoformat() if row['last_attempt_at'] else None,
            'isPassed': total > 0 and best >= pass_threshold(total),
        })
    return results
