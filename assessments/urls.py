"""
URLs for assessments app.
manage_urlpatterns  -> /api/manage/
student_urlpatterns -> /api/student/
"""
from django.urls import path
from assessments.views import manage, student

manage_urlpatterns = [
    path('subjects/<int:pk>/tests', manage.manage_subject_tests_view),
    path('tests/<int:pk>', manage.manage_test_detail_view),
    path('tests/<int:pk>/status', manage.manage_test_status_view),
    path('tests/<int:pk>/questions', manage.manage_test_questions_view),
    path('tests/<int:pk>/results', manage.manage_test_results_view),
    path('questions/<int:pk>', manage.manage_question_detail_view),
]

student_urlpatterns = [
    path('tests', student.student_tests_view),
    path('tests/<int:pk>', student.student_test_detail_view),
    path('tests/<int:pk>/start', student.student_test_start_view),
    path('tests/<int:pk>/attempts', student.student_test_attempts_view),
    path('attempts/<int:pk>', student.student_attempt_detail_view),
    path('attempts/<int:pk>/submit', student.student_attempt_submit_view),
]
