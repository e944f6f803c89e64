"""
URLs for courses app.
admin_urlpatterns  -> /api/admin/subjects/
manage_urlpatterns -> /api/manage/
student_urlpatterns -> /api/student/
"""
from django.urls import path
from courses.views import admin, manage, student

admin_urlpatterns = [
    path('', admin.admin_subjects_view),
    path('<int:pk>', admin.admin_subject_detail_view),
]

manage_urlpatterns = [
    path('subjects', manage.manage_subjects_view),
    path('subjects/<int:pk>', manage.manage_subject_detail_view),
    path('subjects/<int:pk>/status', manage.manage_subject_status_view),
    path('subjects/<int:pk>/groups', manage.manage_subject_groups_view),
    path('subjects/<int:pk>/lectures', manage.manage_subject_lectures_view),
    path('lectures/<int:pk>', manage.manage_lecture_detail_view),
    path('lectures/<int:pk>/status', manage.manage_lecture_status_view),
]

student_urlpatterns = [
    path('subjects', student.student_subjects_view),
    path('subjects/<int:pk>', student.student_subject_detail_view),
    path('lectures/<int:pk>/download', student.lecture_download_view),
]
