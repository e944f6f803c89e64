"""Admin group URLs (/api/admin/groups/)"""
from django.urls import path
from groups.views import admin as views

urlpatterns = [
    path('', views.admin_groups_view),
    path('<int:pk>', views.admin_group_detail_view),
    path('<int:pk>/students', views.admin_group_students_view),
]
