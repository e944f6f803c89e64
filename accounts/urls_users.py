"""Admin user management URLs (/api/admin/users/)"""
from django.urls import path
from accounts.views.users import (
    users_list_or_create_view,
    users_detail_view,
)

urlpatterns = [
    path('', users_list_or_create_view),
    path('<int:pk>', users_detail_view),
]
