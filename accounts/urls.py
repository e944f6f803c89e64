"""
URLs for accounts app
"""
from django.urls import path
from accounts.views import auth

app_name = 'accounts'

urlpatterns = [
    path('login', auth.login_view, name='login'),
    path('logout', auth.logout_view, name='logout'),
    path('me', auth.me_view, name='me'),
    path('change-password', auth.change_password_view, name='change-password'),
]
