"""
URL configuration for coursehub-back project
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.generic import RedirectView
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from assessments import urls as assessments_urls
from courses import urls as courses_urls


@require_http_methods(["GET"])
def health_view(request):
    """Minimal health check for connectivity verification. No auth required."""
    return JsonResponse({'status': 'ok', 'service': 'coursehub-back'})


@require_http_methods(["GET"])
def system_health_view(request):
    """
    Full system health check for monitoring.
    Returns db, auth, courses, assessments status. No auth required.
    """
    result = {'db': 'ok', 'auth': 'ok', 'courses': 'ok', 'assessments': 'ok'}
    try:
        from django.db import connection
        connection.ensure_connection()
    except Exception as e:
        result['db'] = f'error: {str(e)[:80]}'
    try:
        from django.contrib.auth import get_user_model
        get_user_model().objects.exists()
    except Exception as e:
        result['auth'] = f'error: {str(e)[:80]}'
    try:
        from courses.models import Subject
        Subject.objects.exists()
    except Exception as e:
        result['courses'] = f'error: {str(e)[:80]}'
    try:
        from assessments.models import Test
        Test.objects.exists()
    except Exception as e:
        result['assessments'] = f'error: {str(e)[:80]}'
    return JsonResponse(result)


@require_http_methods(["GET"])
def api_root(request):
    """Root endpoint - API information"""
    return JsonResponse({
        'name': 'CourseHub API',
        'version': '1.0.0',
        'description': 'Learning management API: subjects, lectures, tests and attempts',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/',
            'admin': '/api/admin/',
            'manage': '/api/manage/',
            'student': '/api/student/',
            'docs': '/api/docs/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api', RedirectView.as_view(url='/api/', permanent=False)),
    path('api/', api_root),
    path('api/health/', health_view, name='api-health'),
    path('api/system/health/', system_health_view, name='api-system-health'),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API endpoints
    path('api/auth/', include('accounts.urls')),
    path('api/admin/users/', include('accounts.urls_users')),
    path('api/admin/groups/', include('groups.urls')),
    path('api/admin/subjects/', include(courses_urls.admin_urlpatterns)),
    path('api/manage/', include(courses_urls.manage_urlpatterns + assessments_urls.manage_urlpatterns)),
    path('api/student/', include(courses_urls.student_urlpatterns + assessments_urls.student_urlpatterns)),
]
