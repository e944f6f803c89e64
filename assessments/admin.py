"""
Admin configuration for assessments app
"""
from django.contrib import admin
from .models import AnswerOption, Question, StudentAnswer, Test, TestAttempt


class AnswerOptionInline(admin.TabularInline):
    model = AnswerOption
    extra = 0
    fields = ['text', 'is_correct', 'order_index']


@admin.register(Test)
class TestAdmin(admin.ModelAdmin):
    """Test Admin"""
    list_display = ['title', 'subject', 'status', 'time_limit_minutes', 'max_attempts', 'created_at']
    list_filter = ['status', 'subject']
    search_fields = ['title', 'subject__title']
    # Status moves only through the publishing endpoints
    readonly_fields = ['status', 'created_at', 'updated_at']


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    """Question Admin (read-only: questions are validated by the authoring API)"""
    list_display = ['id', 'test', 'type', 'points']
    list_filter = ['type']
    search_fields = ['text', 'test__title']
    inlines = [AnswerOptionInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(TestAttempt)
class TestAttemptAdmin(admin.ModelAdmin):
    """Test Attempt Admin (read-only)"""
    list_display = ['id', 'test', 'student', 'start_time', 'end_time', 'score', 'is_completed']
    list_filter = ['is_completed', 'test']
    search_fields = ['student__email', 'student__full_name', 'test__title']
    ordering = ['-start_time']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(StudentAnswer)
class StudentAnswerAdmin(admin.ModelAdmin):
    """Student Answer Admin (read-only)"""
    list_display = ['attempt', 'question', 'points_awarded']
    search_fields = ['attempt__student__email']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
