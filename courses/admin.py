"""
Admin configuration for courses app
"""
from django.contrib import admin
from .models import Lecture, Subject


class LectureInline(admin.TabularInline):
    model = Lecture
    extra = 0
    fields = ['title', 'status', 'original_filename', 'created_at']
    readonly_fields = ['status', 'original_filename', 'created_at']


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    """Subject Admin"""
    list_display = ['title', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['title', 'description']
    filter_horizontal = ['teachers', 'enrolled_groups']
    # Status moves only through the publishing endpoints
    readonly_fields = ['status', 'created_at', 'updated_at']
    inlines = [LectureInline]


@admin.register(Lecture)
class LectureAdmin(admin.ModelAdmin):
    """Lecture Admin"""
    list_display = ['title', 'subject', 'status', 'original_filename', 'created_at']
    list_filter = ['status', 'subject']
    search_fields = ['title', 'subject__title']
    readonly_fields = ['status', 'file', 'original_filename', 'created_at']
