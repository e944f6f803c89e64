"""
Subjects and lectures.
Each content kind has its own Status choices; statuses of different kinds
are never compared with each other.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone


class Subject(models.Model):
    """
    Subject (course). Owns lectures and tests (cascade delete).
    teachers: who may manage it. enrolled_groups: whose students may view it.
    """

    class Status(models.TextChoices):
        HIDDEN = 'hidden', 'Hidden'
        DRAFT = 'draft', 'Draft'
        PUBLISHED = 'published', 'Published'

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.HIDDEN,
        db_index=True,
    )
    teachers = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='assigned_subjects',
        blank=True,
        limit_choices_to={'role': 'teacher'},
    )
    enrolled_groups = models.ManyToManyField(
        'groups.Group',
        related_name='subjects',
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subjects'
        verbose_name = 'Subject'
        verbose_name_plural = 'Subjects'
        ordering = ['title']

    def __str__(self):
        return self.title


class Lecture(models.Model):
    """
    Lecture file inside a subject. Lectures have no draft state.
    file: storage path from courses.storage; empty until a file is uploaded.
    Invariant: status=published requires a non-empty file.
    """

    class Status(models.TextChoices):
        HIDDEN = 'hidden', 'Hidden'
        PUBLISHED = 'published', 'Published'

    subject = models.ForeignKey(
        Subject,
        on_delete=models.CASCADE,
        related_name='lectures',
    )
    title = models.CharField(max_length=255)
    file = models.CharField(max_length=500, blank=True, default='')
    original_filename = models.CharField(max_length=255, blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.HIDDEN,
        db_index=True,
    )
    created_at = models.DateTimeField(
        default=timezone.now,
        help_text="Date added; refreshed when the file is replaced",
    )

    class Meta:
        db_table = 'lectures'
        verbose_name = 'Lecture'
        verbose_name_plural = 'Lectures'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.subject.title} - {self.title}"

    @property
    def has_file(self):
        return bool((self.file or '').strip())
