"""
Tests (quizzes), questions with answer options, student attempts and graded answers.
"""
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q, Sum
from django.utils import timezone


class Test(models.Model):
    """
    Quiz inside a subject.
    time_limit_minutes: null or 0 means unlimited. max_attempts: null means unlimited.
    days_to_complete is informational only.
    Invariant: status=published requires at least one question.
    """

    class Status(models.TextChoices):
        HIDDEN = 'hidden', 'Hidden'
        DRAFT = 'draft', 'Draft'
        PUBLISHED = 'published', 'Published'

    subject = models.ForeignKey(
        'courses.Subject',
        on_delete=models.CASCADE,
        related_name='tests',
    )
    title = models.CharField(max_length=255)
    days_to_complete = models.PositiveIntegerField(null=True, blank=True)
    time_limit_minutes = models.PositiveIntegerField(null=True, blank=True)
    max_attempts = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'course_tests'
        verbose_name = 'Test'
        verbose_name_plural = 'Tests'
        ordering = ['created_at', 'id']

    def __str__(self):
        return self.title

    @property
    def has_time_limit(self):
        return bool(self.time_limit_minutes)

    @property
    def total_points(self):
        return self.questions.aggregate(total=Sum('points'))['total'] or 0


class Question(models.Model):
    """Question of a test. Single: exactly one correct option; Multiple: at least one."""

    class Type(models.TextChoices):
        SINGLE = 'Single', 'Single choice'
        MULTIPLE = 'Multiple', 'Multiple choice'

    test = models.ForeignKey(
        Test,
        on_delete=models.CASCADE,
        related_name='questions',
    )
    text = models.TextField()
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.SINGLE)
    points = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
    )

    class Meta:
        db_table = 'questions'
        verbose_name = 'Question'
        verbose_name_plural = 'Questions'
        ordering = ['id']

    def __str__(self):
        return self.text[:30] + '...' if len(self.text) > 30 else self.text


class AnswerOption(models.Model):
    """Answer option; order_index is reassigned from list position on every question save."""
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name='options',
    )
    text = models.TextField()
    is_correct = models.BooleanField(default=False)
    order_index = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'answer_options'
        verbose_name = 'Answer Option'
        verbose_name_plural = 'Answer Options'
        ordering = ['question', 'order_index', 'id']

    def __str__(self):
        return self.text[:30] + '...' if len(self.text) > 30 else self.text


class TestAttempt(models.Model):
    """
    One student's pass at a test.
    At most one open (is_completed=False) attempt per (student, test), enforced
    by a partial unique constraint. Completed attempts are never reopened.
    """
    test = models.ForeignKey(
        Test,
        on_delete=models.CASCADE,
        related_name='attempts',
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='test_attempts',
        limit_choices_to={'role': 'student'},
    )
    start_time = models.DateTimeField(default=timezone.now)
    end_time = models.DateTimeField(null=True, blank=True)
    score = models.IntegerField(default=0)
    is_completed = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = 'test_attempts'
        verbose_name = 'Test Attempt'
        verbose_name_plural = 'Test Attempts'
        ordering = ['-start_time']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'test'],
                condition=Q(is_completed=False),
                name='uniq_open_attempt_per_student_test',
            ),
        ]
        indexes = [
            models.Index(fields=['student', 'test', 'is_completed'], name='test_attempt_stud_test_idx'),
        ]

    def __str__(self):
        return f"{self.student_id} - {self.test_id} ({'done' if self.is_completed else 'open'})"


class StudentAnswer(models.Model):
    """Graded answer to one question of a completed attempt. Written once by grading."""
    attempt = models.ForeignKey(
        TestAttempt,
        on_delete=models.CASCADE,
        related_name='answers',
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name='student_answers',
    )
    selected_options = models.ManyToManyField(
        AnswerOption,
        related_name='student_answers',
        blank=True,
    )
    points_awarded = models.IntegerField(default=0)

    class Meta:
        db_table = 'student_answers'
        verbose_name = 'Student Answer'
        verbose_name_plural = 'Student Answers'
        ordering = ['question_id']
        constraints = [
            models.UniqueConstraint(
                fields=['attempt', 'question'],
                name='uniq_answer_per_attempt_question',
            ),
        ]

    def __str__(self):
        return f"Attempt {self.attempt_id} - Q{self.question_id}: {self.points_awarded}"
