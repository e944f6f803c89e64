"""
Serializers for assessments app
"""
from rest_framework import serializers

from assessments.models import AnswerOption, Question, Test, TestAttempt


class TestWriteSerializer(serializers.ModelSerializer):
    """Create/update payload. Status is not writable here; it moves only through the status endpoint."""
    timeLimitMinutes = serializers.IntegerField(source='time_limit_minutes', required=False, allow_null=True, min_value=0)
    maxAttempts = serializers.IntegerField(source='max_attempts', required=False, allow_null=True, min_value=1)
    daysToComplete = serializers.IntegerField(source='days_to_complete', required=False, allow_null=True, min_value=0)

    class Meta:
        model = Test
        fields = ['title', 'timeLimitMinutes', 'maxAttempts', 'daysToComplete']

    def validate_title(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Title is required.')
        return value


class TestSerializer(serializers.ModelSerializer):
    subjectId = serializers.IntegerField(source='subject_id', read_only=True)
    timeLimitMinutes = serializers.IntegerField(source='time_limit_minutes', read_only=True)
    maxAttempts = serializers.IntegerField(source='max_attempts', read_only=True)
    daysToComplete = serializers.IntegerField(source='days_to_complete', read_only=True)
    questionCount = serializers.SerializerMethodField()
    totalPoints = serializers.SerializerMethodField()

    class Meta:
        model = Test
        fields = [
            'id', 'subjectId', 'title', 'status', 'timeLimitMinutes', 'maxAttempts',
            'daysToComplete', 'questionCount', 'totalPoints',
        ]
        read_only_fields = fields

    def get_questionCount(self, obj):
        count = getattr(obj, 'question_count', None)
        return obj.questions.count() if count is None else count

    def get_totalPoints(self, obj):
        return obj.total_points


class AnswerOptionSerializer(serializers.ModelSerializer):
    isCorrect = serializers.BooleanField(source='is_correct')
    orderIndex = serializers.IntegerField(source='order_index', read_only=True)

    class Meta:
        model = AnswerOption
        fields = ['id', 'text', 'isCorrect', 'orderIndex']


class QuestionSerializer(serializers.ModelSerializer):
    """Teacher view of a question, correctness flags included."""
    testId = serializers.IntegerField(source='test_id', read_only=True)
    options = AnswerOptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ['id', 'testId', 'text', 'type', 'points', 'options']
        read_only_fields = fields


class OptionInputSerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True)
    isCorrect = serializers.BooleanField(source='is_correct', default=False)


class QuestionInputSerializer(serializers.Serializer):
    """Shape only; the question rules live in assessments.validation."""
    text = serializers.CharField(allow_blank=True)
    type = serializers.CharField()
    points = serializers.IntegerField()
    options = OptionInputSerializer(many=True)


class AttemptSerializer(serializers.ModelSerializer):
    attemptId = serializers.IntegerField(source='id', read_only=True)
    testId = serializers.IntegerField(source='test_id', read_only=True)
    startTime = serializers.DateTimeField(source='start_time', read_only=True)
    endTime = serializers.DateTimeField(source='end_time', read_only=True)
    isCompleted = serializers.BooleanField(source='is_completed', read_only=True)

    class Meta:
        model = TestAttempt
        fields = ['attemptId', 'testId', 'startTime', 'endTime', 'score', 'isCompleted']
        read_only_fields = fields
