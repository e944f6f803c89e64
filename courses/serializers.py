"""
Serializers for courses app
"""
from rest_framework import serializers

from courses.models import Lecture, Subject


class StatusChangeSerializer(serializers.Serializer):
    """Body of the status endpoints. Validity of the value per kind is decided by the publishing engine."""
    status = serializers.CharField(max_length=20)

    def validate_status(self, value):
        return value.strip().lower()


class SubjectWriteSerializer(serializers.ModelSerializer):
    teacherIds = serializers.ListField(child=serializers.IntegerField(), required=False, write_only=True)

    class Meta:
        model = Subject
        fields = ['title', 'description', 'teacherIds']

    def validate_title(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Title is required.')
        return value


class SubjectSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    lectureCount = serializers.SerializerMethodField()
    testCount = serializers.SerializerMethodField()

    class Meta:
        model = Subject
        fields = ['id', 'title', 'description', 'status', 'createdAt', 'lectureCount', 'testCount']
        read_only_fields = fields

    def get_lectureCount(self, obj):
        count = getattr(obj, 'lecture_count', None)
        return obj.lectures.count() if count is None else count

    def get_testCount(self, obj):
        count = getattr(obj, 'test_count', None)
        return obj.tests.count() if count is None else count


class AdminSubjectSerializer(SubjectSerializer):
    teachers = serializers.SerializerMethodField()

    class Meta(SubjectSerializer.Meta):
        fields = SubjectSerializer.Meta.fields + ['teachers']
        read_only_fields = fields

    def get_teachers(self, obj):
        return [{'id': t.id, 'fullName': t.full_name} for t in obj.teachers.all()]


class StudentSubjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ['id', 'title', 'description']
        read_only_fields = fields


class LectureSerializer(serializers.ModelSerializer):
    originalFileName = serializers.CharField(source='original_filename', read_only=True)
    hasFile = serializers.BooleanField(source='has_file', read_only=True)
    dateAdded = serializers.DateTimeField(source='created_at', read_only=True)
    subjectId = serializers.IntegerField(source='subject_id', read_only=True)

    class Meta:
        model = Lecture
        fields = ['id', 'subjectId', 'title', 'status', 'originalFileName', 'hasFile', 'dateAdded']
        read_only_fields = fields


class StudentLectureSerializer(serializers.ModelSerializer):
    originalFileName = serializers.CharField(source='original_filename', read_only=True)
    dateAdded = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Lecture
        fields = ['id', 'title', 'originalFileName', 'dateAdded']
        read_only_fields = fields


class LectureUploadSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    file = serializers.FileField(required=False, allow_empty_file=False)
    status = serializers.ChoiceField(choices=Lecture.Status.choices, required=False, default=Lecture.Status.HIDDEN)

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required.')
        return value


class LectureUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    file = serializers.FileField(required=False, allow_empty_file=False)
