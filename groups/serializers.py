"""
Serializers for groups app
"""
from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from .models import Group


class GroupSerializer(serializers.ModelSerializer):
    """Group serializer. studentCount comes from an annotated queryset when present."""
    name = serializers.CharField(
        max_length=255,
        validators=[UniqueValidator(
            queryset=Group.objects.all(),
            message='group with this name already exists',
            lookup='iexact',
        )],
    )
    studentCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Group
        fields = ['id', 'name', 'studentCount', 'createdAt']
        read_only_fields = ['id']

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Group name is required.')
        return value

    def get_studentCount(self, obj):
        count = getattr(obj, 'student_count', None)
        if count is None:
            count = obj.students.count()
        return count


class GroupStudentSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    fullName = serializers.CharField(source='full_name')
