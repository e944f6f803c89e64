"""
Serializers for accounts app
"""
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """User serializer for API responses"""
    fullName = serializers.CharField(source='full_name', read_only=True)
    mustChangePassword = serializers.BooleanField(source='must_change_password', read_only=True)
    groupId = serializers.IntegerField(source='group_id', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'fullName', 'role', 'groupId', 'mustChangePassword']
        read_only_fields = ['id', 'email', 'role', 'mustChangePassword']


class LoginSerializer(serializers.Serializer):
    """Login serializer"""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        if not email or not password:
            raise serializers.ValidationError('Must include "email" and "password".')

        # Custom User model uses email as USERNAME_FIELD
        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise AuthenticationFailed('Invalid email or password.')

        if not user.check_password(password):
            raise AuthenticationFailed('Invalid email or password.')

        if not user.is_active:
            raise AuthenticationFailed('User account is disabled.')

        attrs['user'] = user
        return attrs


class LoginResponseSerializer(serializers.Serializer):
    """Login response serializer"""
    accessToken = serializers.CharField()
    user = UserSerializer()


class AdminUserWriteSerializer(serializers.Serializer):
    """
    Create/update payload for /api/admin/users/.
    Password is required on create only; on update an empty password keeps the old one.
    """
    email = serializers.EmailField()
    fullName = serializers.CharField(source='full_name', max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    role = serializers.ChoiceField(choices=[c[0] for c in User.ROLE_CHOICES])
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, min_length=5)
    groupId = serializers.IntegerField(source='group_id', required=False, allow_null=True)
    subjectIds = serializers.ListField(
        source='subject_ids', child=serializers.IntegerField(), required=False
    )

    def validate_email(self, value):
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A user with this email already exists.')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password is required.'})
        return attrs
