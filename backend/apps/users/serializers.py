"""
User serializers demonstrating best practices:
- Write-only fields for passwords
- Custom validation
- Read-only computed fields
"""

from rest_framework import serializers
from django.contrib.auth.models import Group
from django.contrib.auth.password_validation import validate_password
from .models import User
from .services import is_system_role


class UserSerializer(serializers.ModelSerializer):
    """
    User with its role names.

    Best practices:
    - Read-only fields that shouldn't be updated via API
    - Computed fields from model properties
    """
    full_name = serializers.CharField(read_only=True)
    roles = serializers.ListField(source='role_names', child=serializers.CharField(), read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'username', 'first_name', 'last_name',
            'full_name', 'phone', 'preferred_language', 'roles',
            'is_verified', 'is_active', 'is_staff',
            'date_joined', 'last_login_date',
        ]
        read_only_fields = [
            'id', 'is_verified', 'is_active', 'is_staff',
            'date_joined', 'last_login_date',
        ]


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.

    Best practices:
    - Validate passwords
    - Write-only password field
    """
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = [
            'email', 'username', 'password', 'password_confirm',
            'first_name', 'last_name', 'phone', 'preferred_language',
        ]

    def validate(self, attrs):
        """Validate that passwords match."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match.'
            })
        return attrs


class UserUpdateSerializer(serializers.ModelSerializer):
    """Serializer for updating the current user's profile."""

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'phone', 'preferred_language']


class ChangePasswordSerializer(serializers.Serializer):
    """
    Serializer for password change.

    Best practice: Separate serializer for password changes
    with current password validation.
    """
    old_password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    new_password = serializers.CharField(
        required=True,
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    new_password_confirm = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate_old_password(self, value):
        """Validate that old password is correct."""
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Incorrect password.')
        return value

    def validate(self, attrs):
        """Validate that new passwords match."""
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError({
                'new_password_confirm': 'New passwords do not match.'
            })
        return attrs

    def save(self):
        """Update user password."""
        user = self.context['request'].user
        user.set_password(self.validated_data['new_password'])
        user.save()
        return user


class RoleAssignmentSerializer(serializers.Serializer):
    role = serializers.CharField(max_length=150)


class RoleSerializer(serializers.ModelSerializer):
    user_count = serializers.IntegerField(read_only=True)
    is_system_role = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = ['id', 'name', 'user_count', 'is_system_role']

    def get_is_system_role(self, obj):
        return is_system_role(obj.name)


class RoleCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
