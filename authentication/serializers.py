from rest_framework import serializers
from .models import CustomUser

# ------------------------------------------------------
# BASE USER SERIALIZER
# ------------------------------------------------------
class UserBaseSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='full_name', read_only=True)
    mobile = serializers.CharField(source='phone_number', read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            'uuid',
            'email',
            'full_name',
            'name',
            'phone_number',
            'mobile',
            'role',
            'status',
            'is_verified',
            'is_phone_verified',
            'created_at',
        ]
        read_only_fields = fields


# ------------------------------------------------------
# TOKEN SERIALIZERS
# ------------------------------------------------------
class TokenSerializer(serializers.Serializer):
    access_token = serializers.CharField(help_text="JWT access token for API requests")
    refresh_token = serializers.CharField(help_text="JWT refresh token for obtaining new access tokens")
    expires_in = serializers.IntegerField(help_text="Access token lifetime in seconds")
    refresh_expires_in = serializers.IntegerField(help_text="Refresh token lifetime in seconds")


class AuthDataSerializer(serializers.Serializer):
    user = UserBaseSerializer(help_text="User profile information")
    tokens = TokenSerializer(help_text="JWT tokens for authentication")
    is_new_user = serializers.BooleanField(required=False, help_text="Indicates if this is a newly created account")


# ------------------------------------------------------
# AUTH SERIALIZERS
# ------------------------------------------------------
class UserRegistrationSerializer(serializers.Serializer):
    full_name = serializers.CharField(
        min_length=2, max_length=100,
        error_messages={
            'min_length': 'Name must be at least 2 characters',
            'max_length': 'Name must be at most 100 characters',
        },
    )
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email address'})
    password = serializers.CharField(
        write_only=True, min_length=6, max_length=100,
        error_messages={'min_length': 'Password must be at least 6 characters'},
    )
    confirm_password = serializers.CharField(write_only=True)
    phone_number = serializers.CharField(required=False, allow_blank=True, max_length=15)

    def validate_email(self, value):
        return value.strip().lower()

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': 'Passwords do not match'})
        return attrs


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(help_text="User email address")
    password = serializers.CharField(write_only=True, help_text="User password")


class TokenRefreshSerializer(serializers.Serializer):
    refresh_token = serializers.CharField(help_text="JWT refresh token")


class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(help_text="Whether the operation was successful")
    message = serializers.CharField(required=False, help_text="Human-readable message")
    error = serializers.CharField(required=False, help_text="Error message when success is false")
    data = AuthDataSerializer(required=False, help_text="Response data containing user and tokens")
