from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework import serializers, status
from rest_framework.exceptions import APIException
from .models import CustomUser, Role


class EmailConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Email already exists'
    default_code = 'email_conflict'


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        # Add custom claims
        token['email'] = user.email
        token['firstName'] = user.first_name
        token['lastName'] = user.last_name
        token['role'] = user.role

        return token


class UserSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    userImage = serializers.SerializerMethodField()
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'firstName', 'lastName', 'userImage', 'role', 'isActive', 'createdAt']
        read_only_fields = fields

    def get_userImage(self, obj):
        return obj.user_image or ''


def issue_tokens(user):
    """Login response body: access token, refresh token and the user."""
    refresh = CustomTokenObtainPairSerializer.get_token(user)
    update_last_login(None, user)
    return {
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'user': UserSerializer(user).data,
    }


class RegisterUserSerializer(serializers.Serializer):
    firstName = serializers.CharField(max_length=150)
    lastName = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.SURVEYOR)
    isActive = serializers.BooleanField(required=False, default=True)
    userImage = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_email(self, value):
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise EmailConflict("Email already registered")
        return value

    def create(self, data):
        return CustomUser.objects.create_user(
            email=data['email'],
            password=data['password'],
            first_name=data['firstName'],
            last_name=data['lastName'],
            user_image=data.get('userImage') or None,
            role=data['role'],
            is_active=data['isActive'],
        )


class UserCreateSerializer(RegisterUserSerializer):
    """Admin-side account creation."""

    def validate_email(self, value):
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise EmailConflict("Email already exists")
        return value


class UserUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    firstName = serializers.CharField(max_length=150, required=False)
    lastName = serializers.CharField(max_length=150, required=False)
    userImage = serializers.CharField(required=False, allow_blank=True)
    # Admin only
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    isActive = serializers.BooleanField(required=False)
    password = serializers.CharField(write_only=True, required=False, min_length=6)

    ADMIN_ONLY = ('role', 'isActive', 'password')

    def validate_email(self, value):
        user = self.instance
        if CustomUser.objects.filter(email__iexact=value).exclude(pk=user.pk).exists():
            raise EmailConflict("Email already exists")
        return value

    def update(self, instance, validated_data):
        if 'email' in validated_data:
            instance.email = validated_data['email']
        if 'firstName' in validated_data:
            instance.first_name = validated_data['firstName']
        if 'lastName' in validated_data:
            instance.last_name = validated_data['lastName']
        if 'userImage' in validated_data:
            instance.user_image = validated_data['userImage']
        if 'role' in validated_data:
            instance.role = validated_data['role']
        if 'isActive' in validated_data:
            instance.is_active = validated_data['isActive']
        if 'password' in validated_data:
            instance.set_password(validated_data['password'])
        instance.save()
        return instance


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
