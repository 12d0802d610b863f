import logging
import secrets

from django.db import IntegrityError, transaction
from django.http import HttpResponseRedirect
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework.permissions import IsAuthenticated, AllowAny

from . import google
from .models import CustomUser, Role
from .permissions import IsAdmin, RolePermissionMixin
from .serializers import (
    LoginSerializer,
    RegisterUserSerializer,
    UserCreateSerializer,
    UserSerializer,
    UserUpdateSerializer,
    issue_tokens,
)

logger = logging.getLogger('authentication')

GOOGLE_STATE_SESSION_KEY = 'google_oauth_state'


# Register View - open for surveyors, elevated roles need an admin caller
class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        requested_role = serializer.validated_data['role']
        caller = request.user
        if requested_role != Role.SURVEYOR and not (caller.is_authenticated and caller.role == Role.ADMIN):
            return Response(
                {"error": "Only an admin can register reviewer or admin accounts"},
                status=status.HTTP_403_FORBIDDEN,
            )

        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError:
            return Response({"error": "Email already registered"}, status=status.HTTP_409_CONFLICT)

        logger.info(f"Registered {user.role} {user.pk}")
        return Response(issue_tokens(user), status=status.HTTP_201_CREATED)


# Login View - email and password, any active account
class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Email and password are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        email = serializer.validated_data['email']
        password = serializer.validated_data['password']

        user = CustomUser.objects.filter(email__iexact=email).first()
        if user is None or not user.has_usable_password():
            return Response({"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        if not user.is_active:
            return Response({"error": "Account is inactive"}, status=status.HTTP_403_FORBIDDEN)

        if not user.check_password(password):
            logger.warning(f"Failed login for {user.pk}")
            return Response({"error": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        logger.info(f"User {user.pk} logged in")
        return Response(issue_tokens(user), status=status.HTTP_200_OK)


# Logout View - Any authenticated user can logout
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get("refresh")
        if not refresh_token:
            return Response(
                {"error": "Refresh token is required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            # Blacklist the refresh token
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError:
            # Token might already be blacklisted
            pass

        return Response(
            {"message": "Logged out successfully"},
            status=status.HTTP_200_OK
        )


# Current user - Any authenticated user can view their own profile
class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"user": UserSerializer(request.user).data}, status=status.HTTP_200_OK)


class GoogleLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        if not google.is_configured():
            return Response(
                {"error": "Google login is not configured"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        state = secrets.token_urlsafe(32)
        request.session[GOOGLE_STATE_SESSION_KEY] = state
        return HttpResponseRedirect(google.build_authorization_url(state))


class GoogleCallbackView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        if not google.is_configured():
            return Response(
                {"error": "Google login is not configured"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        code = request.query_params.get('code')
        if not code:
            return Response({"error": "Missing authorization code"}, status=status.HTTP_400_BAD_REQUEST)

        expected_state = request.session.pop(GOOGLE_STATE_SESSION_KEY, None)
        if not expected_state or request.query_params.get('state') != expected_state:
            return Response({"error": "Invalid OAuth state"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            tokens = google.exchange_code(code)
            profile = google.fetch_profile(tokens['access_token'])
            user, created = google.get_or_create_google_user(profile)
        except google.GoogleAuthError as e:
            return Response({"error": str(e)}, status=status.HTTP_401_UNAUTHORIZED)

        if not user.is_active:
            return Response({"error": "Account is inactive"}, status=status.HTTP_403_FORBIDDEN)

        logger.info(f"User {user.pk} logged in with Google{' (new account)' if created else ''}")
        return Response(issue_tokens(user), status=status.HTTP_200_OK)


# List and create users - Only admin can list or create
class UserListCreateView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        users = CustomUser.objects.order_by('-created_at')
        return Response({"users": UserSerializer(users, many=True).data}, status=status.HTTP_200_OK)

    def post(self, request):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError:
            return Response({"error": "Email already exists"}, status=status.HTTP_409_CONFLICT)
        logger.info(f"Admin {request.user.pk} created {user.role} {user.pk}")
        return Response({"user": UserSerializer(user).data}, status=status.HTTP_201_CREATED)


# Single user: self or admin may update, only admin deletes
class UserDetailView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {'DELETE': [IsAdmin]}

    def get_object(self, user_id):
        try:
            return CustomUser.objects.get(id=user_id)
        except CustomUser.DoesNotExist:
            return None

    def get(self, request, user_id):
        user = self.get_object(user_id)
        if user is None:
            return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"user": UserSerializer(user).data}, status=status.HTTP_200_OK)

    def put(self, request, user_id):
        is_admin = request.user.role == Role.ADMIN
        if not is_admin and request.user.id != user_id:
            return Response(
                {"error": "You can only update your own profile"},
                status=status.HTTP_403_FORBIDDEN
            )

        user = self.get_object(user_id)
        if user is None:
            return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)

        data = request.data.copy() if hasattr(request.data, 'copy') else dict(request.data)
        if not is_admin:
            # Role, activation and password changes are admin only
            for key in UserUpdateSerializer.ADMIN_ONLY:
                data.pop(key, None)

        serializer = UserUpdateSerializer(user, data=data, partial=True)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            return Response({"error": "No fields to update"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError:
            return Response({"error": "Email already exists"}, status=status.HTTP_409_CONFLICT)
        return Response({"user": UserSerializer(user).data}, status=status.HTTP_200_OK)

    def delete(self, request, user_id):
        # Prevent admin from deleting themselves
        if request.user.id == user_id:
            return Response(
                {"error": "Cannot delete your own account"},
                status=status.HTTP_400_BAD_REQUEST
            )

        user = self.get_object(user_id)
        if user is None:
            return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)

        user.delete()
        logger.info(f"Admin {request.user.pk} deleted user {user_id}")
        return Response({"message": "User deleted successfully"}, status=status.HTTP_200_OK)
