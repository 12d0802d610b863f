from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    RegisterView,
    LoginView,
    LogoutView,
    UserProfileView,
    GoogleLoginView,
    GoogleCallbackView,
)

urlpatterns = [
    # Email / password
    path('register/', RegisterView.as_view(), name='register'),
    path('login/', LoginView.as_view(), name='login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('logout/', LogoutView.as_view(), name='logout'),

    # Current user
    path('me/', UserProfileView.as_view(), name='me'),
    path('profile/', UserProfileView.as_view(), name='profile'),

    # Google OAuth
    path('google/', GoogleLoginView.as_view(), name='google_login'),
    path('google/callback/', GoogleCallbackView.as_view(), name='google_callback'),
]
