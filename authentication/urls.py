from django.urls import path
from authentication.auth.views import (
    UserRegistrationView,
    UserLoginView,
    TokenRefreshView,
    CurrentUserView,
    LogoutView,
)

urlpatterns = [
    path('register/', UserRegistrationView.as_view(), name='register'),
    path('login/', UserLoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('me/', CurrentUserView.as_view(), name='me'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
]
