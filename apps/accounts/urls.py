"""
apps.accounts.urls
~~~~~~~~~~~~~~~~~~
URL routing for login and user administration.
Mounted at /api/v1/ by the root URLconf.
"""
from django.urls import path

from .views import (
    ForgotPasswordView,
    LoginView,
    ResetPasswordView,
    UserDetailView,
    UserListCreateView,
    ValidateResetTokenView,
    ValidateTokenView,
)

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/validate/", ValidateTokenView.as_view(), name="auth-validate"),
    path("users/", UserListCreateView.as_view(), name="user-list-create"),
    path("users/<int:pk>/", UserDetailView.as_view(), name="user-detail"),
    path("users/forgot-password/", ForgotPasswordView.as_view(), name="user-forgot-password"),
    path("users/validate-token/", ValidateResetTokenView.as_view(), name="user-validate-token"),
    path("users/reset-password/", ResetPasswordView.as_view(), name="user-reset-password"),
]
