"""
apps.accounts.views
~~~~~~~~~~~~~~~~~~~
Thin DRF API views for login and user administration.
All business logic is delegated to :mod:`apps.accounts.services`.

Endpoints
---------
POST   /auth/login/                 – Exchange credentials for a bearer token
GET    /auth/validate/              – Check the bearer token
GET    /users/                      – List users (ADMIN)
POST   /users/                      – Create user + welcome email (ADMIN)
PUT    /users/{id}/                 – Update user (ADMIN)
DELETE /users/{id}/                 – Delete user (ADMIN)
POST   /users/forgot-password/      – Mail a reset link
GET    /users/validate-token/       – Check a reset token
POST   /users/reset-password/       – Set a new password with a token
"""
from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.permissions import IsAdminRole

from . import services
from .serializers import (
    ForgotPasswordSerializer,
    LoginResponseSerializer,
    LoginSerializer,
    ResetPasswordSerializer,
    UserSerializer,
    UserWriteSerializer,
)

_NOT_FOUND = OpenApiResponse(description="User not found.")
_CONFLICT = OpenApiResponse(description="Username or email already in use.")
_TOKEN_PARAM = OpenApiParameter("token", str, required=True)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginView(APIView):
    """POST /auth/login/"""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in and obtain a bearer token",
        request=LoginSerializer,
        responses={200: LoginResponseSerializer, 401: LoginResponseSerializer},
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.login(request=request, **serializer.validated_data)
        return Response(
            result.as_dict(),
            status=status.HTTP_200_OK if result.success else status.HTTP_401_UNAUTHORIZED,
        )


class ValidateTokenView(APIView):
    """GET /auth/validate/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Validate the bearer token",
        responses={200: OpenApiResponse(description="{valid, username, role}")},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        return Response(
            {"valid": True, "username": request.user.username, "role": request.user.role}
        )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserListCreateView(APIView):
    """GET /users/  –  POST /users/"""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="List users",
        responses={200: UserSerializer(many=True)},
        tags=["Users"],
    )
    def get(self, request: Request) -> Response:
        return Response(UserSerializer(services.list_users(), many=True).data)

    @extend_schema(
        summary="Create a user and send a welcome email",
        request=UserWriteSerializer,
        responses={201: OpenApiResponse(description="{id, username, email, message}"), 409: _CONFLICT},
        tags=["Users"],
    )
    def post(self, request: Request) -> Response:
        serializer = UserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.create_user(**serializer.validated_data)
        return Response(
            {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "message": services.user_service.USER_CREATED,
            },
            status=status.HTTP_201_CREATED,
        )


class UserDetailView(APIView):
    """PUT / DELETE /users/<pk>/"""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="Update a user",
        request=UserWriteSerializer,
        responses={
            200: OpenApiResponse(description="{id, username, email, role, message}"),
            404: _NOT_FOUND,
            409: _CONFLICT,
        },
        tags=["Users"],
    )
    def put(self, request: Request, pk: int) -> Response:
        serializer = UserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.update_user(pk, **serializer.validated_data)
        return Response(
            {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "role": user.role,
                "message": services.user_service.USER_UPDATED,
            }
        )

    @extend_schema(
        summary="Delete a user",
        responses={204: None, 404: _NOT_FOUND},
        tags=["Users"],
    )
    def delete(self, request: Request, pk: int) -> Response:
        services.delete_user(pk, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Password setup / reset
# ---------------------------------------------------------------------------

class _PublicView(APIView):
    authentication_classes: list = []
    permission_classes = [AllowAny]


class ForgotPasswordView(_PublicView):
    """POST /users/forgot-password/"""

    @extend_schema(
        summary="Request a password reset email",
        request=ForgotPasswordSerializer,
        responses={200: OpenApiResponse(description="{message}")},
        tags=["Users"],
    )
    def post(self, request: Request) -> Response:
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = services.request_password_reset(**serializer.validated_data)
        return Response({"message": message})


class ValidateResetTokenView(_PublicView):
    """GET /users/validate-token/?token=..."""

    @extend_schema(
        summary="Check whether a password token is still usable",
        parameters=[_TOKEN_PARAM],
        responses={200: OpenApiResponse(description="{valid}")},
        tags=["Users"],
    )
    def get(self, request: Request) -> Response:
        token = request.query_params.get("token", "")
        return Response({"valid": services.validate_password_reset_token(token)})


class ResetPasswordView(_PublicView):
    """POST /users/reset-password/?token=..."""

    @extend_schema(
        summary="Set a new password using a setup or reset token",
        parameters=[_TOKEN_PARAM],
        request=ResetPasswordSerializer,
        responses={
            200: OpenApiResponse(description="{message}"),
            422: OpenApiResponse(description="Mismatch, weak password, bad or expired token."),
        },
        tags=["Users"],
    )
    def post(self, request: Request) -> Response:
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.reset_password(
            token=request.query_params.get("token", ""),
            password=serializer.validated_data["password"],
            confirm_password=serializer.validated_data["confirmPassword"],
        )
        return Response({"message": services.user_service.PASSWORD_CHANGED})
