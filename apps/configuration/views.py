"""
apps.configuration.views
~~~~~~~~~~~~~~~~~~~~~~~~
Thin DRF API views for groups, items and environments.
All business logic is delegated to :mod:`apps.configuration.services`.

Endpoints
---------
GET    /groups/                                   – List groups
POST   /groups/                                   – Create group (ADMIN)
GET    /groups/{id}/                              – Group detail
PUT    /groups/{id}/                              – Update group (ADMIN)
DELETE /groups/{id}/                              – Delete group + items (ADMIN)
GET    /groups/name/{name}/                       – Group by name
GET    /items/                                    – List items
POST   /items/                                    – Create item (ADMIN)
GET    /items/{id}/                               – Item detail
PUT    /items/{id}/                               – Replace item (ADMIN)
PATCH  /items/{id}/                               – Partial update (ADMIN)
DELETE /items/{id}/                               – Delete item (ADMIN)
GET    /items/group/{group_id}/                   – Items of a group
GET    /items/group/{group_id}/environment/{env}/ – Items of a group in one env
GET    /environments/                             – Environment tags
"""
from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.permissions import IsAdminRoleOrReadOnly

from . import services
from .serializers import (
    ConfigurationGroupSerializer,
    ConfigurationGroupWriteSerializer,
    ConfigurationItemSerializer,
    ConfigurationItemWriteSerializer,
)

_NOT_FOUND = OpenApiResponse(description="Resource not found.")
_CONFLICT = OpenApiResponse(description="Name or (group, key, environment) already taken.")


class _ConfigurationView(APIView):
    permission_classes = [IsAdminRoleOrReadOnly]


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

class GroupListCreateView(_ConfigurationView):
    """GET /groups/  –  POST /groups/"""

    @extend_schema(
        summary="List configuration groups",
        responses={200: ConfigurationGroupSerializer(many=True)},
        tags=["Configuration Groups"],
    )
    def get(self, request: Request) -> Response:
        groups = services.list_groups()
        return Response(ConfigurationGroupSerializer(groups, many=True).data)

    @extend_schema(
        summary="Create a configuration group",
        request=ConfigurationGroupWriteSerializer,
        responses={201: ConfigurationGroupSerializer, 409: _CONFLICT},
        tags=["Configuration Groups"],
    )
    def post(self, request: Request) -> Response:
        serializer = ConfigurationGroupWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = services.create_group(actor=request.user, **serializer.validated_data)
        return Response(
            ConfigurationGroupSerializer(group).data,
            status=status.HTTP_201_CREATED,
        )


class GroupDetailView(_ConfigurationView):
    """GET / PUT / DELETE /groups/<pk>/"""

    @extend_schema(
        summary="Get a configuration group by id",
        responses={200: ConfigurationGroupSerializer, 404: _NOT_FOUND},
        tags=["Configuration Groups"],
    )
    def get(self, request: Request, pk: int) -> Response:
        return Response(ConfigurationGroupSerializer(services.get_group(pk)).data)

    @extend_schema(
        summary="Update a configuration group",
        request=ConfigurationGroupWriteSerializer,
        responses={200: ConfigurationGroupSerializer, 404: _NOT_FOUND, 409: _CONFLICT},
        tags=["Configuration Groups"],
    )
    def put(self, request: Request, pk: int) -> Response:
        serializer = ConfigurationGroupWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = services.update_group(pk, actor=request.user, **serializer.validated_data)
        return Response(ConfigurationGroupSerializer(group).data)

    @extend_schema(
        summary="Delete a configuration group and all of its items",
        responses={204: None, 404: _NOT_FOUND},
        tags=["Configuration Groups"],
    )
    def delete(self, request: Request, pk: int) -> Response:
        services.delete_group(pk, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class GroupByNameView(_ConfigurationView):
    """GET /groups/name/<name>/"""

    @extend_schema(
        summary="Get a configuration group by name",
        responses={200: ConfigurationGroupSerializer, 404: _NOT_FOUND},
        tags=["Configuration Groups"],
    )
    def get(self, request: Request, name: str) -> Response:
        return Response(ConfigurationGroupSerializer(services.get_group_by_name(name)).data)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

class ItemListCreateView(_ConfigurationView):
    """GET /items/  –  POST /items/"""

    @extend_schema(
        summary="List all configuration items",
        responses={200: ConfigurationItemSerializer(many=True)},
        tags=["Configuration Items"],
    )
    def get(self, request: Request) -> Response:
        return Response(ConfigurationItemSerializer(services.list_items(), many=True).data)

    @extend_schema(
        summary="Create a configuration item",
        request=ConfigurationItemWriteSerializer,
        responses={201: ConfigurationItemSerializer, 404: _NOT_FOUND, 409: _CONFLICT},
        tags=["Configuration Items"],
    )
    def post(self, request: Request) -> Response:
        serializer = ConfigurationItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = services.create_item(actor=request.user, **serializer.validated_data)
        return Response(
            ConfigurationItemSerializer(item).data,
            status=status.HTTP_201_CREATED,
        )


class ItemDetailView(_ConfigurationView):
    """GET / PUT / PATCH / DELETE /items/<pk>/"""

    @extend_schema(
        summary="Get a configuration item by id",
        responses={200: ConfigurationItemSerializer, 404: _NOT_FOUND},
        tags=["Configuration Items"],
    )
    def get(self, request: Request, pk: int) -> Response:
        return Response(ConfigurationItemSerializer(services.get_item(pk)).data)

    @extend_schema(
        summary="Replace a configuration item",
        request=ConfigurationItemWriteSerializer,
        responses={200: ConfigurationItemSerializer, 404: _NOT_FOUND, 409: _CONFLICT},
        tags=["Configuration Items"],
    )
    def put(self, request: Request, pk: int) -> Response:
        return self._update(request, pk, partial=False)

    @extend_schema(
        summary="Partially update a configuration item",
        description="Used by inline value edits; only the supplied fields change.",
        request=ConfigurationItemWriteSerializer,
        responses={200: ConfigurationItemSerializer, 404: _NOT_FOUND, 409: _CONFLICT},
        tags=["Configuration Items"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        return self._update(request, pk, partial=True)

    @extend_schema(
        summary="Delete a configuration item",
        responses={204: None, 404: _NOT_FOUND},
        tags=["Configuration Items"],
    )
    def delete(self, request: Request, pk: int) -> Response:
        services.delete_item(pk, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _update(self, request: Request, pk: int, *, partial: bool) -> Response:
        serializer = ConfigurationItemWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        item = services.update_item(pk, data=serializer.validated_data, actor=request.user)
        return Response(ConfigurationItemSerializer(item).data)


class ItemsByGroupView(_ConfigurationView):
    """GET /items/group/<group_id>/"""

    @extend_schema(
        summary="List the items of a group across all environments",
        responses={200: ConfigurationItemSerializer(many=True), 404: _NOT_FOUND},
        tags=["Configuration Items"],
    )
    def get(self, request: Request, group_id: int) -> Response:
        items = services.list_items_by_group(group_id)
        return Response(ConfigurationItemSerializer(items, many=True).data)


class ItemsByGroupAndEnvironmentView(_ConfigurationView):
    """GET /items/group/<group_id>/environment/<environment>/"""

    @extend_schema(
        summary="List the items of a group in one environment",
        responses={
            200: ConfigurationItemSerializer(many=True),
            404: _NOT_FOUND,
            422: OpenApiResponse(description="Unknown environment."),
        },
        tags=["Configuration Items"],
    )
    def get(self, request: Request, group_id: int, environment: str) -> Response:
        items = services.list_items_by_group_and_environment(group_id, environment)
        return Response(ConfigurationItemSerializer(items, many=True).data)


# ---------------------------------------------------------------------------
# Environments
# ---------------------------------------------------------------------------

class EnvironmentListView(_ConfigurationView):
    """GET /environments/"""

    @extend_schema(
        summary="List the available environments",
        responses={200: OpenApiResponse(description="Environment tags in canonical order.")},
        tags=["Environments"],
    )
    def get(self, request: Request) -> Response:
        return Response(services.list_environments())
