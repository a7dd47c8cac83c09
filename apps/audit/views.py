"""
apps.audit.views
~~~~~~~~~~~~~~~~
GET /audit-logs/ – admin-only view of the configuration change history.
"""
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from common.exceptions import ValidationError
from common.permissions import IsAdminRole

from . import services
from .models import AuditLog
from .serializers import AuditLogSerializer


class AuditLogListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="List audit entries, newest first",
        parameters=[
            OpenApiParameter("entityType", str, enum=AuditLog.EntityType.values),
            OpenApiParameter("entityId", int),
        ],
        responses={200: AuditLogSerializer(many=True)},
        tags=["Audit"],
    )
    def get(self, request: Request) -> Response:
        entity_type = request.query_params.get("entityType")
        entity_id = request.query_params.get("entityId")
        if entity_type and entity_type not in AuditLog.EntityType.values:
            raise ValidationError(f"Unknown entityType '{entity_type}'.")
        if entity_id is not None and not entity_id.isdigit():
            raise ValidationError("entityId must be an integer.")

        entries = services.list_entries(
            entity_type=entity_type,
            entity_id=int(entity_id) if entity_id is not None else None,
        )
        return Response(AuditLogSerializer(entries, many=True).data)
