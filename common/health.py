"""
common.health
~~~~~~~~~~~~~
GET /health/ – liveness + readiness probe for the config server.

Returns:
    200  {"status": "ok", "db": "ok", "groups": <n>, "items": <n>}
    503  {"status": "degraded", "db": "error: <msg>"}  – DB unreachable
"""
import structlog
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = structlog.get_logger(__name__)


@require_GET
def health_check(request):
    """Report database connectivity and the size of the configuration store."""
    from apps.configuration.models import ConfigurationGroup, ConfigurationItem  # noqa: PLC0415

    try:
        connection.ensure_connection()
        payload = {
            "status": "ok",
            "db": "ok",
            "groups": ConfigurationGroup.objects.count(),
            "items": ConfigurationItem.objects.count(),
        }
    except DatabaseError as exc:
        logger.error("health_check_db_failure", error=str(exc))
        return JsonResponse({"status": "degraded", "db": f"error: {exc}"}, status=503)

    return JsonResponse(payload, status=200)
