import logging

from django.db import DatabaseError
from django.http import JsonResponse

from fleetfix.apps.core.health import check_db_and_orm

logger = logging.getLogger(__name__)


def healthz(request):
    """Public health check endpoint for the load balancer."""
    try:
        details = check_db_and_orm()
    except DatabaseError as exc:
        logger.error("healthcheck_failed", extra={"error": str(exc)})
        resp = JsonResponse({"status": "error", "error": str(exc)})
        resp.status_code = 503
        resp["Cache-Control"] = "no-store"
        return resp

    resp = JsonResponse({"status": "ok", "checks": details})
    resp["Cache-Control"] = "no-store"
    return resp
