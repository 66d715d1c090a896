"""Liveness endpoint for load balancers and the ops dashboard."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)

_CACHE_PROBE_KEY = "health:probe"


def _timed(probe: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    probe()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _probe_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    # Backs the per-user workspace and the throttles
    cache.set(_CACHE_PROBE_KEY, "ok", 10)
    if cache.get(_CACHE_PROBE_KEY) != "ok":
        raise ConnectionError("Cache read-back failed")


def _outbox_backlog() -> Dict[str, int]:
    """Unrelayed order events; a growing number means the Celery beat is down."""
    pending = OutboxEvent.objects.filter(status=EventStatus.PENDING).count()
    stuck = OutboxEvent.objects.filter(
        status=EventStatus.FAILED, retry_count__gte=settings.OUTBOX_MAX_RETRIES
    ).count()
    return {"pending": pending, "failed": stuck}


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health

    200 when the database and the cache answer, 503 otherwise. The outbox
    backlog is informational and never fails the check.
    """
    services: Dict[str, Dict[str, Any]] = {}
    healthy = True

    try:
        services["database"] = _timed(_probe_database)
    except DatabaseError:
        services["database"] = {"status": "down"}
        healthy = False
        logger.error("health.database_down")

    try:
        services["cache"] = _timed(_probe_cache)
    except (ConnectionError, OSError):
        services["cache"] = {"status": "down"}
        healthy = False
        logger.error("health.cache_down")

    body: Dict[str, Any] = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": timezone.now().isoformat(),
        "services": services,
    }
    if services["database"]["status"] == "up":
        body["outbox"] = _outbox_backlog()

    logger.info("health.checked", status=body["status"])
    return JsonResponse(body, status=200 if healthy else 503)
