"""Health endpoint: a readiness probe over the service's dependencies.

The only dependency is the relational store; the response reports it
under ``services.database`` so more probes can be added alongside.
"""

from __future__ import annotations

import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def _probe_database(alias: str = "default") -> Dict[str, Any]:
    """Run ``SELECT 1`` on ``alias`` and report reachability and latency."""
    connection = connections[alias]
    started = time.perf_counter()
    try:
        connection.ensure_connection()
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.error("health.database_unreachable", alias=alias, exc_info=True)
        return {"status": "down"}
    return {
        "status": "up",
        "vendor": connection.vendor,
        "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: 200 when every probe is up, 503 otherwise."""
    services = {"database": _probe_database()}
    healthy = all(probe["status"] == "up" for probe in services.values())
    state = "healthy" if healthy else "unhealthy"

    logger.info("health.checked", status=state)
    return JsonResponse(
        {
            "status": state,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
