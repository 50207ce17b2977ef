"""
Health router - liveness endpoints, mounted at the application root.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/")
def root(request: Request):
    """Welcome message pointing at the docs."""
    return {
        "message": f"Welcome to {request.app.title}! Visit /docs for the API documentation."
    }


@router.get("/health")
def health_check(request: Request):
    """
    Simple health check for load balancers and container probes.

    Does NOT check database connectivity.
    """
    app_settings = request.app.state.settings
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "environment": app_settings.ENVIRONMENT,
    }
