"""
Notes API: Health Check Route
==============================

What:  GET /health for Docker health checks and load balancer checks.
How:   Pings the database through the shared NoteStore and reports uptime
       since this app instance started (app.state.started_at).

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Request, Response

from notes_api import __version__
from notes_api.deps import get_note_store
from notes_api.schemas.note import HealthResponse
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the service and its database.",
)
async def health_check(
    request: Request,
    response: Response,
    store: NoteStore = Depends(get_note_store),
) -> HealthResponse:
    connected = await store.ping()
    if not connected:
        logger.warning("Health check: database unreachable")
        response.status_code = 503

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - request.app.state.started_at, 2),
    )
