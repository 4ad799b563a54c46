"""
Liveness endpoints for uptime probing.

`GET /` answers with an empty 200 body so external uptime monitors can ping the bare
host. `GET /health` returns a small JSON payload with a UTC timestamp for humans and
container orchestrators. Neither endpoint touches the routing engine or the
conversation store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import Response

router = APIRouter()


@router.get("/")
def liveness() -> Response:
    return Response(content="", status_code=200)


@router.get("/health")
def health() -> Dict[str, str]:
    """
    Return a simple health status payload.

    Returns:
        Dict[str, str]: {"status": "ok", "timestamp": <ISO-8601 UTC timestamp>}
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
