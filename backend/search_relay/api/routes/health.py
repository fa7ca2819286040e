"""Health Probe: liveness endpoint for container orchestration.

Invariants:
    - GET /health always returns 200 "ok" (text/plain) if the process is up
    - No auth, no upstream call
"""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health", status_code=status.HTTP_200_OK, response_class=PlainTextResponse,
)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return "ok"
