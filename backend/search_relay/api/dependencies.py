"""Route Dependencies: settings, upstream client, and shared-secret auth.

Invariants:
    - Settings and UpstreamClient are read from app.state (set by create_app / lifespan)
    - Shared-secret check runs before the body is read: a rejected caller never
      reaches validation or upstream
    - Secret comparison is constant-time

Design Decisions:
    - app.state over module globals: tests swap both via dependency_overrides
"""

import hmac

from fastapi import Depends, Header, Request

from search_relay.config import Settings
from search_relay.core.errors import AuthFailure
from search_relay.infrastructure.upstream_client import UpstreamClient


def get_relay_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream_client(request: Request) -> UpstreamClient:
    return request.app.state.upstream_client


def secret_matches(provided: str | None, expected: str) -> bool:
    """Constant-time comparison; a missing header never matches."""
    if provided is None:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_shared_secret(
    x_shared_secret: str | None = Header(None),
    settings: Settings = Depends(get_relay_settings),
) -> None:
    """Reject callers without the configured x-shared-secret header."""
    if not secret_matches(x_shared_secret, settings.shared_secret.get_secret_value()):
        raise AuthFailure()
