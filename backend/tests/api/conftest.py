"""API test fixtures: relay app + httpx test client over a scripted upstream.

Invariants:
    - Every test gets a fresh app built from explicit Settings
    - get_upstream_client overridden with a real UpstreamClient on MockTransport

Design Decisions:
    - ASGITransport skips the lifespan, so certificates are never loaded here;
      startup behavior is covered in test_app_lifespan.py
"""

import pytest
from httpx import ASGITransport, AsyncClient

from search_relay.api.dependencies import get_upstream_client
from search_relay.main import create_app


@pytest.fixture
def relay_app(settings):
    return create_app(settings)


@pytest.fixture
async def client(relay_app, settings, fake_upstream):
    """Test client whose upstream calls hit fake_upstream."""
    upstream = fake_upstream.client(settings)
    relay_app.dependency_overrides[get_upstream_client] = lambda: upstream

    async with AsyncClient(
        transport=ASGITransport(app=relay_app), base_url="http://test",
    ) as c:
        yield c

    relay_app.dependency_overrides.clear()
    await upstream.aclose()
