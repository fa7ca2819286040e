"""Root conftest: shared settings and scripted upstream fixtures.

Invariants:
    - Settings never read a developer .env file (see make_settings)
"""

import pytest

from search_relay.config import Settings

from tests.mock_upstream import FakeUpstream, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()
