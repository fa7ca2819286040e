"""Health probe and route wiring tests."""

from httpx import ASGITransport, AsyncClient

from search_relay.main import create_app

from tests.mock_upstream import SHARED_SECRET, make_settings


async def test_health_returns_plain_ok(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.text == "ok"
    assert res.headers["content-type"].startswith("text/plain")


async def test_health_needs_no_secret(client, fake_upstream):
    res = await client.get("/health", headers={"x-shared-secret": "wrong"})
    assert res.status_code == 200
    assert fake_upstream.requests == []


async def test_get_on_search_path_not_allowed(client):
    res = await client.get("/tlo/person-search")
    assert res.status_code == 405


async def test_search_path_is_configurable():
    app = create_app(make_settings(person_search_path="relay/search/"))
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        moved = await c.post(
            "/relay/search", json={}, headers={"x-shared-secret": "bad"},
        )
        old = await c.post(
            "/tlo/person-search", json={}, headers={"x-shared-secret": SHARED_SECRET},
        )
    assert moved.status_code == 401
    assert old.status_code == 404
