"""
API tests using FastAPI's TestClient.

Each test runs the real startup (tables created in a temporary SQLite file,
blocklist seeded with bad.com) with rate limiting switched off.
"""

import pytest
from fastapi.testclient import TestClient

from shortener.core.rate_limit import limiter
from shortener.core.setting import settings
from shortener.main import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setattr(settings, "AUTO_CREATE_TABLES", True)
    monkeypatch.setattr(settings, "BLOCKED_HOSTNAMES", ["bad.com"])
    monkeypatch.setattr(limiter, "enabled", False)

    with TestClient(app) as test_client:
        yield test_client


def shorten(client: TestClient, url: str) -> str:
    response = client.post("/shorten", json={"url": url})
    assert response.status_code == 201, response.text
    return response.json()["short_code"]


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "URL Shortener Service"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestShortenEndpoint:
    def test_shorten(self, client):
        response = client.post("/shorten", json={"url": "https://example.com/page"})

        assert response.status_code == 201
        body = response.json()
        assert len(body["short_code"]) == settings.SHORT_CODE_LENGTH
        assert body["short_url"] == f"{settings.BASE_URL}/{body['short_code']}"
        assert body["original_url"] == "https://example.com/page"

    def test_rejects_malformed_url(self, client):
        response = client.post("/shorten", json={"url": "not a url"})
        assert response.status_code == 422

    def test_rejects_blocked_hostname(self, client):
        response = client.post("/shorten", json={"url": "https://promo.bad.com/win"})
        assert response.status_code == 403


class TestRedirectEndpoint:
    def test_redirect_tracks_visit(self, client):
        short_code = shorten(client, "https://example.com/target")

        response = client.get(f"/{short_code}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/target"

        stats = client.get(f"/stats/{short_code}").json()
        assert stats["url"] == "https://example.com/target"
        assert stats["visit_count"] == 1
        assert len(stats["visits"]) == 1

    def test_unknown_code(self, client):
        response = client.get("/zzzzzzzz", follow_redirects=False)
        assert response.status_code == 404

    def test_malformed_code(self, client):
        response = client.get("/abc-def", follow_redirects=False)
        assert response.status_code == 400

    def test_blocked_after_shortening(self, client):
        short_code = shorten(client, "https://later-blocked.org/page")

        state = app.state
        client.portal.call(state.storage_gateway.add_blocked_hostname, "later-blocked.org")
        client.portal.call(state.blocklist_cache.refresh, True)

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 410

    def test_flagged_by_moderation(self, client, flag_as_blocked):
        short_code = shorten(client, "https://example.com/reported")

        client.portal.call(flag_as_blocked, app.state.storage_gateway, short_code)

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 410

        # A refused redirect is not a visit
        assert client.get(f"/stats/{short_code}").json()["visit_count"] == 0


class TestStatsEndpoints:
    def test_stats_unknown_code(self, client):
        assert client.get("/stats/zzzzzzzz").status_code == 404

    def test_stats_malformed_code(self, client):
        assert client.get("/stats/abc-def").status_code == 400

    def test_approximate_counts(self, client):
        assert client.get("/stats").json() == {"shortened_urls": 0, "visits": 0}

        short_code = shorten(client, "https://example.com/counted")
        shorten(client, "https://example.com/counted")
        client.get(f"/{short_code}", follow_redirects=False)

        assert client.get("/stats").json() == {"shortened_urls": 2, "visits": 1}
