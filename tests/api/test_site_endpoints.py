"""
Integration tests for site endpoints
"""
import pytest
from datetime import datetime, timezone
from main import app
from api.dependencies import get_change_feed
from api.services.change_feed import SiteChangeFeed
from db.repositories.site_repository import SiteRepository


@pytest.fixture
def change_feed():
    feed = SiteChangeFeed()
    app.dependency_overrides[get_change_feed] = lambda: feed
    yield feed
    app.dependency_overrides.pop(get_change_feed, None)


class TestSiteEndpoints:
    """Test site API endpoints"""

    def test_add_site_success(self, client, change_feed):
        response = client.post("/api/sites", json={"url": "  example.com  "})
        assert response.status_code == 201
        data = response.json()
        assert data["url"] == "example.com"
        assert data["status"] == "UNKNOWN"
        assert data["last_checked"] is None
        assert data["last_down_timestamp"] is None
        assert change_feed.revision == 1

    def test_add_duplicate_site_conflicts(self, client, change_feed):
        client.post("/api/sites", json={"url": "https://example.com"})
        response = client.post("/api/sites", json={"url": "https://example.com"})
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]
        assert len(client.get("/api/sites").json()) == 1
        assert change_feed.revision == 1

    @pytest.mark.parametrize("url", ["", "   ", "http://exa mple.com"])
    def test_add_invalid_site_rejected(self, client, change_feed, url):
        response = client.post("/api/sites", json={"url": url})
        assert response.status_code == 422
        assert change_feed.revision == 0

    def test_list_sites(self, client, change_feed):
        for url in ["https://b.example.com", "https://a.example.com"]:
            client.post("/api/sites", json={"url": url})
        response = client.get("/api/sites")
        assert response.status_code == 200
        assert [s["url"] for s in response.json()] == [
            "https://a.example.com",
            "https://b.example.com",
        ]

    def test_get_site(self, client, change_feed):
        site_id = client.post("/api/sites", json={"url": "https://example.com"}).json()["id"]
        response = client.get(f"/api/sites/{site_id}")
        assert response.status_code == 200
        assert response.json()["url"] == "https://example.com"
        assert client.get("/api/sites/999").status_code == 404

    def test_timestamps_are_returned_as_utc(self, client, change_feed, session):
        site_id = client.post("/api/sites", json={"url": "https://example.com"}).json()["id"]
        SiteRepository(session).record_down(site_id, datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))

        data = client.get(f"/api/sites/{site_id}").json()
        for field in ("last_checked", "last_status_change", "last_down_timestamp"):
            parsed = datetime.fromisoformat(data[field].replace("Z", "+00:00"))
            assert parsed == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_delete_site(self, client, change_feed):
        site_id = client.post("/api/sites", json={"url": "https://example.com"}).json()["id"]
        response = client.delete(f"/api/sites/{site_id}")
        assert response.status_code == 204
        assert client.get("/api/sites").json() == []
        assert change_feed.revision == 2

    def test_delete_missing_site_not_found(self, client, change_feed):
        client.post("/api/sites", json={"url": "https://example.com"})
        response = client.delete("/api/sites/999")
        assert response.status_code == 404
        assert len(client.get("/api/sites").json()) == 1
        assert change_feed.revision == 1

    def test_change_revision_endpoint(self, client, change_feed):
        assert client.get("/api/sites/changes").json() == {"revision": 0}
        change_feed.notify()
        assert client.get("/api/sites/changes").json() == {"revision": 1}
