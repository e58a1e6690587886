import json
import time

from fastapi.testclient import TestClient


def wait_for_usage(client: TestClient, key: str, used: int, timeout: float = 2.0) -> dict:
    """Poll until the merge worker has applied `used` hits (usage is eventually consistent)"""
    deadline = time.monotonic() + timeout
    while True:
        data = client.get(f"/api/v1/links/{key}").json()
        if data["metadata"]["used"] >= used or time.monotonic() > deadline:
            return data
        time.sleep(0.02)


class TestAddLink:
    """Test link creation"""

    def test_add_without_key(self, client: TestClient):
        """Test creating a link with a generated key"""
        response = client.post("/api/v1/links", json={"link": "https://example.com"})
        assert response.status_code == 201

        data = response.json()
        assert len(data["key"]) == 4
        assert data["link"] == "https://example.com"
        assert data["created"] is True
        assert data["metadata"]["used"] == 0
        assert data["short_url"] == f"http://testserver/{data['key']}"

    def test_add_with_key(self, client: TestClient):
        """Test creating a link with an explicit key"""
        response = client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})
        assert response.status_code == 201
        assert response.json()["key"] == "test"

    def test_link_already_exists(self, client: TestClient):
        """Test the same link without a key returns the same key"""
        first = client.post("/api/v1/links", json={"link": "https://example.com"}).json()
        second = client.post("/api/v1/links", json={"link": "https://example.com"})

        assert second.status_code == 201
        assert second.json()["key"] == first["key"]
        assert second.json()["created"] is False

    def test_key_already_exists(self, client: TestClient):
        """Test an explicit key that is taken is rejected"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example1.com"})
        response = client.post("/api/v1/links", json={"key": "test", "link": "https://example2.com"})

        assert response.status_code == 422
        assert response.json()["detail"]["key"] == "Key already in use"

    def test_invalid_link(self, client: TestClient):
        """Test creating a link with an invalid URL"""
        response = client.post("/api/v1/links", json={"link": "not-a-valid-url"})

        assert response.status_code == 422
        assert response.json()["detail"]["link"] == "Invalid URL"

    def test_empty_link(self, client: TestClient):
        """Test an empty link is rejected"""
        response = client.post("/api/v1/links", json={"link": ""})

        assert response.status_code == 422
        assert response.json()["detail"]["link"] == "Link cannot be empty"

    def test_invalid_keys(self, client: TestClient):
        """Test short, badly formed, reserved and blacklisted keys"""
        for key, message in [
            ("abc", "Key cannot be less than 4 characters"),
            ("bad key!", "Key can only contain 0-9, A-Z, a-z, _ or -"),
            ("abcd\n", "Key can only contain 0-9, A-Z, a-z, _ or -"),
            ("docs", "Key 'docs' is reserved"),
            ("health", "Key 'health' is reserved"),
            ("admin", "Key 'admin' is disallowed"),
        ]:
            response = client.post("/api/v1/links", json={"key": key, "link": "https://example.com"})
            assert response.status_code == 422
            assert response.json()["detail"]["key"] == message

        assert client.get("/api/v1/links").json() == []

    def test_short_url_uses_app_base_url(self, client: TestClient):
        """Test every response builds short_url from the app's own settings"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})

        assert client.get("/api/v1/links/test").json()["short_url"] == "http://testserver/test"
        assert client.get("/api/v1/links").json()[0]["short_url"] == "http://testserver/test"

    def test_add_persists_to_file(self, client: TestClient, data_path):
        """Test the data file holds the link as soon as the request returns"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})

        assert json.loads(data_path.read_text())["test"]["link"] == "https://example.com"


class TestValidateEndpoint:
    """Test dry-run validation"""

    def test_valid_request(self, client: TestClient):
        """Test a valid request reports no field errors and creates nothing"""
        response = client.post("/api/v1/validate/add_link", json={"key": "test", "link": "https://example.com"})

        assert response.status_code == 200
        assert response.json() == {"key": None, "link": None}
        assert client.get("/api/v1/links/test").status_code == 404

    def test_invalid_request(self, client: TestClient):
        """Test both fields reported at once"""
        response = client.post("/api/v1/validate/add_link", json={"key": "x", "link": "nope"})

        data = response.json()
        assert data["key"] is not None
        assert data["link"] is not None


class TestGetLinks:
    """Test reading links"""

    def test_get_link(self, client: TestClient):
        """Test getting a single link"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})

        response = client.get("/api/v1/links/test")
        assert response.status_code == 200
        assert response.json()["link"] == "https://example.com"

    def test_get_nonexistent_link(self, client: TestClient):
        """Test getting an unknown key"""
        response = client.get("/api/v1/links/test")
        assert response.status_code == 404

    def test_list_links(self, client: TestClient):
        """Test listing all links"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})

        data = client.get("/api/v1/links").json()
        assert len(data) == 1
        assert data[0]["key"] == "test"
        assert data[0]["link"] == "https://example.com"

    def test_list_empty_table(self, client: TestClient):
        """Test listing with no links"""
        assert client.get("/api/v1/links").json() == []

    def test_search_by_link(self, client: TestClient):
        """Test finding every key for a link"""
        client.post("/api/v1/links", json={"key": "key1", "link": "https://example.com"})
        client.post("/api/v1/links", json={"key": "key2", "link": "https://example.com"})

        response = client.get("/api/v1/links/search", params={"link": "https://example.com"})

        assert response.status_code == 200
        assert sorted(response.json()["keys"]) == ["key1", "key2"]

    def test_search_unknown_link(self, client: TestClient):
        """Test unknown link gives no keys"""
        response = client.get("/api/v1/links/search", params={"link": "https://nowhere.com"})
        assert response.json()["keys"] == []


class TestDeleteLink:
    """Test link deletion"""

    def test_delete_link(self, client: TestClient):
        """Test deleting a link"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})

        response = client.delete("/api/v1/links/test")
        assert response.status_code == 204

        assert client.get("/api/v1/links/test").status_code == 404
        assert client.get("/test", follow_redirects=False).status_code == 404

    def test_delete_nonexistent_link(self, client: TestClient):
        """Test deleting an unknown key"""
        response = client.delete("/api/v1/links/test")
        assert response.status_code == 404


class TestRedirect:
    """Test redirects and usage tracking"""

    def test_redirect(self, client: TestClient):
        """Test redirect to the stored link"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://www.github.com/"})

        response = client.get("/test", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_nonexistent(self, client: TestClient):
        """Test redirecting an unknown key"""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404

    def test_redirect_counts_usage(self, client: TestClient):
        """Test redirects are counted by the merge worker"""
        client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})
        created = client.get("/api/v1/links/test").json()["metadata"]

        for _ in range(3):
            client.get("/test", follow_redirects=False)

        data = wait_for_usage(client, "test", 3)
        assert data["metadata"]["used"] == 3
        assert data["metadata"]["last_used"] >= created["last_used"]

    def test_usage_saved_on_shutdown(self, app_settings, data_path):
        """Test merged usage counters are written when the app stops"""
        from main import create_app

        with TestClient(create_app(app_settings)) as client:
            client.post("/api/v1/links", json={"key": "test", "link": "https://example.com"})
            client.get("/test", follow_redirects=False)

        assert json.loads(data_path.read_text())["test"]["metadata"]["used"] == 1


class TestService:
    """Test service endpoints"""

    def test_health(self, client: TestClient):
        """Test health check"""
        response = client.get("/health")
        assert response.json()["status"] == "healthy"

    def test_root(self, client: TestClient):
        """Test root endpoint"""
        assert "version" in client.get("/").json()

    def test_error_status_codes(self):
        """Test store errors map to HTTP status codes"""
        from shortlink_app.api.error_handlers import status_code_for
        from shortlink_app.errors import AliasInUse, InvariantViolation, NotFound, StoreParseError

        assert status_code_for(AliasInUse("test")) == 409
        assert status_code_for(NotFound("test")) == 404
        assert status_code_for(StoreParseError("links.json", "bad")) == 500
        assert status_code_for(InvariantViolation("broken")) == 500
