"""
Tests for the lyrics fetch service (Starlette TestClient, search faked).
"""

import pytest
from starlette.testclient import TestClient

from lyrical.cache import LyricsCache
from lyrical.web import server


@pytest.fixture
def searches(monkeypatch):
    """Queue of (payload, error) results for the fake searcher; records queries."""
    state = {"results": [], "queries": []}

    async def fake_search(query):
        state["queries"].append(query)
        return state["results"].pop(0)

    monkeypatch.setattr(server, "search_lyrics", fake_search)
    return state


@pytest.fixture
def client(tmp_path):
    app = server.create_app(cache_dir=tmp_path / "results")
    with TestClient(app) as c:
        yield c


class TestFetchLyrics:

    def test_missing_query(self, client, searches):
        r = client.post("/fetch-lyrics", json={})
        assert r.status_code == 400
        assert r.json() == {"error": "Search query is required"}
        assert searches["queries"] == []

    def test_blank_query(self, client, searches):
        r = client.post("/fetch-lyrics", json={"searchQuery": "   "})
        assert r.status_code == 400

    def test_invalid_body(self, client, searches):
        r = client.post("/fetch-lyrics", content=b"not json", headers={"content-type": "application/json"})
        assert r.status_code == 400

    def test_found_and_cached(self, client, searches, tmp_path):
        searches["results"].append(({"lyrics": "[00:01.00]hello"}, ""))

        r = client.post("/fetch-lyrics", json={"searchQuery": "Hello Adele"})
        assert r.status_code == 200
        assert r.json() == {"lyrics": "[00:01.00]hello", "cached": False}

        assert LyricsCache(tmp_path / "results").get("hello adele") == "[00:01.00]hello"

    def test_cache_hit_skips_search(self, client, searches):
        searches["results"].append(({"lyrics": "[00:01.00]hello"}, ""))
        client.post("/fetch-lyrics", json={"searchQuery": "Hello Adele"})

        r = client.post("/fetch-lyrics", json={"searchQuery": "  hello ADELE "})
        assert r.json() == {"lyrics": "[00:01.00]hello", "cached": True}
        assert searches["queries"] == ["Hello Adele"]

    def test_not_found(self, client, searches, tmp_path):
        searches["results"].append(({"error": "No lyrics found"}, ""))
        r = client.post("/fetch-lyrics", json={"searchQuery": "obscure"})
        assert r.status_code == 200
        assert r.json() == {"error": "No lyrics found"}
        assert LyricsCache(tmp_path / "results").entries() == []

    def test_search_failure(self, client, searches, isolated_output):
        searches["results"].append((None, "Search process exited with code 1"))
        r = client.post("/fetch-lyrics", json={"searchQuery": "boom"})
        assert r.status_code == 500
        assert r.json() == {"error": "Search process exited with code 1"}
        assert (isolated_output / "errors.log").exists()


class TestHealth:

    def test_health_shape(self, client):
        r = client.get("/api/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] in ("ok", "degraded")
        assert data["checks"]["cache"]["ok"] is True
        assert "syncedlyrics" in data["checks"]

    def test_cors_headers(self, client):
        r = client.get("/api/health", headers={"Origin": "http://example.com"})
        assert r.headers.get("access-control-allow-origin") == "*"
