"""
Integration tests for the FastAPI server module.

Tests both entry points end to end against a fake upstream.
"""

import re

import httpx
import pytest
from fastapi.testclient import TestClient

from wikiscroll.api.server import create_app

from .fakes import (
    RecordingHandler,
    json_response,
    make_http_client,
    query_page,
    query_payload,
    summary_payload,
)

FACEBOOK_UA = "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"
BROWSER_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"


class FakeWikimedia:
    """Fake Wikimedia: REST random summaries, pageids lookups and random generators."""

    def __init__(self):
        self.next_page_id = 1

    def _take_ids(self, n):
        ids = list(range(self.next_page_id, self.next_page_id + n))
        self.next_page_id += n
        return ids

    def __call__(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if request.url.path.endswith("/page/random/summary"):
            (page_id,) = self._take_ids(1)
            return json_response(summary_payload(page_id, title=f"Reef {page_id}"))
        if "pageids" in params:
            if params["pageids"] == "404":
                return json_response({"query": {"pages": {"-1": {"missing": ""}}}})
            return json_response(
                query_payload(
                    [
                        query_page(
                            int(params["pageids"]),
                            title="Great Barrier Reef",
                            thumbnail="https://upload.wikimedia.org/reef-1200.jpg",
                            fullurl="https://en.wikipedia.org/wiki/Great_Barrier_Reef",
                        )
                    ]
                )
            )
        if params.get("generator") == "random":
            ids = self._take_ids(int(params["grnlimit"]))
            return json_response(query_payload([query_page(i, title=f"Town {i}") for i in ids]))
        return httpx.Response(404)


@pytest.fixture
def upstream():
    return RecordingHandler(FakeWikimedia())


@pytest.fixture
def client(test_settings, upstream):
    """Create a test client for the FastAPI app."""
    return TestClient(create_app(settings=test_settings, http_client=make_http_client(upstream)))


class TestPreviewPath:
    """Test cases for GET /?a=..."""

    def test_bot_gets_preview(self, client, upstream):
        response = client.get("/?a=w12345", headers={"User-Agent": FACEBOOK_UA})

        assert response.status_code == 200
        assert response.headers["content-type"].lower() == "text/html;charset=utf-8"
        assert response.headers["cache-control"] == "public, max-age=3600"
        assert upstream.hosts == ["en.wikipedia.org"]

        title = re.search(r"<title>(.*)</title>", response.text).group(1)
        assert title.endswith("WikiScroll")
        assert title.startswith("Great Barrier Reef")
        image = re.search(r'<meta property="og:image" content="([^"]*)">', response.text).group(1)
        assert image == "https://upload.wikimedia.org/reef-1200.jpg"
        assert 'content="0;url=http://testserver/?a=w12345"' in response.text

    def test_human_passes_through(self, client, upstream):
        response = client.get("/?a=w12345", headers={"User-Agent": BROWSER_UA})

        assert response.status_code == 200
        assert '<div id="feed"></div>' in response.text
        assert upstream.requests == []

    def test_no_reference_passes_through(self, client, upstream):
        response = client.get("/", headers={"User-Agent": FACEBOOK_UA})

        assert response.status_code == 200
        assert '<div id="feed"></div>' in response.text
        assert upstream.requests == []

    def test_unresolvable_reference_passes_through(self, client, upstream):
        response = client.get("/?a=w404", headers={"User-Agent": FACEBOOK_UA})

        assert response.status_code == 200
        assert '<div id="feed"></div>' in response.text
        assert "og:image" not in response.text

    def test_invalid_reference_passes_through_without_upstream(self, client, upstream):
        response = client.get("/?a=q123", headers={"User-Agent": "Twitterbot/1.0"})

        assert response.status_code == 200
        assert '<div id="feed"></div>' in response.text
        assert upstream.requests == []

    def test_upstream_down_passes_through(self, test_settings):
        app = create_app(
            settings=test_settings,
            http_client=make_http_client(lambda request: httpx.Response(503)),
        )
        response = TestClient(app).get("/?a=v42", headers={"User-Agent": "Slackbot"})

        assert response.status_code == 200
        assert '<div id="feed"></div>' in response.text

    def test_head_passes_through(self, client, upstream):
        response = client.head("/?a=w1", headers={"User-Agent": BROWSER_UA})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert upstream.requests == []

    def test_missing_app_page(self, test_settings, upstream):
        settings = test_settings.model_copy(update={"index_file": "missing.html"})
        app = create_app(settings=settings, http_client=make_http_client(upstream))

        response = TestClient(app).get("/")

        assert response.status_code == 404


class TestBatchPath:
    """Test cases for /api/articles."""

    def test_travel_guide_batch(self, client, upstream):
        response = client.get("/api/articles?mode=how&lang=en&n=5")

        assert response.status_code == 200
        assert response.headers["x-cache"] == "MISS"
        assert response.headers["cache-control"] == "public, max-age=300"
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["content-type"].startswith("application/json")

        data = response.json()
        assert 0 < len(data["articles"]) <= 5
        for article in data["articles"]:
            assert article["source"] == "how"
            assert article["id"].startswith("v")
            assert article["body"]
            assert article["image"]
        assert data["cachedAt"]
        assert set(upstream.hosts) == {"en.wikivoyage.org"}

    def test_second_request_is_cache_hit(self, client, upstream):
        first = client.get("/api/articles?mode=wiki&lang=en&n=3")
        requests_after_first = len(upstream.requests)
        second = client.get("/api/articles?mode=wiki&lang=en&n=3")

        assert first.headers["x-cache"] == "MISS"
        assert second.headers["x-cache"] == "HIT"
        assert second.json() == first.json()
        assert len(upstream.requests) == requests_after_first == 8

    def test_different_count_is_separate_entry(self, client):
        client.get("/api/articles?mode=wiki&lang=en&n=3")
        response = client.get("/api/articles?mode=wiki&lang=en&n=4")

        assert response.headers["x-cache"] == "MISS"
        assert len(response.json()["articles"]) == 4

    def test_defaults(self, client, upstream):
        response = client.get("/api/articles")

        assert response.status_code == 200
        assert len(response.json()["articles"]) == 10
        assert len(upstream.requests) == 25  # ceil(10 * 2.5)
        assert set(upstream.hosts) == {"en.wikipedia.org"}

    def test_count_is_capped(self, client, upstream):
        response = client.get("/api/articles?n=500")

        assert len(response.json()["articles"]) == 20
        assert len(upstream.requests) == 50

    @pytest.mark.parametrize("n, expected", [("abc", 10), ("0", 1), ("-4", 1)])
    def test_bad_counts_are_normalized(self, client, n, expected):
        response = client.get(f"/api/articles?n={n}")

        assert response.status_code == 200
        assert len(response.json()["articles"]) == expected

    def test_bad_language_falls_back(self, client, upstream):
        response = client.get("/api/articles?lang=evil.example.com/&n=1")

        assert response.status_code == 200
        assert set(upstream.hosts) == {"en.wikipedia.org"}

    def test_preflight(self, client, upstream):
        response = client.options("/api/articles")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "GET" in response.headers["access-control-allow-methods"]
        assert upstream.requests == []


class TestHealth:
    """Test cases for GET /health."""

    def test_health_reports_cache(self, client):
        client.get("/api/articles?n=2")
        client.get("/api/articles?n=2")

        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["cache"]["entries"] == 1
        assert data["cache"]["hits"] == 1
        assert data["cache"]["misses"] == 1
