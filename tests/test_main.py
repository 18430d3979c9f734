import httpx
import pytest
from fastapi.testclient import TestClient

from seo_meta_agent import main
from seo_meta_agent.analyzer import analyze

PAGE = (
    "<html><head><title>A reasonably descriptive title for tests</title>"
    '<meta property="og:title" content="OG"></head></html>'
)


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def mock_site(monkeypatch):
    def handler(request):
        return httpx.Response(200, headers={"content-type": "text/html"}, text=PAGE)

    transport = httpx.MockTransport(handler)
    monkeypatch.setattr(main, "analyze", lambda req, policy: analyze(req, policy, transport=transport))


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "service": "seo-analyzer"}
    assert client.get("/healthz").json() == {"ok": True}


def test_analyze_returns_camel_case_report(client, fake_dns, mock_site):
    res = client.post("/api/analyze", json={"url": "https://example.com"})

    assert res.status_code == 200
    body = res.json()
    assert body["url"] == "https://example.com"
    assert body["title"] == "A reasonably descriptive title for tests"
    assert body["ogTitle"] == "OG"
    assert "og_title" not in body
    assert "description" not in body
    assert "analyzedAt" in body
    assert 0 <= body["score"] <= 100
    assert {"name", "content", "status"} <= set(body["tags"][0])


@pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": "example.com"}, {"url": 42}])
def test_invalid_request_body(client, payload):
    res = client.post("/api/analyze", json=payload)
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request"
    assert res.json()["details"]


def test_blocked_url_returns_safe_message(client, fake_dns):
    res = client.post("/api/analyze", json={"url": "http://127.0.0.1/admin"})

    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Analysis failed"
    assert "private or internal" in body["message"]
    assert "127.0.0.1" not in body["message"]


def test_protocol_rejected(client, fake_dns):
    res = client.post("/api/analyze", json={"url": "ftp://example.com/"})
    assert res.status_code == 400
    assert res.json()["message"] == "Only http and https URLs can be analyzed."


def test_upstream_failure_is_bad_gateway(client, fake_dns, monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(404, text="nope"))
    monkeypatch.setattr(main, "analyze", lambda req, policy: analyze(req, policy, transport=transport))

    res = client.post("/api/analyze", json={"url": "https://example.com/missing"})

    assert res.status_code == 502
    assert res.json() == {"error": "Analysis failed", "message": "Page not found. Please check the URL."}
