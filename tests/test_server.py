from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import server
from citation_cache import CitationCache
from models import ErrorKind, Paper, ScrapeFailure, ScrapeSuccess

MOCK_PAPERS = [
    Paper(
        title="Deep Learning Advances",
        authors="Alice, Bob",
        citation_count=500,
        year=2021,
        scholar_url="https://scholar.google.com/citations?view_op=view_citation&hl=en&citation_for_view=abc",
    ),
    Paper(
        title="Neural Networks Survey",
        authors="Charlie",
        citation_count=200,
        year=2020,
        scholar_url="https://scholar.google.com/citations?view_op=view_citation&hl=en&citation_for_view=def",
    ),
]

ENDPOINTS = ["/api/badge", "/api/widget"]


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch: pytest.MonkeyPatch) -> CitationCache:
    """Give every test its own empty cache."""
    cache = CitationCache()
    monkeypatch.setattr(server, "_cache", cache)
    return cache


@pytest.fixture
def client() -> TestClient:
    return TestClient(server.app)


def test_health(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.parametrize("endpoint", ENDPOINTS)
@pytest.mark.parametrize("query", ["", "?scholar_id=", "?scholar_id=%20%20"])
def test_missing_scholar_id_returns_400(client: TestClient, endpoint: str, query: str) -> None:
    with patch("server.scrape_profile") as mock_scrape:
        resp = client.get(endpoint + query)

    assert resp.status_code == 400
    assert resp.json()["error"] == "scholar_id parameter is required"
    mock_scrape.assert_not_called()


@pytest.mark.parametrize(("endpoint", "content_type", "marker"), [
    ("/api/badge", "image/svg+xml", "<svg"),
    ("/api/widget", "text/html", "<!DOCTYPE html>"),
])
def test_success_response(client: TestClient, endpoint: str, content_type: str, marker: str) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)):
        resp = client.get(f"{endpoint}?scholar_id=test123")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(content_type)
    assert "max-age" in resp.headers["cache-control"]
    assert resp.text.startswith(marker)
    assert "Deep Learning Advances" in resp.text


@pytest.mark.parametrize("endpoint", ENDPOINTS)
def test_second_request_is_served_from_cache(client: TestClient, endpoint: str) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)) as mock_scrape:
        first = client.get(f"{endpoint}?scholar_id=test123")
        second = client.get(f"{endpoint}?scholar_id=test123")

    assert first.status_code == second.status_code == 200
    assert mock_scrape.call_count == 1


def test_cache_is_shared_between_endpoints(client: TestClient) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)) as mock_scrape:
        client.get("/api/badge?scholar_id=test123")
        client.get("/api/widget?scholar_id=test123")

    assert mock_scrape.call_count == 1


def test_empty_profile_is_cached(client: TestClient, fresh_cache: CitationCache) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=[])):
        resp = client.get("/api/badge?scholar_id=empty")

    assert resp.status_code == 200
    assert fresh_cache.get("empty") == []


@pytest.mark.parametrize(("count", "expected_rows"), [
    ("1", 1),
    ("2", 2),
    ("50", 2),
    ("0", 2),
    ("-3", 1),
    ("abc", 2),
])
def test_count_parameter(client: TestClient, count: str, expected_rows: int) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)):
        resp = client.get(f"/api/widget?scholar_id=test123&count={count}")

    assert resp.status_code == 200
    assert resp.text.count('class="paper-card"') == expected_rows


@pytest.mark.parametrize(("kind", "status"), [
    (ErrorKind.INVALID_PROFILE, 400),
    (ErrorKind.RATE_LIMITED, 503),
    (ErrorKind.NETWORK_ERROR, 502),
    (ErrorKind.PARSE_ERROR, 500),
])
@pytest.mark.parametrize("endpoint", ENDPOINTS)
def test_failure_kind_maps_to_status(client: TestClient, endpoint: str, kind: ErrorKind, status: int) -> None:
    failure = ScrapeFailure(kind=kind, message="upstream said: connect to 10.0.0.7 refused")

    with patch("server.scrape_profile", return_value=failure), \
         patch("server.load_fallback_papers", return_value=None):
        resp = client.get(f"{endpoint}?scholar_id=test123")

    assert resp.status_code == status
    body = resp.json()
    assert body["errorType"] == kind.value
    assert body["error"]
    assert "10.0.0.7" not in resp.text


def test_failure_is_not_cached(client: TestClient, fresh_cache: CitationCache) -> None:
    failure = ScrapeFailure(kind=ErrorKind.NETWORK_ERROR, message="down")

    with patch("server.scrape_profile", return_value=failure) as mock_scrape, \
         patch("server.load_fallback_papers", return_value=None):
        client.get("/api/badge?scholar_id=test123")
        client.get("/api/badge?scholar_id=test123")

    assert mock_scrape.call_count == 2
    assert fresh_cache.get("test123") is None


@pytest.mark.parametrize("endpoint", ENDPOINTS)
def test_fallback_data_used_when_scrape_fails(
    client: TestClient, fresh_cache: CitationCache, endpoint: str
) -> None:
    failure = ScrapeFailure(kind=ErrorKind.RATE_LIMITED, message="captcha")

    with patch("server.scrape_profile", return_value=failure), \
         patch("server.load_fallback_papers", return_value=MOCK_PAPERS) as mock_fallback:
        resp = client.get(f"{endpoint}?scholar_id=test123")

    assert resp.status_code == 200
    assert "Neural Networks Survey" in resp.text
    mock_fallback.assert_called_once_with("test123")
    assert fresh_cache.get("test123") == MOCK_PAPERS


def test_fallback_not_consulted_on_success(client: TestClient) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)), \
         patch("server.load_fallback_papers") as mock_fallback:
        client.get("/api/badge?scholar_id=test123")

    mock_fallback.assert_not_called()


@pytest.mark.parametrize("endpoint", ENDPOINTS)
def test_unexpected_error_returns_generic_500(client: TestClient, endpoint: str) -> None:
    with patch("server.scrape_profile", side_effect=RuntimeError("Unexpected internal failure")):
        resp = client.get(f"{endpoint}?scholar_id=test123")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert "Unexpected internal failure" not in resp.text


def test_renderer_crash_returns_generic_500(client: TestClient) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)), \
         patch("server.svg_renderer.render_svg", side_effect=KeyError("secret-template-key")):
        resp = client.get("/api/badge?scholar_id=test123")

    assert resp.status_code == 500
    assert "secret-template-key" not in resp.text


def test_scholar_id_is_stripped(client: TestClient) -> None:
    with patch("server.scrape_profile", return_value=ScrapeSuccess(papers=MOCK_PAPERS)) as mock_scrape:
        client.get("/api/badge?scholar_id=%20test123%20")

    mock_scrape.assert_called_once_with("test123")


@pytest.mark.parametrize(("raw", "expected"), [
    (None, 5),
    ("3", 3),
    (" 4 ", 4),
    ("0", 5),
    ("-2", 1),
    ("2.5", 5),
    ("", 5),
])
def test_parse_count(raw: str | None, expected: int) -> None:
    assert server.parse_count(raw) == expected


def test_fallback_honors_data_dir_set_after_import(
    client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    data_dir = tmp_path / "from_dotenv"
    data_dir.mkdir()
    (data_dir / "test123.json").write_text(
        json.dumps([paper.to_dict() for paper in MOCK_PAPERS]), encoding="utf-8"
    )
    monkeypatch.setenv("FALLBACK_DATA_DIR", str(data_dir))
    failure = ScrapeFailure(kind=ErrorKind.NETWORK_ERROR, message="down")

    with patch("server.scrape_profile", return_value=failure):
        resp = client.get("/api/widget?scholar_id=test123")

    assert resp.status_code == 200
    assert "Deep Learning Advances" in resp.text
