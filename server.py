"""FastAPI endpoints serving a Scholar profile as an SVG badge or HTML widget.

Usage:
    uvicorn server:app --port 8000
    curl "http://localhost:8000/api/badge?scholar_id=-Uiul2AAAAAJ&count=5"
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from datetime import timedelta

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, Response

import svg_renderer
import widget_renderer
from citation_cache import CitationCache
from fallback import load_fallback_papers
from models import ErrorKind, Paper, ScrapeFailure
from scholar_feed import scrape_profile

CACHE_TTL_HOURS = float(os.getenv("CACHE_TTL_HOURS", "24"))
DEFAULT_PAPER_COUNT = int(os.getenv("DEFAULT_PAPER_COUNT", "5"))

CACHE_CONTROL = "public, max-age=3600, s-maxage=86400, stale-while-revalidate=43200"

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_PROFILE: 400,
    ErrorKind.RATE_LIMITED: 503,
    ErrorKind.NETWORK_ERROR: 502,
    ErrorKind.PARSE_ERROR: 500,
}

# Shown to callers instead of ScrapeFailure.message, which may carry upstream detail.
PUBLIC_MESSAGE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.INVALID_PROFILE: "Invalid scholar profile. The profile page could not be found.",
    ErrorKind.RATE_LIMITED: "Google Scholar is rate limiting requests. Please retry later.",
    ErrorKind.NETWORK_ERROR: "Could not reach Google Scholar. Please retry later.",
    ErrorKind.PARSE_ERROR: "Failed to read the Google Scholar profile page.",
}

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Scholar Citation Showcase")

_cache = CitationCache(ttl=timedelta(hours=CACHE_TTL_HOURS))


@app.get("/health")
def healthcheck() -> dict:
    """Return a static health payload."""
    return {"status": "ok"}


@app.get("/api/badge")
def badge(
    scholar_id: str | None = Query(None),
    count: str | None = Query(None),
    theme: str = Query("auto"),
) -> Response:
    """SVG badge of the profile's most-cited papers."""
    return _render_profile(
        scholar_id,
        count,
        lambda papers, n: svg_renderer.render_svg(papers, max_papers=n, theme=theme),
        svg_renderer.CONTENT_TYPE,
    )


@app.get("/api/widget")
def widget(
    scholar_id: str | None = Query(None),
    count: str | None = Query(None),
    theme: str = Query("light"),
) -> Response:
    """Embeddable HTML page of the profile's most-cited papers."""
    return _render_profile(
        scholar_id,
        count,
        lambda papers, n: widget_renderer.render_widget(papers, max_papers=n, theme=theme),
        widget_renderer.CONTENT_TYPE,
    )


def load_papers(scholar_id: str) -> list[Paper] | ScrapeFailure:
    """Resolve papers from the cache, a live scrape, or saved fallback data.

    Successful scrapes and fallback hits are both cached. The scrape failure
    is returned only when no fallback data exists either.
    """
    papers = _cache.get(scholar_id)
    if papers is not None:
        LOGGER.info("Cache hit for scholar_id=%s", scholar_id)
        return papers

    result = scrape_profile(scholar_id)
    if not isinstance(result, ScrapeFailure):
        _cache.set(scholar_id, result.papers)
        return result.papers

    fallback = load_fallback_papers(scholar_id)
    if fallback is not None:
        LOGGER.info(
            "Serving fallback data for scholar_id=%s after %s",
            scholar_id,
            result.kind.value,
        )
        _cache.set(scholar_id, fallback)
        return fallback

    return result


def parse_count(raw: str | None) -> int:
    """Parse the count query parameter; invalid values give the default, minimum 1."""
    try:
        value = int(raw) if raw is not None else DEFAULT_PAPER_COUNT
    except ValueError:
        value = DEFAULT_PAPER_COUNT
    if value == 0:
        value = DEFAULT_PAPER_COUNT
    return max(1, value)


def _render_profile(
    scholar_id: str | None,
    count: str | None,
    render: Callable[[Sequence[Paper], int], str],
    media_type: str,
) -> Response:
    if not scholar_id or not scholar_id.strip():
        return JSONResponse({"error": "scholar_id parameter is required"}, status_code=400)

    scholar_id = scholar_id.strip()
    try:
        loaded = load_papers(scholar_id)
        if isinstance(loaded, ScrapeFailure):
            return JSONResponse(
                {"error": PUBLIC_MESSAGE_BY_KIND[loaded.kind], "errorType": loaded.kind.value},
                status_code=STATUS_BY_KIND[loaded.kind],
            )

        body = render(loaded, parse_count(count))
    except Exception:  # nothing internal may reach the response body
        LOGGER.exception("Unhandled error rendering scholar_id=%s", scholar_id)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    return Response(
        content=body,
        media_type=media_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
