"""Google Scholar profile acquisition: fetch, parse and classify."""

from __future__ import annotations

import logging
import re
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from models import ErrorKind, Paper, ScrapeFailure, ScrapeResult, ScrapeSuccess

SCHOLAR_BASE_URL = "https://scholar.google.com"
PROFILE_URL = f"{SCHOLAR_BASE_URL}/citations"
REQUEST_TIMEOUT_SECONDS = 10

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Scholar serves one of these instead of the profile once it starts blocking us.
CAPTCHA_SELECTOR = "#gs_captcha_ccl"
ROBOT_CHECK_PHRASES = (
    "Please show you&#39;re not a robot",
    "Please show you're not a robot",
)

PROFILE_NAME_SELECTOR = "#gsc_prf_in"
TABLE_BODY_SELECTOR = "#gsc_a_b"
ROW_SELECTOR = ".gsc_a_tr"
TITLE_SELECTOR = ".gsc_a_at"
AUTHORS_SELECTOR = ".gs_gray"
CITATIONS_SELECTOR = ".gsc_a_c a"
YEAR_SELECTOR = ".gsc_a_y span"

_LEADING_DIGITS = re.compile(r"[0-9]+")

LOGGER = logging.getLogger(__name__)


def scrape_profile(scholar_id: str) -> ScrapeResult:
    """Fetch a Scholar profile sorted by citations and classify the result."""
    fetched = fetch_profile_html(scholar_id)
    if isinstance(fetched, ScrapeFailure):
        LOGGER.warning(
            "Scholar fetch failed for scholar_id=%s kind=%s: %s",
            scholar_id,
            fetched.kind.value,
            fetched.message,
        )
        return fetched

    result = parse_profile_html(fetched)
    if isinstance(result, ScrapeSuccess):
        LOGGER.info("Scholar scrape: scholar_id=%s papers=%s", scholar_id, len(result.papers))
    else:
        LOGGER.warning(
            "Scholar parse failed for scholar_id=%s kind=%s: %s",
            scholar_id,
            result.kind.value,
            result.message,
        )
    return result


def fetch_profile_html(scholar_id: str) -> str | ScrapeFailure:
    """Download the raw profile page, or a typed failure for transport problems."""
    try:
        response = requests.get(
            PROFILE_URL,
            params={"user": scholar_id, "sortby": "citedby"},
            headers={"User-Agent": USER_AGENT},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        return ScrapeFailure(
            kind=ErrorKind.NETWORK_ERROR,
            message=f"Network error while fetching Google Scholar profile: {exc}",
        )

    if response.status_code == 429:
        return ScrapeFailure(
            kind=ErrorKind.RATE_LIMITED,
            message="Google Scholar rate limit detected (HTTP 429). Please retry later.",
        )

    if not response.ok:
        return ScrapeFailure(
            kind=ErrorKind.NETWORK_ERROR,
            message=f"Failed to fetch Google Scholar profile (HTTP {response.status_code}).",
        )

    return response.text


def parse_profile_html(html: str) -> ScrapeResult:
    """Turn a profile page into papers sorted by citation count.

    Never raises: CAPTCHA pages map to RATE_LIMITED, pages with neither a
    profile name nor a publication table map to INVALID_PROFILE, and any
    unexpected parser fault maps to PARSE_ERROR.
    """
    try:
        if any(phrase in html for phrase in ROBOT_CHECK_PHRASES):
            return _rate_limited()

        soup = BeautifulSoup(html, "html.parser")
        if soup.select_one(CAPTCHA_SELECTOR) is not None:
            return _rate_limited()

        profile_name = _text_of(soup.select_one(PROFILE_NAME_SELECTOR))
        table_body = soup.select_one(TABLE_BODY_SELECTOR)

        if not profile_name and table_body is None:
            return ScrapeFailure(
                kind=ErrorKind.INVALID_PROFILE,
                message="Invalid scholar profile. The profile page could not be found.",
            )

        papers: list[Paper] = []
        if table_body is not None:
            for row in table_body.select(ROW_SELECTOR):
                paper = _parse_row(row)
                if paper is not None:
                    papers.append(paper)

        # sort() is stable, so equal counts keep document order.
        papers.sort(key=lambda p: p.citation_count, reverse=True)
        return ScrapeSuccess(papers=papers)
    except Exception as exc:  # any parser fault becomes a typed failure
        LOGGER.warning("Scholar parse: unexpected failure: %r", exc)
        return ScrapeFailure(
            kind=ErrorKind.PARSE_ERROR,
            message="Failed to parse Google Scholar profile page.",
        )


def _parse_row(row: Tag) -> Paper | None:
    title_link = row.select_one(TITLE_SELECTOR)
    title = _text_of(title_link)
    if not title:
        return None

    href = title_link.get("href") if title_link is not None else None
    href = href if isinstance(href, str) else ""

    citation_count = _parse_int(_text_of(row.select_one(CITATIONS_SELECTOR)))

    return Paper(
        title=title,
        authors=_text_of(row.select_one(AUTHORS_SELECTOR)),
        citation_count=citation_count if citation_count is not None else 0,
        year=_parse_int(_text_of(row.select_one(YEAR_SELECTOR))),
        scholar_url=_absolute_url(href),
    )


def _absolute_url(href: str) -> str:
    if not href:
        return ""
    url = urljoin(SCHOLAR_BASE_URL + "/", href)
    # Only web links are kept; anything else would become a clickable href.
    return url if url.startswith(("http://", "https://")) else ""


def _parse_int(text: str) -> int | None:
    """Parse the leading digits of ``text``; None when there are none."""
    match = _LEADING_DIGITS.match(text)
    if match is None:
        return None
    try:
        return int(match.group())
    except ValueError:  # longer than the interpreter's int digit limit
        return None


def _text_of(element: Tag | None) -> str:
    return element.get_text().strip() if element is not None else ""


def _rate_limited() -> ScrapeFailure:
    return ScrapeFailure(
        kind=ErrorKind.RATE_LIMITED,
        message="Google Scholar rate limit detected. Please retry later.",
    )
