"""Shared typed models for the citation showcase."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Paper:
    """One publication row extracted from a Scholar profile."""

    title: str
    authors: str = ""
    citation_count: int = 0
    year: int | None = None
    scholar_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the pre-scraped data files."""
        return {
            "title": self.title,
            "authors": self.authors,
            "citationCount": self.citation_count,
            "year": self.year,
            "scholarUrl": self.scholar_url,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Paper:
        """Build a Paper from its JSON form, raising ValueError on bad shape."""
        if not isinstance(data, dict):
            raise ValueError("Paper record must be a JSON object")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError("Paper record is missing a title")

        authors = data.get("authors", "")
        citation_count = data.get("citationCount", 0)
        year = data.get("year")
        scholar_url = data.get("scholarUrl", "")

        # bool is an int subclass; reject it explicitly.
        if not isinstance(citation_count, int) or isinstance(citation_count, bool) or citation_count < 0:
            raise ValueError(f"Invalid citationCount for {title!r}: {citation_count!r}")
        if year is not None and (not isinstance(year, int) or isinstance(year, bool)):
            raise ValueError(f"Invalid year for {title!r}: {year!r}")
        if not isinstance(authors, str) or not isinstance(scholar_url, str):
            raise ValueError(f"Invalid text fields for {title!r}")
        if scholar_url and not scholar_url.lower().startswith(("http://", "https://")):
            raise ValueError(f"Invalid scholarUrl for {title!r}: {scholar_url!r}")

        return cls(
            title=title,
            authors=authors,
            citation_count=citation_count,
            year=year,
            scholar_url=scholar_url,
        )


class ErrorKind(str, Enum):
    """Failure taxonomy shared by the fetch and parse stages."""

    RATE_LIMITED = "RATE_LIMITED"
    INVALID_PROFILE = "INVALID_PROFILE"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


@dataclass(frozen=True, slots=True)
class ScrapeSuccess:
    """Profile acquired; papers are sorted by citation count, highest first."""

    papers: list[Paper] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ScrapeFailure:
    """Profile could not be acquired.

    ``message`` is meant for logs. HTTP handlers show a fixed text per kind.
    """

    kind: ErrorKind
    message: str

    @property
    def success(self) -> bool:
        return False


ScrapeResult = ScrapeSuccess | ScrapeFailure
