"""Pre-scraped publication lists stored as JSON files, one per scholar id."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from json import JSONDecodeError
from pathlib import Path

from models import Paper

DEFAULT_DATA_DIR = "data"

LOGGER = logging.getLogger(__name__)


def load_fallback_papers(scholar_id: str, data_dir: str | Path | None = None) -> list[Paper] | None:
    """Return the saved papers for scholar_id, or None if none are usable."""
    path = _data_file(scholar_id, data_dir)
    if path is None or not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, UnicodeDecodeError, JSONDecodeError) as exc:
        LOGGER.warning("Fallback data unreadable for scholar_id=%s at %s: %s", scholar_id, path, exc)
        return None

    if not isinstance(payload, list):
        LOGGER.warning("Fallback data for scholar_id=%s is not a JSON list", scholar_id)
        return None

    try:
        papers = [Paper.from_dict(item) for item in payload]
    except ValueError as exc:
        LOGGER.warning("Fallback data for scholar_id=%s has an invalid record: %s", scholar_id, exc)
        return None

    LOGGER.info("Loaded %s fallback papers for scholar_id=%s", len(papers), scholar_id)
    return papers


def save_fallback_papers(scholar_id: str, papers: Iterable[Paper], data_dir: str | Path | None = None) -> Path:
    """Write papers as a JSON list and return the file path."""
    path = _data_file(scholar_id, data_dir)
    if path is None:
        raise ValueError(f"Unsafe scholar id for a data file name: {scholar_id!r}")

    path.parent.mkdir(parents=True, exist_ok=True)
    records = [paper.to_dict() for paper in papers]
    with path.open("w", encoding="utf-8") as fh:
        json.dump(records, fh, indent=2, ensure_ascii=False)

    LOGGER.info("Saved %s papers for scholar_id=%s to %s", len(records), scholar_id, path)
    return path


def _data_file(scholar_id: str, data_dir: str | Path | None) -> Path | None:
    # Scholar ids are used as file names; refuse anything that could leave data_dir.
    if not scholar_id or scholar_id.startswith(".") or "/" in scholar_id or "\\" in scholar_id or "\x00" in scholar_id:
        return None
    if data_dir is None:
        # Resolved per call: main() loads .env after this module is imported.
        data_dir = os.getenv("FALLBACK_DATA_DIR", DEFAULT_DATA_DIR)
    return Path(data_dir) / f"{scholar_id}.json"
