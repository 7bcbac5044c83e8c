"""CLI entrypoint: save a Scholar profile as fallback data, or serve the API."""

from __future__ import annotations

import argparse
import logging
import os

from dotenv import load_dotenv

from fallback import DEFAULT_DATA_DIR, save_fallback_papers
from models import ScrapeFailure
from scholar_feed import scrape_profile


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Scholar citation showcase")
    commands = parser.add_subparsers(dest="command", required=True)

    scrape = commands.add_parser("scrape", help="Scrape a profile and save it under the fallback data directory")
    scrape.add_argument("scholar_id", help="Google Scholar user id; put ids starting with - after --")
    scrape.add_argument(
        "--data-dir",
        default=os.getenv("FALLBACK_DATA_DIR", DEFAULT_DATA_DIR),
        help="Directory for <scholar_id>.json files (default: FALLBACK_DATA_DIR or ./data)",
    )
    scrape.add_argument(
        "--dry-run",
        action="store_true",
        help="Scrape and log the result without writing a file",
    )

    serve = commands.add_parser("serve", help="Run the badge/widget API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    return parser.parse_args(argv)


def run_scrape(scholar_id: str, data_dir: str, dry_run: bool) -> int:
    """Scrape one profile into the fallback store. Returns a process exit code."""
    logging.info("Scraping scholar profile: %s", scholar_id)
    result = scrape_profile(scholar_id)

    if isinstance(result, ScrapeFailure):
        logging.error("Scraping failed (%s): %s", result.kind.value, result.message)
        return 1

    if dry_run:
        for paper in result.papers:
            logging.info("[dry-run] %s citations: %s", paper.citation_count, paper.title)
        logging.info("[dry-run] Would save %s papers for %s", len(result.papers), scholar_id)
        return 0

    path = save_fallback_papers(scholar_id, result.papers, data_dir=data_dir)
    logging.info("Saved %s papers to %s", len(result.papers), path)
    return 0


def run_server(host: str, port: int, reload: bool) -> None:
    import uvicorn  # noqa: PLC0415

    uvicorn.run("server:app", host=host, port=port, reload=reload, log_level="info")


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute the requested command."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    if args.command == "serve":
        run_server(host=args.host, port=args.port, reload=args.reload)
        return

    raise SystemExit(run_scrape(args.scholar_id, data_dir=args.data_dir, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
