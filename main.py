"""
Listing scraper entry point.

Usage:
    python main.py                                  # serve the HTTP API on $PORT
    python main.py serve --port 8080                # same, explicit port
    python main.py scrape "<listing url>" -n 2      # one scrape, JSON to stdout

Environment variables are documented in ``config/settings.py``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("main")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI-assisted product listing scraper")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="run the HTTP API (default)")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=settings.PORT)

    scrape = sub.add_parser("scrape", help="scrape one listing URL and print JSON")
    scrape.add_argument("url")
    scrape.add_argument(
        "-n", "--max-pages", type=int, default=settings.API_DEFAULT_MAX_PAGES,
    )
    return parser


def _serve(host: str, port: int) -> None:
    from app import create_app

    if not settings.ai_extraction_enabled():
        logger.warning("DEEPSEEK_API_KEY not set, all extraction will use DOM selectors")
    logger.info("AI Scraper API running on port %d", port)
    create_app().run(host=host, port=port)


def _scrape_once(url: str, max_pages: int) -> int:
    from scraper import scrape_listing

    if max_pages < 1:
        logger.error("--max-pages must be >= 1")
        return 2
    result = asyncio.run(scrape_listing(url, max_pages))
    json.dump(result.to_payload(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.command == "scrape":
        return _scrape_once(args.url, args.max_pages)
    if args.command == "serve":
        _serve(args.host, args.port)
    else:
        _serve("0.0.0.0", settings.PORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())
