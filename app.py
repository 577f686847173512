"""
HTTP boundary: ``POST /scrape`` and ``GET /health``.

Each scrape request runs the async pipeline to completion with
``asyncio.run`` inside the request thread.  A bounded semaphore caps how
many browsers can be alive at once; requests that cannot get a slot in
time are answered with 503 instead of queueing forever.

Response shapes:
    200  {"success": true, "totalProducts": N, "products": [...]}
    400  {"error": "URL is required"}
    400  {"error": "Invalid JSON format in request body", "message": ...}
    400  {"error": "maxPages must be a positive integer"}
    503  {"error": "Scraper busy", "message": ...}
    500  {"error": "Scraping failed", "message": str(exc)}
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest, RequestEntityTooLarge

from config import settings
from models import ScrapeResult
from scraper import scrape_listing

logger = logging.getLogger(__name__)

ScrapeFunc = Callable[[str, int], Awaitable[ScrapeResult]]


class PayloadError(ValueError):
    """Client sent a request body or field we cannot use."""

    def __init__(self, error: str, message: str | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.message = message

    def to_response(self):
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return jsonify(body), 400


def _read_payload() -> dict[str, Any]:
    """Return the request body as a dict (JSON or form-encoded)."""
    if request.is_json:
        try:
            data = request.get_json()
        except BadRequest:
            raise PayloadError(
                "Invalid JSON format in request body",
                "Please check your JSON syntax and try again",
            )
        return data if isinstance(data, dict) else {}
    if request.form:
        return request.form.to_dict()
    return {}


def parse_max_pages(value: Any) -> int:
    if value is None or value == "":
        return settings.API_DEFAULT_MAX_PAGES
    if isinstance(value, bool):
        raise PayloadError("maxPages must be a positive integer")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise PayloadError("maxPages must be a positive integer")
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise PayloadError("maxPages must be a positive integer")
    return value


def create_app(
    scrape: ScrapeFunc | None = None,
    *,
    max_concurrent: int = settings.MAX_CONCURRENT_SCRAPES,
    slot_timeout_sec: float = settings.SCRAPE_SLOT_TIMEOUT_SEC,
) -> Flask:
    """Build the Flask app.  *scrape* defaults to ``scraper.scrape_listing``."""
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.MAX_REQUEST_BYTES

    run_scrape: ScrapeFunc = scrape or scrape_listing
    slots = threading.BoundedSemaphore(max_concurrent)
    app.extensions["scrape_slots"] = slots

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(exc):
        return jsonify({"error": "Request body too large", "message": str(exc)}), 413

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "ok",
            "aiExtraction": settings.ai_extraction_enabled(),
        })

    @app.route("/scrape", methods=["POST"])
    def scrape_route():
        try:
            payload = _read_payload()
            url = payload.get("url")
            if not isinstance(url, str) or not url.strip():
                raise PayloadError("URL is required")
            max_pages = parse_max_pages(payload.get("maxPages"))
        except PayloadError as exc:
            return exc.to_response()

        if not settings.ai_extraction_enabled():
            logger.warning("DEEPSEEK_API_KEY not set, using fallback extraction")

        if not slots.acquire(timeout=slot_timeout_sec):
            logger.warning("No free scrape slot after %.0fs, rejecting %s", slot_timeout_sec, url)
            return jsonify({
                "error": "Scraper busy",
                "message": "Too many scrapes in progress, try again later",
            }), 503

        try:
            logger.info("Starting scraping process...")
            result = asyncio.run(run_scrape(url.strip(), max_pages))
        except Exception as exc:
            logger.exception("API error")
            return jsonify({"error": "Scraping failed", "message": str(exc)}), 500
        finally:
            slots.release()

        return jsonify(result.to_payload())

    return app
