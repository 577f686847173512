"""
Runtime settings for the listing scraper.

Everything that comes from the environment is read once, at import time,
after ``load_dotenv()`` has pulled in a local ``.env`` file.  A missing
extraction-service URL or key is not an error: extraction simply degrades
to the DOM-selector fallback.

Environment variables:
    DEEPSEEK_API_URL          chat-completion endpoint (full URL, set it
                              empty to disable AI extraction)
    DEEPSEEK_API_KEY          bearer token; unset = selector extraction only
    DEEPSEEK_MODEL            model name (default: deepseek-chat)
    AI_TIMEOUT_SEC            per-call timeout for the extraction service
    PORT                      HTTP port (default: 3000)
    MAX_CONCURRENT_SCRAPES    scrape calls allowed to run at once
    SCRAPE_SLOT_TIMEOUT_SEC   how long a request waits for a free slot
    SCRAPER_STEALTH           apply playwright-stealth to page contexts
    LOG_LEVEL                 root log level for main.py
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Extraction service
# ---------------------------------------------------------------------------

DEEPSEEK_API_URL = os.getenv(
    "DEEPSEEK_API_URL", "https://api.deepseek.com/chat/completions",
)
DEEPSEEK_API_KEY = os.getenv("DEEPSEEK_API_KEY", "")
DEEPSEEK_MODEL = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")
AI_TIMEOUT_SEC = float(os.getenv("AI_TIMEOUT_SEC", "60"))

# Only the first 15k characters of a page are sent to the model to stay
# inside its context window.
AI_HTML_CHAR_LIMIT = 15_000
AI_TEMPERATURE = 0.1
AI_MAX_TOKENS = 2000

# ---------------------------------------------------------------------------
# HTTP boundary
# ---------------------------------------------------------------------------

PORT = int(os.getenv("PORT", "3000"))
MAX_CONCURRENT_SCRAPES = int(os.getenv("MAX_CONCURRENT_SCRAPES", "2"))
SCRAPE_SLOT_TIMEOUT_SEC = float(os.getenv("SCRAPE_SLOT_TIMEOUT_SEC", "300"))
MAX_REQUEST_BYTES = 50 * 1024 * 1024
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Browser / Playwright defaults
# ---------------------------------------------------------------------------

# Sandboxing and compositor features are disabled so Chromium can run
# headless inside containers without extra privileges.
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor",
    "--disable-dev-shm-usage",
]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)
VIEWPORT = {"width": 1920, "height": 1080}

STEALTH_ENABLED = _env_bool("SCRAPER_STEALTH", True)

# Listing pages keep polling for a while after load; 'networkidle' waits
# until they go quiet before the HTML is read.
WAIT_UNTIL = "networkidle"
GOTO_TIMEOUT_MS = 30_000

# Fixed pacing.  Settle = wait after navigation before reading content,
# between pages = wait after a listing page is closed.
PAGE_SETTLE_SEC = 2.0
BETWEEN_PAGES_SEC = 2.0

# ---------------------------------------------------------------------------
# Scraping defaults
# ---------------------------------------------------------------------------

DEFAULT_MAX_PAGES = 5
API_DEFAULT_MAX_PAGES = 3

# Placeholder for any field that could not be resolved.
SENTINEL = "-"

# Used to complete relative URLs when the page URL has no usable origin.
DEFAULT_SITE_ORIGIN = "https://www.ebay.com"

# Query-string marker rewritten per page ("_pgn=1" -> "_pgn=N").
PAGINATION_PARAM = "_pgn"


def ai_extraction_enabled() -> bool:
    """Return True when both the extraction-service URL and key are set."""
    return bool(DEEPSEEK_API_URL and DEEPSEEK_API_KEY)
