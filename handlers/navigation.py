"""
Navigation and pacing shared by listing and detail pages.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from playwright.async_api import Page

from config.settings import (
    BETWEEN_PAGES_SEC, GOTO_TIMEOUT_MS, PAGE_SETTLE_SEC, WAIT_UNTIL,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PacingPolicy:
    """Fixed waits and navigation limits.  Tests pass zero delays."""

    settle_sec: float = PAGE_SETTLE_SEC
    between_pages_sec: float = BETWEEN_PAGES_SEC
    goto_timeout_ms: int = GOTO_TIMEOUT_MS
    wait_until: str = WAIT_UNTIL

    @classmethod
    def immediate(cls) -> "PacingPolicy":
        return cls(settle_sec=0, between_pages_sec=0)


async def pause(seconds: float) -> None:
    if seconds > 0:
        await asyncio.sleep(seconds)


async def navigate(
    page: Page, url: str, policy: PacingPolicy, *, settle: bool = False,
) -> str:
    """Load *url*, optionally wait the settle delay, and return the HTML."""
    logger.debug("Navigating to %s (wait_until=%s)", url, policy.wait_until)
    await page.goto(url, wait_until=policy.wait_until, timeout=policy.goto_timeout_ms)
    if settle:
        await pause(policy.settle_sec)
    return await page.content()
