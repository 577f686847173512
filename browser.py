"""
Browser lifecycle for one scrape call.

``BrowserSession`` owns a single headless Chromium.  The browser is launched
lazily on the first ``acquire()`` and reused for every page opened during
the call; ``release()`` closes it (and stops Playwright) so the next
``acquire()`` starts fresh.  Use it as an async context manager so the
browser is released on every exit path::

    async with BrowserSession() as session:
        async with session.open_page() as page:
            await page.goto(url)

Each ``open_page()`` gets its own browser context (user agent, viewport,
optional playwright-stealth patches) which is closed together with the
page.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)
from playwright_stealth import Stealth

from config.settings import BROWSER_ARGS, STEALTH_ENABLED, USER_AGENT, VIEWPORT

logger = logging.getLogger(__name__)

Launcher = Callable[[], Awaitable[Browser]]

_STEALTH = Stealth()


async def launch_browser(pw: Playwright) -> Browser:
    """Launch headless Chromium with the container-friendly flags."""
    browser = await pw.chromium.launch(headless=True, args=BROWSER_ARGS)
    logger.info("Browser launched (headless Chromium)")
    return browser


class BrowserSession:
    """Lazily launched, explicitly released browser handle.

    Not safe to share between concurrently running scrapes; every scrape
    call builds its own session.
    """

    def __init__(
        self,
        *,
        launcher: Launcher | None = None,
        user_agent: str = USER_AGENT,
        stealth: bool = STEALTH_ENABLED,
    ) -> None:
        self._launcher = launcher
        self.user_agent = user_agent
        self.stealth = stealth
        self._pw: Playwright | None = None
        self._browser: Browser | None = None

    @property
    def is_open(self) -> bool:
        return self._browser is not None

    async def acquire(self) -> Browser:
        """Return the shared browser, launching it on first use."""
        if self._browser is None:
            if self._launcher is not None:
                self._browser = await self._launcher()
            else:
                self._pw = await async_playwright().start()
                try:
                    self._browser = await launch_browser(self._pw)
                except BaseException:
                    # Launch failed: stop the driver so it does not outlive us.
                    await self.release()
                    raise
        return self._browser

    async def release(self) -> None:
        """Close the browser and forget it.  Safe to call more than once."""
        browser, self._browser = self._browser, None
        pw, self._pw = self._pw, None
        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:
                logger.warning("Browser close failed: %s", exc)
        if pw is not None:
            await pw.stop()
        if browser is not None:
            logger.info("Browser released")

    async def __aenter__(self) -> "BrowserSession":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.release()

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[Page]:
        """Yield a fresh page in its own context; both are closed on exit."""
        browser = await self.acquire()
        context: BrowserContext = await browser.new_context(
            user_agent=self.user_agent,
            viewport=VIEWPORT,
            locale="en-US",
        )
        page: Page | None = None
        try:
            if self.stealth:
                await _STEALTH.apply_stealth_async(context)
            page = await context.new_page()
            yield page
        finally:
            for obj in (page, context):
                if obj is None:
                    continue
                try:
                    await obj.close()
                except Exception as exc:
                    logger.debug("Close failed for %r: %s", obj, exc)
