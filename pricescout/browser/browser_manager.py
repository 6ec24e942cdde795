# pricescout/browser/browser_manager.py

"""Owner of the shared headless browser and its page lifecycle."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

from playwright.async_api import (
    Browser,
    Page,
    Playwright,
    async_playwright,
)

from pricescout.config.settings import Settings
from pricescout.errors import BrowserLaunchFailure

logger = logging.getLogger("pricescout.browser")


class BrowserState(Enum):
    """Lifecycle of the shared browser handle."""

    ABSENT = "absent"
    INITIALIZING = "initializing"
    READY = "ready"


class BrowserManager:
    """Lazily launches one Chromium process and hands out isolated pages.

    ``ABSENT -> INITIALIZING -> READY``; a failed launch returns to
    ``ABSENT`` and a ``disconnected`` event moves ``READY -> ABSENT`` so
    the next acquire launches a fresh browser.  Callers arriving while a
    launch is in flight await that same launch.
    """

    def __init__(self) -> None:
        self.settings = Settings()
        self._state = BrowserState.ABSENT
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._launch_task: asyncio.Task[Browser] | None = None
        self.launch_count: int = 0

    @property
    def state(self) -> BrowserState:
        """Current lifecycle state."""
        return self._state

    # ── Browser ──────────────────────────────────────────

    async def acquire_browser(self) -> Browser:
        """Return the live browser, launching it at most once at a time.

        Raises:
            BrowserLaunchFailure: the launch this caller waited on failed.
        """
        if (
            self._state is BrowserState.READY
            and self._browser is not None
        ):
            return self._browser

        if self._launch_task is None:
            self._state = BrowserState.INITIALIZING
            self._launch_task = asyncio.create_task(self._launch())
        else:
            logger.debug("Browser launch in flight, queueing caller")

        # Shielded so one cancelled waiter does not abort the launch
        return await asyncio.shield(self._launch_task)

    async def _launch(self) -> Browser:
        """Start Playwright (once) and launch Chromium."""
        self.launch_count += 1
        logger.info(
            "Launching browser instance (attempt #%d)...",
            self.launch_count,
        )
        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            browser = await self._playwright.chromium.launch(
                headless=self.settings.BROWSER_HEADLESS,
                args=self.settings.BROWSER_ARGS,
            )
        except Exception as exc:
            logger.error(
                "Error launching browser: %s", exc, exc_info=True
            )
            self._state = BrowserState.ABSENT
            raise BrowserLaunchFailure(str(exc)) from exc
        finally:
            self._launch_task = None

        browser.on("disconnected", self._on_disconnected)
        self._browser = browser
        self._state = BrowserState.READY
        logger.info("Browser instance ready")
        return browser

    def _on_disconnected(self, browser: Browser) -> None:
        """Invalidate the handle when the browser process goes away."""
        if browser is not self._browser:
            return
        logger.warning(
            "Browser disconnected, will create a new instance "
            "on next request"
        )
        self._browser = None
        self._state = BrowserState.ABSENT

    # ── Pages ────────────────────────────────────────────

    async def acquire_page(self) -> Page:
        """Open a fresh page in its own isolated browser context.

        The caller owns the page and must hand it to
        :meth:`release_page` on every exit path.
        """
        browser = await self.acquire_browser()
        context = await browser.new_context(
            user_agent=self.settings.USER_AGENT,
            viewport=self.settings.VIEWPORT,
        )
        try:
            return await context.new_page()
        except Exception:
            await context.close()
            raise

    async def release_page(self, page: Page) -> None:
        """Close the page together with its context."""
        try:
            await page.context.close()
        except Exception as exc:
            logger.error(
                "Error closing page: %s", exc, exc_info=True
            )

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Scoped page: acquired on entry, released on any exit."""
        page = await self.acquire_page()
        try:
            yield page
        finally:
            await self.release_page(page)

    # ── Shutdown ─────────────────────────────────────────

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        self._state = BrowserState.ABSENT

        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:
                logger.error(
                    "Error closing browser: %s", exc, exc_info=True
                )
        if playwright is not None:
            await playwright.stop()
        logger.info("Browser manager shut down")
