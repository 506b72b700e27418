"""Browser session management using patchright.

Rules:
  - Single browser context and page per application run
  - patchright, not vanilla playwright
  - The page is owned exclusively by the run for its whole duration
"""

import logging
import time
from types import TracebackType

from patchright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from formpilot.core.config import BrowserConfig
from formpilot.core.perf import PerformanceLog

logger = logging.getLogger(__name__)


class BrowserSession:
    """Async context manager that owns one patchright browser + context + page.

    Usage::

        async with BrowserSession(config) as session:
            page = session.page
            await page.goto("https://...")
    """

    def __init__(self, config: BrowserConfig, perf: PerformanceLog | None = None) -> None:
        self._config = config
        self._perf = perf
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        """The single page for this session. Raises if not entered."""
        if self._page is None:
            msg = "BrowserSession not entered — use 'async with'"
            raise RuntimeError(msg)
        return self._page

    async def __aenter__(self) -> "BrowserSession":
        started = time.perf_counter()
        logger.info("Launching browser (headless: %s)", self._config.headless)

        pw = await async_playwright().start()
        self._playwright = pw
        try:
            self._browser = await pw.chromium.launch(
                headless=self._config.headless,
                args=list(self._config.launch_args),
            )
            self._context = await self._browser.new_context(
                viewport={"width": self._config.viewport_width, "height": self._config.viewport_height},
            )
            self._context.set_default_timeout(self._config.timeout_ms)
            self._page = await self._context.new_page()
        except BaseException:
            # __aexit__ is not called when __aenter__ raises.
            await self.__aexit__(None, None, None)
            raise

        if self._perf is not None:
            self._perf.record("Browser launch", int((time.perf_counter() - started) * 1000))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
            logger.debug("Browser closed")
        if self._playwright is not None:
            await self._playwright.stop()
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None
