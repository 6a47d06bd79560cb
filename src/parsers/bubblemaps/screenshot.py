"""Bubble map screenshots via headless Chromium (Playwright).

The Bubblemaps web app renders the map client-side, so the page is loaded in
a real browser, given a few seconds to settle, then captured as PNG.
"""

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from src.parsers.bubblemaps.client import APP_URL, map_url
from src.parsers.bubblemaps.exceptions import ScreenshotError

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-web-security",
    "--disable-features=IsolateOrigins,site-per-process",
]
MAP_PRESENT_JS = """() => Boolean(
    document.querySelector('.map-container') ||
    document.querySelector('#bubblemapViewer') ||
    document.querySelector('.bubblemap-container') ||
    document.querySelector('svg')
)"""


class BubblemapRenderer:
    """Takes PNG screenshots of token pages on app.bubblemaps.io."""

    def __init__(
        self,
        app_url: str = APP_URL,
        navigation_timeout_ms: int = 60000,
        settle_ms: int = 5000,
        viewport: tuple[int, int] = (1920, 1080),
    ) -> None:
        self._app_url = app_url
        self._navigation_timeout_ms = navigation_timeout_ms
        self._settle_ms = settle_ms
        self._viewport = viewport

    def page_url(self, token_address: str, chain: str) -> str:
        return map_url(chain, token_address, self._app_url)

    async def capture(self, token_address: str, chain: str) -> bytes:
        """Render the bubble map page and return it as PNG bytes.

        Raises ScreenshotError if the browser cannot start or no screenshot
        could be taken at all.
        """
        url = self.page_url(token_address, chain)
        width, height = self._viewport
        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(
                    headless=True,
                    args=[*LAUNCH_ARGS, f"--window-size={width},{height}"],
                )
                try:
                    page = await browser.new_page(
                        viewport={"width": width, "height": height},
                        device_scale_factor=1,
                        user_agent=USER_AGENT,
                    )
                    return await self._shoot(page, url)
                finally:
                    await browser.close()
                    logger.debug("[SCREENSHOT] Browser closed")
        except PlaywrightError as e:
            logger.error(f"[SCREENSHOT] Browser failure for {url}: {e}")
            raise ScreenshotError(f"Could not render {url}") from e

    async def _shoot(self, page: Page, url: str) -> bytes:
        """Load ``url`` and screenshot it, degrading to whatever did load."""
        logger.info(f"[SCREENSHOT] Navigating to {url}")
        try:
            await page.goto(url, wait_until="networkidle", timeout=self._navigation_timeout_ms)
            await page.wait_for_timeout(self._settle_ms)
            if await page.evaluate(MAP_PRESENT_JS):
                logger.debug("[SCREENSHOT] Map element found")
            else:
                logger.warning(f"[SCREENSHOT] No map element on {url}")
        except PlaywrightError as e:
            # Partially loaded page is still worth a screenshot
            logger.warning(f"[SCREENSHOT] Navigation incomplete for {url}: {e}")

        try:
            png = await page.screenshot(type="png", full_page=True)
        except PlaywrightError as e:
            logger.warning(f"[SCREENSHOT] Full-page capture failed, trying viewport: {e}")
            try:
                png = await page.screenshot(type="png")
            except PlaywrightError as fallback_error:
                logger.error(f"[SCREENSHOT] Viewport capture failed too: {fallback_error}")
                raise ScreenshotError(f"Could not capture {url}") from e

        logger.info(f"[SCREENSHOT] Captured {len(png)} bytes")
        return png
