"""Tests for bubble map screenshots (Playwright mocked out)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from src.parsers.bubblemaps.exceptions import ScreenshotError
from src.parsers.bubblemaps.screenshot import BubblemapRenderer

TOKEN = "0x6982508145454ce325ddbe47a25d4ec3d2311933"
URL = f"https://app.bubblemaps.io/eth/token/{TOKEN}"


def _page(screenshot=b"\x89PNG", has_map=True) -> AsyncMock:
    page = AsyncMock()
    page.evaluate = AsyncMock(return_value=has_map)
    if isinstance(screenshot, list):
        page.screenshot = AsyncMock(side_effect=screenshot)
    else:
        page.screenshot = AsyncMock(return_value=screenshot)
    return page


def _playwright(page: AsyncMock, launch_error: Exception | None = None):
    browser = AsyncMock()
    browser.new_page = AsyncMock(return_value=page)
    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser, side_effect=launch_error)
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=pw)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm, pw, browser


class TestShoot:
    @pytest.mark.asyncio
    async def test_full_page_capture(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0)
        page = _page()

        png = await renderer._shoot(page, URL)

        assert png == b"\x89PNG"
        page.goto.assert_awaited_once_with(URL, wait_until="networkidle", timeout=60000)
        page.screenshot.assert_awaited_once_with(type="png", full_page=True)

    @pytest.mark.asyncio
    async def test_navigation_timeout_still_captures(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0)
        page = _page()
        page.goto = AsyncMock(side_effect=PlaywrightError("Timeout 60000ms exceeded"))

        png = await renderer._shoot(page, URL)

        assert png == b"\x89PNG"
        page.evaluate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_map_element_still_captures(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0)
        assert await renderer._shoot(_page(has_map=False), URL) == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_falls_back_to_viewport_capture(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0)
        page = _page(screenshot=[PlaywrightError("page crashed"), b"viewport"])

        png = await renderer._shoot(page, URL)

        assert png == b"viewport"
        assert page.screenshot.await_args_list[1].kwargs == {"type": "png"}

    @pytest.mark.asyncio
    async def test_both_captures_fail(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0)
        page = _page(screenshot=[PlaywrightError("crashed"), PlaywrightError("still crashed")])

        with pytest.raises(ScreenshotError) as exc:
            await renderer._shoot(page, URL)

        assert "crashed" in str(exc.value.__cause__)


class TestCapture:
    @pytest.mark.asyncio
    async def test_browser_lifecycle(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0, viewport=(1280, 720))
        page = _page()
        cm, pw, browser = _playwright(page)

        with patch("src.parsers.bubblemaps.screenshot.async_playwright", return_value=cm):
            png = await renderer.capture(TOKEN, "eth")

        assert png == b"\x89PNG"
        launch_kwargs = pw.chromium.launch.await_args.kwargs
        assert launch_kwargs["headless"] is True
        assert "--no-sandbox" in launch_kwargs["args"]
        assert "--window-size=1280,720" in launch_kwargs["args"]
        assert browser.new_page.await_args.kwargs["viewport"] == {"width": 1280, "height": 720}
        page.goto.assert_awaited_once()
        assert page.goto.await_args.args[0] == URL
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_browser_closed_on_failure(self) -> None:
        renderer = BubblemapRenderer(settle_ms=0)
        page = _page(screenshot=[PlaywrightError("a"), PlaywrightError("b")])
        cm, _, browser = _playwright(page)

        with patch("src.parsers.bubblemaps.screenshot.async_playwright", return_value=cm):
            with pytest.raises(ScreenshotError):
                await renderer.capture(TOKEN, "eth")

        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_launch_failure(self) -> None:
        renderer = BubblemapRenderer()
        cm, _, _ = _playwright(_page(), launch_error=PlaywrightError("Executable doesn't exist"))

        with patch("src.parsers.bubblemaps.screenshot.async_playwright", return_value=cm):
            with pytest.raises(ScreenshotError):
                await renderer.capture(TOKEN, "sol")


def test_page_url_uses_configured_app() -> None:
    renderer = BubblemapRenderer(app_url="https://mirror.example")
    assert renderer.page_url("abc", "bsc") == "https://mirror.example/bsc/token/abc"
