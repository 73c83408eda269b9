"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and load-state waits
    - Title / URL queries and assertions
    - Element visibility and text assertions
    - Click, fill, key press and scroll actions
    - Screenshot and failure-capture utilities

Page-specific subclasses add locators as attributes and user actions as
methods; all Playwright calls go through the `page` they were built with.

================================================================================
"""

from __future__ import annotations

import json
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger
from playwright.async_api import Locator, Page, Response, expect


# Default output directory for screenshots
SCREENSHOT_DIR = Path("test-results") / "screenshots"

# Failed responses kept for failure reports
MAX_CAPTURED_RESPONSES = 20


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class HomePage(BasePage):
            URL_PATH = "/"

            def __init__(self, page):
                super().__init__(page)
                self.hero_title = page.locator("h1").first

            async def open(self):
                await self.goto(self.URL_PATH)
                await self.wait_for_page_load()
    """

    # Override in subclasses
    URL_PATH: str = "/"

    def __init__(
        self,
        page: Page,
        base_url: str = "",
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Base URL for the site (defaults to BASE_URL)
        """
        self.page = page
        if not base_url:
            base_url = os.getenv("BASE_URL", "http://localhost:3000")
        self.base_url = base_url.rstrip("/")

        self._failed_responses: List[Dict[str, Any]] = []
        self.page.on("response", self._capture_response)

    def _capture_response(self, response: Response) -> None:
        """Keep failed responses (status >= 400) for failure reports."""
        if response.status < 400:
            return
        self._failed_responses.append({
            "timestamp": datetime.now().isoformat(),
            "url": response.url,
            "status": response.status,
        })
        if len(self._failed_responses) > MAX_CAPTURED_RESPONSES:
            self._failed_responses.pop(0)

    @property
    def failed_responses(self) -> List[Dict[str, Any]]:
        return list(self._failed_responses)

    def url_for(self, path: str = "") -> str:
        """Absolute URL of a site-relative path."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def goto(
        self,
        path: str = "",
        wait_until: str = "load",
        **kwargs: Any,
    ) -> Optional[Response]:
        """
        Navigate to a path relative to the base URL.

        Args:
            path: Relative path (absolute URLs are used as-is)
            wait_until: 'load', 'domcontentloaded', 'networkidle' or 'commit'

        Returns:
            Main resource response (None for same-document navigation)
        """
        target = self.url_for(path)
        with allure.step(f"Navigate to {path or '/'}"):
            response = await self.page.goto(target, wait_until=wait_until, **kwargs)
            logger.debug(f"Navigated to: {target} ({response.status if response else 'no response'})")
            return response

    async def wait_for_page_load(
        self,
        state: str = "networkidle",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for the page to reach a stable load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds (framework default if None)
        """
        await self.page.wait_for_load_state(state, timeout=timeout)

    async def get_title(self) -> str:
        return await self.page.title()

    @property
    def current_url(self) -> str:
        return self.page.url

    # =========================================================================
    # Assertions
    # =========================================================================

    async def verify_url(self, expected_path: str) -> None:
        """Assert the current URL contains `expected_path`."""
        with allure.step(f"Verify URL contains {expected_path}"):
            await expect(self.page).to_have_url(re.compile(re.escape(expected_path)))

    async def verify_element_visible(self, locator: Locator) -> None:
        await expect(locator).to_be_visible()

    async def verify_element_text(self, locator: Locator, text: str) -> None:
        await expect(locator).to_contain_text(text)

    # =========================================================================
    # Actions
    # =========================================================================

    async def wait_for_element(self, locator: Locator, timeout: int = 10000) -> None:
        await locator.wait_for(state="visible", timeout=timeout)

    async def scroll_to_element(self, locator: Locator) -> None:
        await locator.scroll_into_view_if_needed()

    async def click_element(self, locator: Locator, **kwargs: Any) -> None:
        await locator.click(**kwargs)

    async def fill_input(self, locator: Locator, text: str) -> None:
        await locator.fill(text)

    async def press_key(self, key: str) -> None:
        await self.page.keyboard.press(key)

    async def wait(self, ms: int) -> None:
        """
        Wait for a fixed time.

        Prefer locator waits and web-first assertions; this exists only as an
        escape hatch.
        """
        logger.warning(f"Fixed wait of {ms}ms on {self.page.url}")
        await self.page.wait_for_timeout(ms)

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = True,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        image = await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach(
                image,
                name=name,
                attachment_type=allure.attachment_type.PNG
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Recent failed responses
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", attach_to_allure=True)

            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT
            )

            if self._failed_responses:
                allure.attach(
                    json.dumps(self._failed_responses[-10:], indent=2),
                    name="Failed Responses",
                    attachment_type=allure.attachment_type.JSON
                )


__all__ = [
    "BasePage",
]
