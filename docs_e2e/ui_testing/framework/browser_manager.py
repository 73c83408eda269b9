"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser instance per project (browser/device entry)
    - Isolated contexts for test independence
    - Framework-level action and navigation timeouts
    - Optional video recording and tracing per context

================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from .run_config import Project, RunConfig


class BrowserManager:
    """
    Manages the browser instance and contexts for one project.

    Usage:
        async with BrowserManager(config, config.project("chromium")) as manager:
            context = await manager.new_context()
            page = await context.new_page()
            await page.goto("/")
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        config: RunConfig,
        project: Project,
        headless: bool = True,
        slow_mo: float = 0,
    ):
        """
        Initialize browser manager.

        Args:
            config: Run configuration (base URL, timeouts)
            project: Project selecting browser type and device
            headless: Run browser in headless mode
            slow_mo: Delay in milliseconds between Playwright operations
        """
        self.config = config
        self.project = project
        self.headless = headless
        self.slow_mo = slow_mo

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: list[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch the project's browser."""
        self._playwright = await async_playwright().start()

        if self.project.browser == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.project.browser == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
            "slow_mo": self.slow_mo,
        }

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.project.name} ({self.project.browser}, "
            f"headless={self.headless})"
        )

    async def close(self) -> None:
        """Close all contexts and the browser."""
        for context in self._contexts:
            try:
                await context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug(f"Browser closed: {self.project.name}")

    def context_options(self, video_dir: Optional[Path] = None, **options: Any) -> Dict[str, Any]:
        """
        Build context options: defaults, project device, base URL, overrides.

        Args:
            video_dir: Directory to record video into (None disables video)
            **options: Additional context options
        """
        if not self._playwright:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            **self.project.context_options(self._playwright.devices),
            "base_url": self.config.base_url,
            **options,
        }
        if video_dir is not None:
            context_options["record_video_dir"] = str(video_dir)
        return context_options

    async def new_context(
        self,
        video_dir: Optional[Path] = None,
        **options: Any,
    ) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.

        Args:
            video_dir: Directory to record video into (None disables video)
            **options: Additional context options

        Returns:
            New BrowserContext with framework timeouts applied
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = await self._browser.new_context(
            **self.context_options(video_dir=video_dir, **options)
        )
        context.set_default_timeout(self.config.timeouts.action)
        context.set_default_navigation_timeout(self.config.timeouts.navigation)
        self._contexts.append(context)
        return context

    async def close_context(self, context: BrowserContext) -> None:
        """Close a context created by this manager."""
        if context in self._contexts:
            self._contexts.remove(context)
        await context.close()

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """
        Create new page in new or existing context.

        Args:
            context: Existing context to use (creates new if None)
            **context_options: Options for new context
        """
        if context is None:
            context = await self.new_context(**context_options)

        return await context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
]
