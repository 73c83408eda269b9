"""
================================================================================
Navigation Component (Async / Playwright)
================================================================================

Site header shared by every page. Built from a Playwright page directly, so
any page object (or test) can drive it without owning it.

================================================================================
"""

from __future__ import annotations

import re

import allure
from playwright.async_api import Locator, Page, expect


def _link(page: Page, pattern: str) -> Locator:
    return page.get_by_role("link", name=re.compile(pattern, re.IGNORECASE)).first


class Navigation:
    """Header navigation component (async)."""

    def __init__(self, page: Page):
        self.page = page

        self.nav_bar = page.locator("nav").first
        self.nav_links = self.nav_bar.locator("a[href]")

        self.home_link = _link(page, r"^home$")
        self.getting_started_link = _link(page, r"getting started")
        self.learn_link = _link(page, r"^learn$")
        self.develop_link = _link(page, r"^develop$")
        self.validate_link = _link(page, r"validate")
        self.operate_link = _link(page, r"operate")
        self.academy_link = _link(page, r"academy")
        self.blog_link = _link(page, r"blog")

        self.search_button = page.get_by_role("button", name=re.compile("search", re.IGNORECASE)).first
        self.github_link = _link(page, r"github")

        self.mobile_menu_button = page.get_by_role("button", name=re.compile("menu", re.IGNORECASE)).first
        self.mobile_menu = page.locator('[class*="mobile-menu"], [class*="navbar-sidebar"]').first

    async def _navigate(self, link: Locator, path: str) -> None:
        await link.click()
        await self.page.wait_for_url(re.compile(re.escape(path)))

    @allure.step("Navigate to Getting Started")
    async def navigate_to_getting_started(self) -> None:
        await self._navigate(self.getting_started_link, "/getting-started")

    @allure.step("Navigate to Learn")
    async def navigate_to_learn(self) -> None:
        await self._navigate(self.learn_link, "/learn")

    @allure.step("Navigate to Develop")
    async def navigate_to_develop(self) -> None:
        await self._navigate(self.develop_link, "/develop")

    @allure.step("Navigate to Validate")
    async def navigate_to_validate(self) -> None:
        await self._navigate(self.validate_link, "/validate")

    @allure.step("Navigate to Operate")
    async def navigate_to_operate(self) -> None:
        await self._navigate(self.operate_link, "/operate")

    @allure.step("Navigate to Academy")
    async def navigate_to_academy(self) -> None:
        await self._navigate(self.academy_link, "/academy")

    @allure.step("Navigate to Blog")
    async def navigate_to_blog(self) -> None:
        await self._navigate(self.blog_link, "/blog")

    @allure.step("Open search")
    async def open_search(self) -> None:
        await self.search_button.click()

    @allure.step("Open GitHub")
    async def open_github(self) -> None:
        await self.github_link.click()

    async def verify_navigation_visible(self) -> None:
        await expect(self.nav_bar).to_be_visible()

    @allure.step("Open mobile menu")
    async def open_mobile_menu(self) -> None:
        """Open the collapsed menu (mobile viewports)."""
        await self.mobile_menu_button.click()
        await expect(self.mobile_menu).to_be_visible()

    async def verify_all_links_present(self) -> None:
        await expect(self.getting_started_link).to_be_visible()
        await expect(self.learn_link).to_be_visible()
        await expect(self.develop_link).to_be_visible()
