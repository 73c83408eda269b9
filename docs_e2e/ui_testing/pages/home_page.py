"""
================================================================================
Home Page Object (Async / Playwright)
================================================================================

Locators and actions for the documentation homepage.

Locator priorities:
  - semantic roles (get_by_role) for links and buttons
  - class fragments for CSS-module components (hero buttons)
  - plain CSS for static markup (participate cards, footer)

================================================================================
"""

from __future__ import annotations

import re

import allure
from playwright.async_api import Page

from docs_e2e.ui_testing.framework.component_locator import ComponentLocator
from docs_e2e.ui_testing.framework.constants import (
    COMPONENT_CLASSES,
    PARTICIPATE_CARD_SELECTOR,
    PARTICIPATE_TITLE_SELECTOR,
)
from docs_e2e.ui_testing.framework.page_base import BasePage


class HomePage(BasePage):
    """Homepage page object (async)."""

    URL_PATH = "/"

    def __init__(self, page: Page, base_url: str = ""):
        super().__init__(page, base_url)
        self.components = ComponentLocator(page)

        # Header
        self.logo = page.locator('a[href="/"]').first
        self.search_button = page.get_by_role("button", name=re.compile("search", re.IGNORECASE))
        self.github_link = page.get_by_role("link", name=re.compile("github", re.IGNORECASE))

        # Hero
        self.hero_title = page.locator("h1").first
        self.hero_description = page.locator("p").first
        self.hero_primary_buttons = self.components.class_contains(COMPONENT_CLASSES["hero_primary"])
        self.hero_ghost_buttons = self.components.class_contains(COMPONENT_CLASSES["hero_ghost"])

        # Cards
        self.getting_started_card = page.get_by_role("link", name=re.compile("getting started", re.IGNORECASE))
        self.learn_card = page.get_by_role("link", name=re.compile("learn", re.IGNORECASE))
        self.develop_card = page.get_by_role("link", name=re.compile("develop", re.IGNORECASE))
        self.participate_cards = page.locator(PARTICIPATE_CARD_SELECTOR)

        self.footer = page.locator("footer")

    @allure.step("Open homepage")
    async def open(self) -> "HomePage":
        await self.goto(self.URL_PATH)
        await self.wait_for_page_load()
        return self

    @allure.step("Verify homepage loaded")
    async def verify_page_loaded(self) -> None:
        await self.verify_element_visible(self.hero_title)
        await self.verify_url("/")

    @allure.step("Click Getting Started card")
    async def click_getting_started(self) -> None:
        await self.click_element(self.getting_started_card.first)

    @allure.step("Click Learn card")
    async def click_learn(self) -> None:
        await self.click_element(self.learn_card.first)

    @allure.step("Click Develop card")
    async def click_develop(self) -> None:
        await self.click_element(self.develop_card.first)

    @allure.step("Open search")
    async def open_search(self) -> None:
        await self.click_element(self.search_button.first)

    @allure.step("Verify hero content")
    async def verify_hero_content(self) -> None:
        await self.verify_element_visible(self.hero_title)
        await self.verify_element_visible(self.hero_description)

    async def get_hero_title(self) -> str:
        return (await self.hero_title.text_content()) or ""

    async def participate_card_title(self, card) -> str:
        return ((await card.locator(PARTICIPATE_TITLE_SELECTOR).text_content()) or "").strip()
