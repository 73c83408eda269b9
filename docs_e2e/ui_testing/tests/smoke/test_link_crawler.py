"""
================================================================================
Smoke Tests - Link Crawler (Async / Playwright)
================================================================================

Crawls the homepage and follows its links one level deep:
  - visible anchors are clicked and checked for not-found content
  - internal anchors are loaded directly and checked by HTTP status

================================================================================
"""

import allure
import pytest
from playwright.async_api import Page

from docs_e2e.ui_testing.framework.constants import (
    CRAWL_LIMITS,
    INTERNAL_LINK_SELECTOR,
    VISIBLE_LINK_SELECTOR,
)
from docs_e2e.ui_testing.framework.helpers import verify_no_broken_links
from docs_e2e.ui_testing.framework.link_crawler import (
    CrawlMode,
    ExternalPolicy,
    LinkCrawler,
)
from docs_e2e.ui_testing.framework.run_config import RunConfig

pytestmark = [pytest.mark.asyncio(loop_scope="session"), pytest.mark.smoke, pytest.mark.crawler]


@allure.epic("Smoke Testing")
@allure.feature("Link Crawler")
class TestLinkCrawler:
    """Breadth-one link checks from the homepage."""

    @allure.story("Click Crawl")
    @allure.title("Clicking visible links never lands on a not-found page")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    async def test_visible_links_not_broken(self, page: Page, run_config: RunConfig):
        crawler = LinkCrawler(
            page,
            selector=VISIBLE_LINK_SELECTOR,
            limit=CRAWL_LIMITS["visible"],
            mode=CrawlMode.CLICK,
            external_policy=ExternalPolicy.SKIP,
            internal_hosts=run_config.internal_hosts,
        )

        report = await crawler.crawl()

        # Click failures are reported, only not-found destinations fail here
        report.assert_within_tolerance(max_broken=0, max_errors=len(report.records))

    @allure.story("Status Crawl")
    @allure.title("Internal links answer with a non-error status")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    async def test_internal_links_status(self, page: Page, run_config: RunConfig):
        crawler = LinkCrawler(
            page,
            selector=INTERNAL_LINK_SELECTOR,
            limit=CRAWL_LIMITS["status"],
            mode=CrawlMode.GOTO,
            internal_hosts=run_config.internal_hosts,
        )

        report = await crawler.crawl()

        report.assert_within_tolerance(max_broken=0, max_errors=0)

    @allure.story("Status Crawl")
    @allure.title("Getting Started page has no broken internal links")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    async def test_getting_started_has_no_broken_links(self, page: Page):
        await page.goto("/getting-started")

        await verify_no_broken_links(page)
