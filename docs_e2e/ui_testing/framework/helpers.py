"""
================================================================================
Test Helper Utilities
================================================================================

Reusable page-level operations shared by tests that do not warrant a page
object method: link collection, site-wide link verification, scrolling,
timing, console capture and basic accessibility checks.

================================================================================
"""

from __future__ import annotations

import json
import random
import re
import string
import time
from datetime import datetime
from pathlib import Path
from typing import List, Pattern, Union
from urllib.parse import urljoin, urlparse

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response

from .link_crawler import is_external_href, is_navigational_href, is_passing_status


async def wait_for_navigation(page: Page, url: Union[str, Pattern[str]]) -> None:
    """Wait for the URL to match, then for the network to settle."""
    await page.wait_for_url(url)
    await page.wait_for_load_state("networkidle")


async def is_element_visible(page: Page, selector: str, timeout: int = 5000) -> bool:
    """True if the first match of `selector` becomes visible within `timeout`."""
    try:
        await page.locator(selector).first.wait_for(state="visible", timeout=timeout)
        return True
    except PlaywrightError:
        return False


async def get_all_links(page: Page) -> List[str]:
    """Return the href of every anchor on the page, in document order."""
    urls = []
    for link in await page.locator("a[href]").all():
        href = await link.get_attribute("href")
        if href:
            urls.append(href)
    return urls


async def verify_no_broken_links(page: Page) -> None:
    """
    Assert that no internal link on the current page is broken.

    Every navigational, same-host href is loaded directly and must answer
    with a status below 400. External and non-navigational hrefs are skipped.
    The page is left on the last visited link.
    """
    links = await get_all_links(page)
    base_url = page.url
    host = urlparse(base_url).hostname or ""

    broken = []
    checked = set()
    for link in links:
        if not is_navigational_href(link) or is_external_href(link, (host,)):
            continue
        if link in checked:
            continue
        checked.add(link)

        target = urljoin(base_url, link)
        response = await page.goto(target)
        status = response.status if response else None
        if status is not None and not is_passing_status(status):
            broken.append({"href": link, "status": status})

    logger.info(f"Checked {len(checked)} internal link(s), {len(broken)} broken")
    assert not broken, f"Found broken links: {json.dumps(broken, indent=2)}"


async def take_timestamped_screenshot(page: Page, name: str, output_dir: Path = Path("test-results")) -> Path:
    """Save a full-page screenshot named `<name>-<timestamp>.png`."""
    timestamp = re.sub(r"[:.]", "-", datetime.now().isoformat())
    path = Path(output_dir) / f"{name}-{timestamp}.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    await page.screenshot(path=str(path), full_page=True)
    return path


async def scroll_to_bottom(page: Page) -> None:
    await page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")


async def scroll_to_top(page: Page) -> None:
    await page.evaluate("() => window.scrollTo(0, 0)")


async def get_page_load_time(page: Page) -> float:
    """
    Milliseconds from navigation start to the load event.

    Uses the Navigation Timing Level 2 entry where available.
    """
    return await page.evaluate(
        """() => {
            const [entry] = performance.getEntriesByType('navigation');
            if (entry) return entry.loadEventEnd - entry.startTime;
            const t = performance.timing;
            return t.loadEventEnd - t.navigationStart;
        }"""
    )


def capture_console_errors(page: Page) -> List[str]:
    """
    Start collecting console errors.

    Returns a list that fills in as `console` errors are emitted; register it
    before the navigation you want to observe.
    """
    errors: List[str] = []

    def on_console(message) -> None:
        if message.type == "error":
            errors.append(message.text)

    page.on("console", on_console)
    return errors


async def wait_for_api_response(
    page: Page,
    url_pattern: Union[str, Pattern[str]],
    timeout: int = 10000,
) -> Response:
    """Wait for a response whose URL contains the string or matches the pattern."""
    def matches(response: Response) -> bool:
        if isinstance(url_pattern, str):
            return url_pattern in response.url
        return bool(url_pattern.search(response.url))

    async with page.expect_response(matches, timeout=timeout) as response_info:
        pass
    return await response_info.value


async def verify_basic_accessibility(page: Page) -> None:
    """
    Basic landmark and image-alt checks.

    For comprehensive checks, run axe-core against the page.
    """
    has_main = await is_element_visible(page, "main")
    has_nav = await is_element_visible(page, "nav")
    assert has_main or has_nav, "Page should expose a <main> or <nav> landmark"

    images_without_alt = await page.locator("img:not([alt])").count()
    assert images_without_alt == 0, f"{images_without_alt} image(s) without alt text"


def reset_call_report(node) -> None:
    """Drop a call-phase report left on the item by an earlier rerun attempt."""
    node.rep_call = None


def call_failed(node) -> bool:
    """True when the item's call phase ran in the current attempt and failed."""
    report = getattr(node, "rep_call", None)
    return report is not None and report.failed


class TestDataGenerator:
    """Unique, throwaway values for tests."""
    __test__ = False

    @staticmethod
    def generate_email() -> str:
        return f"test.user.{time.time_ns()}@example.com"

    @staticmethod
    def generate_username() -> str:
        return f"user_{time.time_ns()}"

    @staticmethod
    def generate_string(length: int = 10, alphabet: str = string.ascii_lowercase) -> str:
        return "".join(random.choice(alphabet) for _ in range(length))

    @staticmethod
    def generate_number(minimum: int, maximum: int) -> int:
        """Random integer in [minimum, maximum]."""
        return random.randint(minimum, maximum)


__all__ = [
    "TestDataGenerator",
    "call_failed",
    "capture_console_errors",
    "get_all_links",
    "get_page_load_time",
    "is_element_visible",
    "reset_call_report",
    "scroll_to_bottom",
    "scroll_to_top",
    "take_timestamped_screenshot",
    "verify_basic_accessibility",
    "verify_no_broken_links",
    "wait_for_api_response",
    "wait_for_navigation",
]
