"""
================================================================================
Link Crawler
================================================================================

Breadth-one "crawl and verify" smoke strategy.

From an origin page, the crawler visits up to `limit` anchors matched by a
selector, classifies each destination and returns to the origin before the
next candidate. It never recurses into the pages it visits.

Classification:
    - non-navigational hrefs (#, mailto:, tel:) and the origin itself: skipped
    - external hrefs: recorded as skipped, or fetched and passed when the
      HTTP status is in [200, 400)
    - internal hrefs, CLICK mode: clicked, and broken when the body text
      contains "404" or "page not found" (case-insensitive)
    - internal hrefs, GOTO mode: navigated to directly, broken when the
      response status is >= 400

A click, navigation or attribute read that throws is recorded as `timeout` /
`error` and the crawl continues. Returning to the origin is retried once and
a second failure is recorded against the origin path; only an origin that
cannot be loaded at the start of the crawl raises. The caller asserts on the
aggregate with `CrawlReport.assert_within_tolerance()`.

================================================================================
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docs_tools.report_tools.allure_utils import attach_json

from .component_locator import ComponentLocator
from .constants import (
    INTERNAL_LINK_SELECTOR,
    MAX_CRAWL_ERRORS,
    NON_NAVIGATIONAL_PREFIXES,
    NOT_FOUND_MARKERS,
)


class LinkStatus(str, Enum):
    OK = "ok"
    BROKEN = "broken"
    EXTERNAL_SKIPPED = "external-skipped"
    TIMEOUT = "timeout"
    ERROR = "error"


class ExternalPolicy(str, Enum):
    SKIP = "skip"
    CHECK = "check"


class CrawlMode(str, Enum):
    CLICK = "click"
    GOTO = "goto"


# ================================================================================
# Classification rules
# ================================================================================

def is_navigational_href(href: Optional[str]) -> bool:
    """True when following `href` leaves the current document."""
    if not href or not href.strip():
        return False
    return not href.strip().lower().startswith(NON_NAVIGATIONAL_PREFIXES)


def is_external_href(href: str, internal_hosts: Iterable[str]) -> bool:
    """
    True when `href` is absolute and points outside the internal hosts.

    Relative hrefs are always internal.
    """
    parsed = urlparse(href)
    if parsed.scheme not in ("http", "https") and not href.startswith("//"):
        return False
    return (parsed.hostname or "") not in set(internal_hosts)


def is_not_found_text(text: Optional[str]) -> bool:
    """True when page text carries a not-found marker."""
    lowered = (text or "").lower()
    return any(marker in lowered for marker in NOT_FOUND_MARKERS)


def is_passing_status(status: int) -> bool:
    """HTTP statuses in [200, 400) pass, redirects included."""
    return 200 <= status < 400


# ================================================================================
# Results
# ================================================================================

@dataclass
class LinkRecord:
    text: str
    href: str
    status: LinkStatus
    http_status: Optional[int] = None
    detail: str = ""

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class CrawlReport:
    """Records of one crawl plus aggregate views and the tolerance check."""
    origin: str
    candidates: int = 0
    records: List[LinkRecord] = field(default_factory=list)

    def with_status(self, *statuses: LinkStatus) -> List[LinkRecord]:
        return [r for r in self.records if r.status in statuses]

    @property
    def ok(self) -> List[LinkRecord]:
        return self.with_status(LinkStatus.OK)

    @property
    def broken(self) -> List[LinkRecord]:
        return self.with_status(LinkStatus.BROKEN)

    @property
    def errors(self) -> List[LinkRecord]:
        return self.with_status(LinkStatus.TIMEOUT, LinkStatus.ERROR)

    @property
    def skipped(self) -> List[LinkRecord]:
        return self.with_status(LinkStatus.EXTERNAL_SKIPPED)

    def summary(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in LinkStatus}
        for record in self.records:
            counts[record.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, object]:
        return {
            "origin": self.origin,
            "candidates": self.candidates,
            "summary": self.summary(),
            "records": [r.to_dict() for r in self.records],
        }

    def format_table(self) -> str:
        lines = [f"Link crawler results ({len(self.records)} links tested from {self.origin}):"]
        for r in self.records:
            code = f" [{r.http_status}]" if r.http_status is not None else ""
            lines.append(f"  {r.status.value:<16} {r.text[:30]:<30} -> {r.href}{code}")
        return "\n".join(lines)

    def assert_within_tolerance(
        self,
        max_broken: int = 0,
        max_errors: int = MAX_CRAWL_ERRORS,
    ) -> None:
        """
        Fail when broken or errored links exceed their tolerance.

        Args:
            max_broken: Broken links allowed (404s are never tolerated by default)
            max_errors: Timed-out / errored links allowed
        """
        broken = [r.to_dict() for r in self.broken]
        assert len(broken) <= max_broken, (
            f"Found {len(broken)} broken link(s): {json.dumps(broken, indent=2)}"
        )
        errors = [r.to_dict() for r in self.errors]
        assert len(errors) <= max_errors, (
            f"{len(errors)} link(s) timed out or errored "
            f"(tolerance {max_errors}): {json.dumps(errors, indent=2)}"
        )


# ================================================================================
# Crawler
# ================================================================================

class LinkCrawler:
    """
    Visits the links of one page and classifies each destination.

    Usage:
        >>> crawler = LinkCrawler(page, internal_hosts=config.internal_hosts)
        >>> report = await crawler.crawl()
        >>> report.assert_within_tolerance()
    """

    def __init__(
        self,
        page: Page,
        origin_path: str = "/",
        selector: str = INTERNAL_LINK_SELECTOR,
        limit: int = 30,
        mode: CrawlMode = CrawlMode.CLICK,
        external_policy: ExternalPolicy = ExternalPolicy.SKIP,
        internal_hosts: Sequence[str] = (),
        click_timeout: int = 5000,
        load_timeout: int = 5000,
        external_timeout: int = 10000,
    ):
        self.page = page
        self.origin_path = origin_path
        self.selector = selector
        self.limit = limit
        self.mode = mode
        self.external_policy = external_policy
        self.internal_hosts = tuple(internal_hosts)
        self.click_timeout = click_timeout
        self.load_timeout = load_timeout
        self.external_timeout = external_timeout
        self.components = ComponentLocator(page)

    async def crawl(self) -> CrawlReport:
        """
        Crawl the origin page's links.

        Returns:
            CrawlReport with one record per visited or skipped-external link

        Raises:
            NoElementsMatchedError: When the selector matches no anchors
        """
        with allure.step(f"Crawl links on {self.origin_path} ({self.selector})"):
            await self.return_to_origin()
            links = self.page.locator(self.selector)
            count = await self.components.require(links, f"link matching {self.selector}")

            report = CrawlReport(origin=self.origin_path, candidates=count)
            for index in range(min(count, self.limit)):
                record = await self._visit(links.nth(index), index)
                if record is None:
                    continue
                report.records.append(record)
                if record.status is not LinkStatus.EXTERNAL_SKIPPED:
                    failure = await self._recover_origin()
                    if failure is not None:
                        report.records.append(failure)

            logger.info(report.format_table())
            attach_json(report.to_dict(), name="Link crawler results")
            return report

    async def return_to_origin(self) -> None:
        await self.page.goto(self.origin_path)

    async def _recover_origin(self) -> Optional[LinkRecord]:
        """
        Go back to the origin after a visit, retrying once.

        Returns:
            None once the origin is loaded, or an error record when both
            attempts fail; the crawl goes on with the next candidate either way
        """
        error = None
        for attempt in (1, 2):
            try:
                await self.return_to_origin()
                return None
            except PlaywrightError as e:
                logger.warning(f"Return to {self.origin_path} failed (attempt {attempt}): {e.message}")
                error = e
        return self._error_record("", self.origin_path, error, prefix="return to origin failed: ")

    async def _visit(self, link, index: int) -> Optional[LinkRecord]:
        try:
            href = await link.get_attribute("href")
            if not is_navigational_href(href) or href == self.origin_path:
                return None
            text = ((await link.text_content()) or "").strip()[:50]
        except PlaywrightError as e:
            # the nth match can vanish once the page is reloaded
            unresolved = f"<unresolved #{index}>"
            logger.warning(f"Could not read link {unresolved}: {e.message}")
            return self._error_record("", unresolved, e)

        if is_external_href(href, self.internal_hosts):
            if self.external_policy is ExternalPolicy.SKIP:
                return LinkRecord(text, href, LinkStatus.EXTERNAL_SKIPPED)
            return await self._guarded(text, href, self._check_by_status(href, self.external_timeout))

        if self.mode is CrawlMode.GOTO:
            return await self._guarded(text, href, self._check_by_status(href, None))
        return await self._guarded(text, href, self._check_by_click(link))

    async def _guarded(self, text: str, href: str, check) -> LinkRecord:
        try:
            status, http_status = await check
            return LinkRecord(text, href, status, http_status)
        except PlaywrightError as e:
            logger.warning(f"Failed following {href}: {e.message}")
            return self._error_record(text, href, e)

    @staticmethod
    def _error_record(text: str, href: str, error: PlaywrightError, prefix: str = "") -> LinkRecord:
        status = LinkStatus.TIMEOUT if isinstance(error, PlaywrightTimeoutError) else LinkStatus.ERROR
        return LinkRecord(text, href, status, detail=f"{prefix}{error.message}")

    async def _check_by_click(self, link):
        await link.click(timeout=self.click_timeout)
        await self.page.wait_for_load_state("domcontentloaded", timeout=self.load_timeout)
        body_text = await self.page.text_content("body")
        status = LinkStatus.BROKEN if is_not_found_text(body_text) else LinkStatus.OK
        return status, None

    async def _check_by_status(self, href: str, timeout: Optional[int]):
        if timeout is None:
            response = await self.page.goto(href)
        else:
            response = await self.page.goto(href, timeout=timeout)
        if response is None:
            return LinkStatus.OK, None
        status = LinkStatus.OK if is_passing_status(response.status) else LinkStatus.BROKEN
        return status, response.status


__all__ = [
    "CrawlMode",
    "CrawlReport",
    "ExternalPolicy",
    "LinkCrawler",
    "LinkRecord",
    "LinkStatus",
    "is_external_href",
    "is_navigational_href",
    "is_not_found_text",
    "is_passing_status",
]
