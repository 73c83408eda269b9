"""
In-memory stand-ins for the parts of the Playwright page API the framework
touches, so crawler / locator / helper logic runs without a browser.

A FakeSite maps paths to (status, body text) and selectors to anchors; a
FakePage navigates it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

import pytest
from playwright.async_api import Error as PlaywrightError

from docs_tools.common import reload_config


@dataclass
class FakeResponse:
    status: int
    url: str = ""


@dataclass
class FakeAnchor:
    href: Optional[str]
    text: str = ""
    click_error: Optional[PlaywrightError] = None
    attribute_error: Optional[PlaywrightError] = None


@dataclass
class FakeSite:
    base_url: str = "http://localhost:3000"
    pages: Dict[str, tuple] = field(default_factory=dict)
    anchors: Dict[str, List[FakeAnchor]] = field(default_factory=dict)
    goto_errors: Dict[str, PlaywrightError] = field(default_factory=dict)
    # (url, nth call) -> error raised on that call only
    flaky_gotos: Dict[Tuple[str, int], PlaywrightError] = field(default_factory=dict)


class FakeElement:
    def __init__(self, page: "FakePage", anchor: FakeAnchor):
        self.page = page
        self.anchor = anchor

    async def get_attribute(self, name):
        if self.anchor.attribute_error is not None:
            raise self.anchor.attribute_error
        return self.anchor.href if name == "href" else None

    async def text_content(self):
        return self.anchor.text

    async def click(self, timeout=None):
        self.page.clicks.append(self.anchor.href)
        if self.anchor.click_error is not None:
            raise self.anchor.click_error
        self.page.url = urljoin(self.page.url, self.anchor.href)

    async def wait_for(self, state="visible", timeout=None):
        if not self.anchor.href and not self.anchor.text:
            raise PlaywrightError(f"Timeout {timeout}ms exceeded waiting for element")


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    def _anchors(self) -> List[FakeAnchor]:
        return self.page.site.anchors.get(self.selector, [])

    async def count(self):
        return len(self._anchors())

    def nth(self, index):
        return FakeElement(self.page, self._anchors()[index])

    @property
    def first(self):
        anchors = self._anchors()
        return FakeElement(self.page, anchors[0] if anchors else FakeAnchor(href=None))

    async def all(self):
        return [FakeElement(self.page, a) for a in self._anchors()]


class FakePage:
    def __init__(self, site: FakeSite):
        self.site = site
        self.url = "about:blank"
        self.visits: List[str] = []
        self.clicks: List[str] = []

    def locator(self, selector):
        return FakeLocator(self, selector)

    def _path(self, url: str) -> str:
        if not url.startswith(self.site.base_url):
            return url
        return url[len(self.site.base_url):] or "/"

    async def goto(self, url, timeout=None, **kwargs):
        target = urljoin(self.site.base_url + "/", url) if not url.startswith("http") else url
        self.visits.append(url)
        if url in self.site.goto_errors:
            raise self.site.goto_errors[url]
        flaky = self.site.flaky_gotos.get((url, self.visits.count(url)))
        if flaky is not None:
            raise flaky
        self.url = target
        status, _ = self.site.pages.get(self._path(target), (404, "Page Not Found"))
        return FakeResponse(status, target)

    async def wait_for_load_state(self, state="load", timeout=None):
        return None

    async def text_content(self, selector):
        _, body = self.site.pages.get(self._path(self.url), (404, "Page Not Found"))
        return body


@pytest.fixture
def site():
    return FakeSite(
        pages={
            "/": (200, "Welcome to the docs"),
            "/learn": (200, "Learn about the network"),
            "/develop": (200, "Build your first contract"),
            "/missing": (404, "Page Not Found"),
        }
    )


@pytest.fixture
def fake_page(site):
    return FakePage(site)


@pytest.fixture
def restore_config():
    """Reload the repository configuration after a test rewires it."""
    yield
    reload_config()


class ConsoleMessage:
    def __init__(self, type_, text):
        self.type = type_
        self.text = text


class RecordingPage(FakePage):
    """FakePage that keeps event handlers and records screenshot paths."""

    def __init__(self, site):
        super().__init__(site)
        self.handlers = {}
        self.screenshots = []
        self.scripts = []

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event, payload):
        for handler in self.handlers.get(event, []):
            handler(payload)

    async def screenshot(self, path=None, full_page=False):
        self.screenshots.append(path)
        return b""

    async def evaluate(self, script):
        self.scripts.append(script)
