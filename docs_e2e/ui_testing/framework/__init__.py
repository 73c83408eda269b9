"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based building blocks for the docs site suite.

Components:
    - run_config: Typed run configuration (base URL, projects, timeouts)
    - browser_manager: Browser lifecycle per project
    - page_base: Base page object for common operations
    - component_locator: Class-fragment location with non-empty preconditions
    - link_crawler: Breadth-one crawl-and-verify strategy
    - helpers: Page-level utilities
    - constants: URLs, paths, timeouts, viewports

================================================================================
"""

from .browser_manager import BrowserManager
from .component_locator import ComponentLocator, ElementNotFoundError, NoElementsMatchedError
from .link_crawler import CrawlMode, CrawlReport, ExternalPolicy, LinkCrawler, LinkRecord, LinkStatus
from .page_base import BasePage
from .run_config import ConfigurationError, Project, RunConfig

__all__ = [
    "BasePage",
    "BrowserManager",
    "ComponentLocator",
    "ConfigurationError",
    "CrawlMode",
    "CrawlReport",
    "ElementNotFoundError",
    "ExternalPolicy",
    "LinkCrawler",
    "LinkRecord",
    "LinkStatus",
    "NoElementsMatchedError",
    "Project",
    "RunConfig",
]
