"""
================================================================================
Component Locator
================================================================================

Locates UI components by partial class-name match.

Docusaurus CSS modules mangle class names at build time (`primaryBtn` ships
as `primaryBtn_OCwy`), so components are matched with `[class*="..."]`
instead of exact class selectors.

Every loop over a located set goes through `require()` first: a locator that
matches nothing fails the test instead of letting the loop pass vacuously.

================================================================================
"""

from __future__ import annotations

from typing import AsyncIterator, Dict, Iterable, Optional, Union

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page


class ElementNotFoundError(Exception):
    """Raised when all locator strategies fail to find element."""
    pass


class NoElementsMatchedError(AssertionError):
    """Raised when a locator required to match at least one element matched none."""
    pass


def class_contains_selector(fragment: str) -> str:
    """
    Build a substring class selector.

    >>> class_contains_selector("primaryBtn")
    '[class*="primaryBtn"]'
    """
    if not fragment or '"' in fragment:
        raise ValueError(f"Invalid class fragment: {fragment!r}")
    return f'[class*="{fragment}"]'


class ComponentLocator:
    """
    Class-fragment and precondition-checked element location.

    Usage:
        >>> components = ComponentLocator(page)
        >>> buttons = components.class_contains("primaryBtn")
        >>> async for button in components.each(buttons, "hero primary button"):
        ...     await button.click()
    """

    def __init__(self, page: Page):
        self.page = page

    def class_contains(
        self,
        fragment: str,
        scope: Optional[Union[Page, Locator]] = None,
    ) -> Locator:
        """
        Locate elements whose class attribute contains `fragment`.

        Args:
            fragment: Class-name fragment (e.g. "primaryBtn")
            scope: Page or locator to search within; defaults to the page
        """
        return (scope or self.page).locator(class_contains_selector(fragment))

    async def require(self, locator: Locator, description: str) -> int:
        """
        Count matches, failing when there are none.

        Args:
            locator: Locator to count
            description: Human-readable name for the failure message

        Returns:
            Number of matched elements (always > 0)

        Raises:
            NoElementsMatchedError: When the locator matches zero elements
        """
        count = await locator.count()
        logger.info(f"Found {count} {description}(s)")
        if count <= 0:
            raise NoElementsMatchedError(
                f"Should find at least 1 {description}, found 0"
            )
        return count

    async def each(
        self,
        locator: Locator,
        description: str,
        limit: Optional[int] = None,
    ) -> AsyncIterator[Locator]:
        """
        Yield each matched element after the non-empty precondition.

        Args:
            locator: Locator to iterate
            description: Human-readable name for logging / failure message
            limit: Upper bound on yielded elements
        """
        count = await self.require(locator, description)
        if limit is not None:
            count = min(count, limit)
        for index in range(count):
            yield locator.nth(index)

    async def discover(self, regions: Dict[str, str]) -> Dict[str, int]:
        """
        Count elements per UI region.

        Args:
            regions: Mapping of region name -> selector

        Returns:
            Mapping of region name -> element count
        """
        counts: Dict[str, int] = {}
        for name, selector in regions.items():
            counts[name] = await self.page.locator(selector).count()
        logger.info(
            "Component discovery: "
            + ", ".join(f"{name}={count}" for name, count in counts.items())
        )
        return counts

    async def locate_first(
        self,
        selectors: Iterable[str],
        name: str = "element",
        timeout: int = 5000,
    ) -> Locator:
        """
        Return the first visible match, trying selectors in order.

        Args:
            selectors: Primary selector followed by fallbacks
            name: Human-readable element name for logging
            timeout: Timeout in milliseconds for each attempt

        Raises:
            ElementNotFoundError: When every selector fails
        """
        errors = []
        for index, selector in enumerate(selectors):
            locator = self.page.locator(selector).first
            try:
                await locator.wait_for(state="visible", timeout=timeout)
            except PlaywrightError as e:
                errors.append(f"{selector} -> {(str(e).splitlines() or [''])[0][:80]}")
                continue
            if index:
                logger.warning(f"Element '{name}' used fallback: {selector}")
            return locator

        error_msg = (
            f"All locators failed for '{name}':\n" +
            "\n".join(f"  - {err}" for err in errors)
        )
        logger.error(error_msg)
        raise ElementNotFoundError(error_msg)


__all__ = [
    "ComponentLocator",
    "ElementNotFoundError",
    "NoElementsMatchedError",
    "class_contains_selector",
]
