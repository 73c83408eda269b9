"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the documentation site.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Components (header navigation) are standalone and can be driven from any
page.

================================================================================
"""

from .components.navigation import Navigation
from .home_page import HomePage

__all__ = [
    "HomePage",
    "Navigation",
]
