"""
================================================================================
Test Constants
================================================================================

Centralized URLs, paths, timeouts, viewports and expected texts used across
page objects and tests.

================================================================================
"""

import re

# Environment origins
URLS = {
    "local": "http://localhost:3000",
    "staging": "https://staging.docs.midnight.network",
    "production": "https://docs.midnight.network",
}

# Site paths
PATHS = {
    "home": "/",
    "getting_started": "/getting-started",
    "learn": "/learn",
    "develop": "/develop",
    "validate": "/validate",
    "operate": "/operate",
    "academy": "/academy",
    "blog": "/blog",
    "compact": "/compact",
}

# Milliseconds
TIMEOUTS = {
    "short": 5000,
    "medium": 10000,
    "long": 30000,
    "navigation": 30000,
    "api": 10000,
}

VIEWPORTS = {
    "mobile": {
        "small": {"width": 375, "height": 667},     # iPhone SE
        "medium": {"width": 390, "height": 844},    # iPhone 13
        "large": {"width": 428, "height": 926},     # iPhone 13 Pro Max
    },
    "tablet": {
        "portrait": {"width": 768, "height": 1024},
        "landscape": {"width": 1024, "height": 768},
    },
    "desktop": {
        "small": {"width": 1366, "height": 768},
        "medium": {"width": 1920, "height": 1080},
        "large": {"width": 2560, "height": 1440},
    },
}

PAGE_TITLES = {
    "home": re.compile(r"Midnight", re.IGNORECASE),
    "getting_started": re.compile(r"Getting Started", re.IGNORECASE),
    "learn": re.compile(r"Learn", re.IGNORECASE),
    "develop": re.compile(r"Develop", re.IGNORECASE),
}

NAV_LABELS = {
    "home": "Home",
    "getting_started": "Getting Started",
    "learn": "Learn",
    "develop": "Develop",
    "validate": "Validate",
    "operate": "Operate",
    "academy": "Academy",
    "blog": "Blog",
}

ERROR_MESSAGES = {
    "not_found": "404",
    "page_not_found": "page not found",
    "server_error": "500",
}

API_ENDPOINTS = {
    "search": "/api/search",
    "docs": "/api/docs",
}

BROWSERS = {
    "chromium": "chromium",
    "firefox": "firefox",
    "webkit": "webkit",
    "mobile_chrome": "mobile-chrome",
    "mobile_safari": "mobile-safari",
    "tablet": "tablet",
}

SEARCH_QUERIES = {
    "valid": ["compact", "midnight", "blockchain", "tutorial"],
    "invalid": ["xyzabc123", "!!!@@@###"],
    "special": ["test@#$", "test with spaces"],
}

# Pages that must always load for a deployment to be considered healthy
CRITICAL_PAGES = [
    ("/", "Homepage"),
    ("/getting-started", "Getting Started"),
    ("/learn", "Learn"),
    ("/develop", "Develop"),
    ("/blog", "Blog"),
]

# Case-insensitive markers of a "not found" page
NOT_FOUND_MARKERS = ("404", "page not found")

# hrefs that do not navigate anywhere
NON_NAVIGATIONAL_PREFIXES = ("#", "mailto:", "tel:", "javascript:")

# Anchor selectors by href prefix
INTERNAL_LINK_SELECTOR = 'a[href^="/"]'
EXTERNAL_LINK_SELECTOR = 'a[href^="http"]'
VISIBLE_LINK_SELECTOR = "a[href]:visible"

# Crawl bounds, for runtime control
CRAWL_LIMITS = {
    "visible": 15,
    "status": 20,
    "internal": 30,
}

# Timed-out or errored links a crawl may tolerate before failing
MAX_CRAWL_ERRORS = 2

# Class-name fragments of homepage components (CSS modules append a hash)
COMPONENT_CLASSES = {
    "hero_primary": "primaryBtn",
    "hero_ghost": "ghostBtn",
}

PARTICIPATE_CARD_SELECTOR = ".participate-card"
PARTICIPATE_TITLE_SELECTOR = ".participate-title"
