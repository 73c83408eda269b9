"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the suite's markers and tags collected items by location.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - secondary checks"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Broad, shallow checks run on every deployment"
    )
    config.addinivalue_line(
        "markers", "crawler: Link crawling checks"
    )
    config.addinivalue_line(
        "markers", "debug: Inspection tests, run only with --inspect"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser tests against the target site"
    )
    config.addinivalue_line(
        "markers", "unit: Browser-free tests of the framework"
    )
    config.addinivalue_line(
        "markers", "homepage: Homepage component tests"
    )
    config.addinivalue_line(
        "markers", "navigation: Header navigation tests"
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag items by directory and gate debug tests behind --inspect.
    """
    skip_debug = pytest.mark.skip(reason="debug inspection test, pass --inspect to run")
    inspect = config.getoption("inspect")

    for item in items:
        parts = item.path.parts
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)

        if "debug" in item.keywords and not inspect:
            item.add_marker(skip_debug)
