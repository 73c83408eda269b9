"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser management, page objects and failure artifacts.

Scopes:
  - session:  run_config, project (parametrized), browser_manager, target_site
  - function: context, page, home_page, navigation, components

Every test gets its own BrowserContext and Page; nothing mutable is shared
between tests. Page-object fixtures are lazy: they are only built for tests
that request them.

Artifacts:
  - screenshot, URL and failed responses on failure (test-results/screenshots/)
  - video on retry (test-results/<test>/video/)
  - trace on first retry (test-results/<test>/trace.zip)

================================================================================
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import AsyncGenerator

import allure
import httpx
import pytest
import pytest_asyncio
from loguru import logger
from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from docs_e2e.ui_testing.framework.browser_manager import BrowserManager
from docs_e2e.ui_testing.framework.component_locator import ComponentLocator
from docs_e2e.ui_testing.framework.helpers import call_failed, reset_call_report
from docs_e2e.ui_testing.framework.page_base import BasePage
from docs_e2e.ui_testing.framework.run_config import Project, RunConfig
from docs_e2e.ui_testing.pages.components.navigation import Navigation
from docs_e2e.ui_testing.pages.home_page import HomePage


def pytest_generate_tests(metafunc):
    """Run every browser test once per selected project."""
    if "project_name" in metafunc.fixturenames:
        names = metafunc.config.getoption("project") or ["chromium"]
        metafunc.parametrize("project_name", names, ids=names, scope="session")


def _artifact_dir(run_config: RunConfig, nodeid: str) -> Path:
    return run_config.artifacts.output_dir / re.sub(r"[^\w.-]+", "-", nodeid).strip("-")


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session", autouse=True)
def target_site(run_config: RunConfig) -> str:
    """
    Probe the target site once per session.

    UI tests are skipped, not failed, when nothing answers at BASE_URL.
    """
    try:
        response = httpx.get(run_config.base_url, timeout=10.0, follow_redirects=True)
    except httpx.HTTPError as e:
        pytest.skip(f"Target site {run_config.base_url} is not reachable: {e}")
    logger.info(f"Target site {run_config.base_url} answered {response.status_code}")
    return run_config.base_url


@pytest.fixture(scope="session")
def project(project_name: str, run_config: RunConfig) -> Project:
    return run_config.project(project_name)


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def browser_manager(
    project: Project,
    run_config: RunConfig,
    pytestconfig,
) -> AsyncGenerator[BrowserManager, None]:
    """
    One browser per project per worker, shared by that worker's tests.
    """
    manager = BrowserManager(
        run_config,
        project,
        headless=not pytestconfig.getoption("headed"),
        slow_mo=pytestconfig.getoption("slowmo"),
    )
    await manager.start()
    yield manager
    await manager.close()


# ================================================================================
# Function Fixtures
# ================================================================================

@pytest_asyncio.fixture(loop_scope="session")
async def context(
    browser_manager: BrowserManager,
    run_config: RunConfig,
    request,
) -> AsyncGenerator[BrowserContext, None]:
    """
    Fresh browser context per test.

    `execution_count` is set by pytest-rerunfailures: 1 on the first run,
    2 on the first retry.
    """
    attempt = getattr(request.node, "execution_count", 1)
    artifacts = run_config.artifacts
    output_dir = _artifact_dir(run_config, request.node.nodeid)

    video_dir = output_dir / "video" if attempt > 1 and artifacts.video == "on-retry" else None
    tracing = attempt == 2 and artifacts.trace == "on-first-retry"

    context = await browser_manager.new_context(video_dir=video_dir)
    if tracing:
        await context.tracing.start(screenshots=True, snapshots=True, sources=True)

    yield context

    if tracing:
        trace_path = output_dir / "trace.zip"
        await context.tracing.stop(path=str(trace_path))
        allure.attach.file(str(trace_path), name="trace", extension="zip")
        logger.info(f"Trace saved: {trace_path}")

    await browser_manager.close_context(context)

    if video_dir is not None:
        for video in sorted(video_dir.glob("*.webm")):
            allure.attach.file(str(video), name=video.name, attachment_type=allure.attachment_type.WEBM)


@pytest_asyncio.fixture(loop_scope="session")
async def page(
    context: BrowserContext,
    run_config: RunConfig,
    request,
) -> AsyncGenerator[Page, None]:
    """
    Fresh page per test.

    When the test body fails, a screenshot, the URL and recent failed
    responses are attached to the report.
    """
    reset_call_report(request.node)
    page = await context.new_page()
    observer = BasePage(page, base_url=run_config.base_url)
    yield page

    if call_failed(request.node) and run_config.artifacts.screenshot == "only-on-failure":
        try:
            await observer.capture_failure(re.sub(r"\W+", "_", request.node.name))
        except PlaywrightError as e:
            logger.warning(f"Failed to capture failure details: {e}")

    await page.close()


@pytest.fixture
def home_page(page: Page, run_config: RunConfig) -> HomePage:
    """HomePage bound to this test's page."""
    return HomePage(page, base_url=run_config.base_url)


@pytest.fixture
def navigation(page: Page) -> Navigation:
    """Header navigation bound to this test's page."""
    return Navigation(page)


@pytest.fixture
def components(page: Page) -> ComponentLocator:
    return ComponentLocator(page)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose phase reports to fixtures as item.rep_setup / rep_call / rep_teardown."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
