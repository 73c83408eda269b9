"""
Repository-level pytest configuration.

Responsibilities:
  - Command-line options shared by every suite (--project, --headed, ...)
  - Logging initialisation and the read-only run configuration
  - Execution profile: CI retries and per-test timeout defaults

BASE_URL selects the target site (default http://localhost:3000).
CI=1 switches to the CI profile (2 retries; run_tests.py also caps workers).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger
from playwright.async_api import expect

from docs_e2e.ui_testing.framework.run_config import (
    ConfigurationError,
    RunConfig,
    apply_execution_profile,
)
from docs_tools.common import init_logger

RUN_CONFIG_KEY = pytest.StashKey[RunConfig]()


def pytest_addoption(parser):
    group = parser.getgroup("docs-e2e", "Docs site end-to-end options")
    group.addoption(
        "--project",
        action="append",
        default=[],
        help="Browser/device project to run (repeatable, default: chromium)",
    )
    group.addoption(
        "--headed",
        action="store_true",
        default=False,
        help="Run browsers in headed mode",
    )
    group.addoption(
        "--slowmo",
        type=float,
        default=0,
        help="Slow down Playwright operations by the given milliseconds",
    )
    group.addoption(
        "--inspect",
        action="store_true",
        default=False,
        help="Also run debug inspection tests (marked 'debug')",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config):
    """Load run configuration and apply profile defaults before plugins read them."""
    init_logger()
    run_config = RunConfig.load()
    config.stash[RUN_CONFIG_KEY] = run_config

    for name in config.getoption("project"):
        try:
            run_config.project(name)
        except ConfigurationError as e:
            raise pytest.UsageError(str(e)) from e

    apply_execution_profile(config, run_config)
    expect.set_options(timeout=run_config.timeouts.expect)

    logger.debug(
        f"Profile: {'ci' if run_config.ci else 'local'} "
        f"(retries={run_config.retries}, test timeout={run_config.timeouts.test}s)"
    )


def pytest_report_header(config):
    run_config = config.stash[RUN_CONFIG_KEY]
    projects = config.getoption("project") or ["chromium"]
    return [
        f"docs-e2e: base_url={run_config.base_url} "
        f"profile={'ci' if run_config.ci else 'local'} "
        f"projects={','.join(projects)}",
    ]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def run_config(pytestconfig) -> RunConfig:
    """Read-only run configuration for this session."""
    return pytestconfig.stash[RUN_CONFIG_KEY]
