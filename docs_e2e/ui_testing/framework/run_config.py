"""
================================================================================
Run Configuration
================================================================================

Typed, read-only view of the suite configuration for one test run.

Resolution order (highest to lowest priority):
    1. BASE_URL / CI environment variables
    2. environments.<ENV>, when ENV names a target site (e.g. ENV=staging)
    3. SECTION__KEY environment overrides (see docs_tools.common)
    4. config/{ENV}.yaml, then config/config.yaml
    5. Built-in defaults

The CI flag switches the execution profile:
    - local: no retries, unbounded workers ("auto")
    - ci:    2 retries, 2 workers

================================================================================
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from loguru import logger

from docs_tools.common import get_config

DEFAULT_BASE_URL = "http://localhost:3000"

_FALSY = ("", "0", "false", "no", "off")


class ConfigurationError(Exception):
    """Raised when the run configuration is invalid or incomplete."""
    pass


@dataclass(frozen=True)
class Timeouts:
    """Timeouts in milliseconds, except `test` which is in seconds."""
    test: int = 60
    expect: int = 10000
    action: int = 10000
    navigation: int = 30000


@dataclass(frozen=True)
class Project:
    """One entry of the browser/device matrix."""
    name: str
    browser: str = "chromium"
    device: Optional[str] = None
    viewport: Optional[Dict[str, int]] = None

    def context_options(self, devices: Mapping[str, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Build `browser.new_context()` options for this project.

        Args:
            devices: Playwright device descriptors (`playwright.devices`)

        Returns:
            Context options with the device descriptor applied and the
            project viewport taking precedence.
        """
        options: Dict[str, Any] = {}
        if self.device:
            if self.device not in devices:
                raise ConfigurationError(
                    f"Unknown device '{self.device}' for project '{self.name}'"
                )
            options.update(devices[self.device])
            options.pop("default_browser_type", None)
        if self.viewport:
            options["viewport"] = dict(self.viewport)
        return options


@dataclass(frozen=True)
class Reporting:
    allure_results: Path = Path("reports/allure-results")
    html_report: Path = Path("reports/allure-report")
    json_results: Path = Path("reports/results.json")
    junit_xml: Path = Path("reports/junit.xml")


@dataclass(frozen=True)
class Artifacts:
    output_dir: Path = Path("test-results")
    screenshot: str = "only-on-failure"
    video: str = "on-retry"
    trace: str = "on-first-retry"


@dataclass(frozen=True)
class RunConfig:
    """
    Read-only configuration record for the lifetime of a run.

    Usage:
        >>> config = RunConfig.load()
        >>> config.base_url
        'http://localhost:3000'
        >>> config.project("mobile-chrome").device
        'Pixel 5'
    """
    base_url: str = DEFAULT_BASE_URL
    ci: bool = False
    retries: int = 0
    workers: Union[int, str] = "auto"
    timeouts: Timeouts = field(default_factory=Timeouts)
    projects: Dict[str, Project] = field(default_factory=dict)
    environments: Dict[str, str] = field(default_factory=dict)
    extra_internal_hosts: Tuple[str, ...] = ()
    reporting: Reporting = field(default_factory=Reporting)
    artifacts: Artifacts = field(default_factory=Artifacts)

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> "RunConfig":
        """
        Build the run configuration from YAML config and the environment.

        Args:
            environ: Environment mapping; defaults to `os.environ`

        Returns:
            RunConfig instance
        """
        environ = os.environ if environ is None else environ

        ci = environ.get("CI", "").strip().lower() not in _FALSY
        profile = get_config("execution.ci" if ci else "execution.local", {}) or {}

        environments = dict(get_config("environments", {}) or {})
        env_name = environ.get("ENVIRONMENT") or environ.get("ENV") or ""
        base_url = (
            environ.get("BASE_URL")
            or environments.get(env_name)
            or get_config("site.base_url")
            or DEFAULT_BASE_URL
        ).rstrip("/")

        timeouts = Timeouts(**{
            name: _as_int(get_config(f"timeouts.{name}", default), f"timeouts.{name}")
            for name, default in Timeouts().__dict__.items()
        })

        projects = {
            name: Project(
                name=name,
                browser=spec.get("browser", "chromium"),
                device=spec.get("device"),
                viewport=spec.get("viewport"),
            )
            for name, spec in (get_config("projects", {}) or {}).items()
        }

        config = cls(
            base_url=base_url,
            ci=ci,
            retries=_as_int(profile.get("retries", 2 if ci else 0), "execution.retries"),
            workers=_as_workers(profile.get("workers", 2 if ci else "auto")),
            timeouts=timeouts,
            projects=projects,
            environments=environments,
            extra_internal_hosts=tuple(get_config("site.internal_hosts", []) or ()),
            reporting=Reporting(**{
                name: Path(get_config(f"reporting.{name}", str(default)))
                for name, default in Reporting().__dict__.items()
            }),
            artifacts=Artifacts(
                output_dir=Path(get_config("artifacts.output_dir", "test-results")),
                screenshot=get_config("artifacts.screenshot", "only-on-failure"),
                video=get_config("artifacts.video", "on-retry"),
                trace=get_config("artifacts.trace", "on-first-retry"),
            ),
        )
        logger.debug(
            f"Run config loaded: base_url={config.base_url} ci={config.ci} "
            f"retries={config.retries} workers={config.workers}"
        )
        return config

    @property
    def site_host(self) -> str:
        """Hostname of the target site."""
        return urlparse(self.base_url).hostname or ""

    @property
    def internal_hosts(self) -> Tuple[str, ...]:
        """Hosts the crawler treats as same-origin."""
        return (self.site_host, *self.extra_internal_hosts)

    def project(self, name: str) -> Project:
        """
        Look up a project by name.

        Raises:
            ConfigurationError: If the project is not configured
        """
        try:
            return self.projects[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown project '{name}'. Configured: {', '.join(sorted(self.projects))}"
            ) from None


def option_given(config, flag: str) -> bool:
    """True when `flag` was passed on the command line, in PYTEST_ADDOPTS or in ini addopts."""
    args = [
        *config.invocation_params.args,
        *shlex.split(os.environ.get("PYTEST_ADDOPTS", "")),
        *config.getini("addopts"),
    ]
    return any(arg == flag or arg.startswith(f"{flag}=") for arg in args)


def apply_execution_profile(config, run_config: RunConfig) -> None:
    """
    Fill in pytest-rerunfailures retries and the pytest-timeout limit from the profile.

    Options given explicitly win, `--reruns 0` included. xdist workers get the
    controller's resolved options and are left as they are.
    """
    if hasattr(config, "workerinput"):
        return

    if config.pluginmanager.hasplugin("rerunfailures") and not option_given(config, "--reruns"):
        config.option.reruns = run_config.retries

    if config.pluginmanager.hasplugin("timeout") and getattr(config.option, "timeout", None) is None:
        config.option.timeout = run_config.timeouts.test


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{key}' must be an integer, got {value!r}") from None


def _as_workers(value: Any) -> Union[int, str]:
    if str(value).strip().lower() == "auto":
        return "auto"
    return _as_int(value, "execution.workers")


__all__ = [
    "Artifacts",
    "ConfigurationError",
    "Project",
    "Reporting",
    "RunConfig",
    "Timeouts",
    "apply_execution_profile",
    "option_given",
]
