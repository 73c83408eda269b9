"""
================================================================================
Docs Tools Common Utilities
================================================================================

Shared configuration management and logging setup.

Exports:
    - get_config: Get a configuration value by dot-separated key
    - set_config: Override a configuration value at runtime
    - init_logger: Initialize loguru with the configured level/format
    - reload_config: Re-read YAML files and environment overrides

Usage:
    from docs_tools.common import get_config, init_logger

    init_logger()
    nav_timeout = get_config("timeouts.navigation", 30000)

================================================================================
"""

from .global_config import (
    get_config,
    get_logger,
    init_logger,
    reload_config,
    set_config,
)

__all__ = [
    "get_config",
    "get_logger",
    "init_logger",
    "reload_config",
    "set_config",
]
