"""Reusable page components (header navigation)."""

from .navigation import Navigation

__all__ = [
    "Navigation",
]
