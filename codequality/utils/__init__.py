"""Shared helpers."""

from .logger import PACKAGE_LOGGER, setup_logging

__all__ = ["PACKAGE_LOGGER", "setup_logging"]
