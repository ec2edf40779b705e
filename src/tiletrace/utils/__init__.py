"""Shared utilities."""

from .logger import LOG_FORMAT, setup_logging

__all__ = ["LOG_FORMAT", "setup_logging"]
