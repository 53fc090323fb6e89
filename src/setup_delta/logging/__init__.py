"""Logging configuration helpers for setup-delta."""

from setup_delta.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
