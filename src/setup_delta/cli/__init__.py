"""Command line utilities for setup-delta."""

from setup_delta.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
