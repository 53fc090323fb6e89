"""Convenience re-exports for test helpers."""

from __future__ import annotations

from tests.helpers.cli import run_cli_in_tmp
from tests.helpers.setups import BASELINE_SETUP, HTML_SETUP, VARIANT_SETUP, build_tree

__all__ = [
    "BASELINE_SETUP",
    "HTML_SETUP",
    "VARIANT_SETUP",
    "build_tree",
    "run_cli_in_tmp",
]
