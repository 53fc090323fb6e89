"""Argument parsing helpers for the setup-delta CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from .._version import __version__
from ..configuration import config_table
from . import compare as compare_command
from . import parse as parse_command


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = config_table(config, "logging")

    parser = argparse.ArgumentParser(
        prog="setup-delta",
        description="Compare racing car setups and explain what changed.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml (or its directory) holding [tool.setup_delta].",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    compare_command.register_subparser(subparsers, config=config)
    parse_command.register_subparser(subparsers, config=config)
    return parser


__all__ = ["build_parser"]
