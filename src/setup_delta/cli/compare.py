"""Command helpers for the ``compare`` sub-command."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from ..comparison import compare_loaded_setups
from ..configuration import config_table
from .common import add_export_argument, as_bool, render_payload, resolve_exports, validated_export
from .io import load_setup_argument

COMPARE_EXPORTS: tuple[str, ...] = ("json", "markdown")

logger = logging.getLogger(__name__)


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``compare`` sub-command."""

    compare_cfg = config_table(config, "compare")

    parser = subparsers.add_parser(
        "compare",
        help="Compare two setup files and interpret the significant changes.",
    )
    parser.add_argument("setup_a", type=Path, help="Baseline setup (text or HTML).")
    parser.add_argument("setup_b", type=Path, help="Setup compared against the baseline.")
    parser.add_argument(
        "--car-class",
        dest="car_class",
        default=compare_cfg.get("car_class"),
        help="Free-text car class, e.g. 'GT3' or 'Formula'.",
    )
    parser.add_argument(
        "--track",
        dest="track",
        default=compare_cfg.get("track"),
        help="Free-text track name, e.g. 'Monza' or 'Daytona Oval'.",
    )
    parser.add_argument(
        "--include-unchanged",
        dest="include_unchanged",
        action="store_true",
        default=as_bool(compare_cfg.get("include_unchanged")),
        help="Also list parameters whose magnitude is 'none'.",
    )
    add_export_argument(
        parser,
        default=validated_export(
            compare_cfg.get("export"), fallback="markdown", choices=COMPARE_EXPORTS
        ),
        choices=COMPARE_EXPORTS,
        help_text="Exporter used to render the comparison (default: markdown).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``compare`` command returning the rendered payload."""

    setup_a = load_setup_argument(namespace.setup_a, config)
    setup_b = load_setup_argument(namespace.setup_b, config)
    comparison = compare_loaded_setups(
        setup_a,
        setup_b,
        car_class=namespace.car_class,
        track=namespace.track,
    )
    logger.info(
        "Compared setups",
        extra={
            "event": "compare.done",
            "context": {
                "setup_a": setup_a.name,
                "setup_b": setup_b.name,
                "interpretations": len(comparison.interpretations),
                **dict(comparison.magnitude_counts),
            },
        },
    )

    payload: Dict[str, Any] = comparison.as_dict(include_unchanged=namespace.include_unchanged)
    payload["skipped_lines"] = {
        "setup_a": len(setup_a.diagnostics),
        "setup_b": len(setup_b.diagnostics),
    }
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["COMPARE_EXPORTS", "handle", "register_subparser"]
