"""Command helpers for the ``parse`` sub-command."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Mapping

from ..configuration import config_table
from .common import add_export_argument, render_payload, resolve_exports, validated_export
from .errors import CliError
from .io import load_setup_argument

PARSE_EXPORTS: tuple[str, ...] = ("json", "text")


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``parse`` sub-command."""

    parse_cfg = config_table(config, "parse")

    parser = subparsers.add_parser(
        "parse",
        help="Parse a single setup file and print its parameter tree.",
    )
    parser.add_argument("setup", type=Path, help="Setup file (text or HTML).")
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Include the lines or rows that were skipped while parsing.",
    )
    add_export_argument(
        parser,
        default=validated_export(parse_cfg.get("export"), fallback="json", choices=PARSE_EXPORTS),
        choices=PARSE_EXPORTS,
        help_text="Exporter used to render the parsed setup (default: json).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``parse`` command returning the rendered payload."""

    loaded = load_setup_argument(namespace.setup, config)
    payload: Dict[str, Any] = {
        "name": loaded.name,
        "source": str(loaded.source) if loaded.source is not None else None,
        "format": loaded.format,
        "tree": loaded.tree,
    }
    if namespace.diagnostics:
        payload["diagnostics"] = [item.as_dict() for item in loaded.diagnostics]
    exports = resolve_exports(namespace)
    try:
        return render_payload(payload, exports)
    except ValueError as exc:
        raise CliError(
            f"Cannot export {loaded.name!r}: {exc}",
            category="usage",
            context={"path": namespace.setup, "exports": ",".join(exports)},
        ) from exc


__all__ = ["PARSE_EXPORTS", "handle", "register_subparser"]
