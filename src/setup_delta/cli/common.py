"""Shared helpers for setup-delta command modules."""

from __future__ import annotations

import argparse
from typing import Any, List, Mapping, Sequence

from ..exporters import exporters_registry
from .errors import CliError

__all__ = [
    "CliError",
    "add_export_argument",
    "as_bool",
    "render_payload",
    "resolve_exports",
    "validated_export",
]


def validated_export(value: Any, *, fallback: str, choices: Sequence[str]) -> str:
    """Return ``value`` when it is one of ``choices``, else ``fallback``."""

    if isinstance(value, str) and value in choices:
        return value
    return fallback


def add_export_argument(
    parser: argparse.ArgumentParser,
    *,
    default: str,
    choices: Sequence[str],
    help_text: str,
) -> None:
    """Register the ``--export`` flag on ``parser`` with standard semantics."""

    parser.add_argument(
        "--export",
        dest="exports",
        choices=sorted(choices),
        action="append",
        help=f"{help_text} Repeat the flag to combine exporters.",
    )
    parser.set_defaults(exports=None, export_default=default)


def _unique_export_list(values: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def resolve_exports(namespace: argparse.Namespace) -> List[str]:
    """Return the exporters requested by ``namespace`` or raise :class:`CliError`."""

    exports = getattr(namespace, "exports", None)
    if exports:
        return _unique_export_list(exports)
    default = getattr(namespace, "export_default", None)
    if isinstance(default, str):
        return [default]
    raise CliError("No exporter configured for this command.", category="usage")


def render_payload(payload: Mapping[str, Any], exporters: Sequence[str] | str) -> str:
    """Render ``payload`` with each exporter, separating outputs by a blank line."""

    selected = [exporters] if isinstance(exporters, str) else _unique_export_list(exporters)
    rendered_outputs: List[str] = []
    for exporter_name in selected:
        exporter = exporters_registry.get(exporter_name)
        if exporter is None:
            raise CliError(
                f"Unknown exporter '{exporter_name}'.",
                category="usage",
                context={"exporter": exporter_name},
            )
        rendered_outputs.append(exporter(dict(payload)).rstrip("\n"))
    return "\n\n".join(rendered_outputs)


def as_bool(value: Any, *, default: bool = False) -> bool:
    """Interpret a configuration value as a boolean flag."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default
