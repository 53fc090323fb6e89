"""Exporter registry for setup comparisons and parsed setups."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Mapping, Protocol

from ..core.delta import MAGNITUDE_ORDER
from ..core.model import ParameterTree
from .setup_text import format_parameter, render_setup

MAGNITUDE_LABELS = {
    "none": "-",
    "minor": "Minor",
    "moderate": "Moderate",
    "major": "**Major**",
}


class Exporter(Protocol):
    """Exporter callable protocol."""

    def __call__(self, results: Dict[str, Any]) -> str:  # pragma: no cover - interface only
        ...


def _normalise(value: Any) -> Any:
    as_dict = getattr(value, "as_dict", None)
    if callable(as_dict):
        return _normalise(as_dict())
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_normalise(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _normalise(item) for key, item in value.items()}
    return value


def json_exporter(results: Dict[str, Any]) -> str:
    payload = _normalise(results)
    return json.dumps(payload, indent=2, sort_keys=True)


def _fmt_value(value: Any, unit: str | None) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        text = f"{value:g}" if math.isfinite(value) else "-"
    else:
        text = str(value) or "-"
    if unit and text != "-" and not isinstance(value, str):
        return f"{text} {unit}"
    return text


def _fmt_signed(value: Any, suffix: str = "") -> str:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return "-"
    if not math.isfinite(numeric):
        return "-"
    return f"{numeric:+g}{suffix}"


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


def markdown_exporter(results: Dict[str, Any]) -> str:
    """Render a comparison record as per-section Markdown tables.

    Each section lists its parameters with both values, the signed delta,
    the percentage change and the magnitude. Interpretations follow as a
    bullet list and a magnitude tally closes the report.
    """

    if not isinstance(results, Mapping) or "deltas" not in results:
        raise TypeError("Markdown exporter requires a comparison payload with 'deltas'")
    name_a = str(results.get("setup_a_name") or "Setup A")
    name_b = str(results.get("setup_b_name") or "Setup B")

    lines: List[str] = [f"# {_escape(name_a)} vs {_escape(name_b)}"]
    context = [
        f"{label}: {results[key]}"
        for key, label in (("car_class", "Car class"), ("track", "Track"))
        if results.get(key)
    ]
    if context:
        lines.append("")
        lines.append(" · ".join(context))

    deltas = _normalise(results.get("deltas") or {})
    if not deltas:
        lines.append("")
        lines.append("No parameter differences.")
    for section, parameters in deltas.items():
        lines.append("")
        lines.append(f"## {_escape(section)}")
        lines.append("")
        lines.append(f"| Parameter | {_escape(name_a)} | {_escape(name_b)} | Δ | % | Magnitude |")
        lines.append("| --- | --- | --- | --- | --- | --- |")
        for parameter, payload in parameters.items():
            unit = payload.get("unit")
            magnitude = payload.get("magnitude", "none")
            lines.append(
                "| {name} | {old} | {new} | {delta} | {percent} | {magnitude} |".format(
                    name=_escape(parameter),
                    old=_escape(_fmt_value(payload.get("old_value"), unit)),
                    new=_escape(_fmt_value(payload.get("new_value"), unit)),
                    delta=_fmt_signed(payload.get("delta")),
                    percent=_fmt_signed(payload.get("percent_change"), "%"),
                    magnitude=MAGNITUDE_LABELS.get(magnitude, magnitude),
                )
            )

    interpretations = _normalise(results.get("interpretations") or [])
    if interpretations:
        lines.append("")
        lines.append("## Interpretations")
        lines.append("")
        for item in interpretations:
            lines.append(
                f"- **{item.get('parameter', '-')}** ({item.get('impact', 'neutral')}): "
                f"{item.get('summary', '')}. {item.get('explanation', '')}".rstrip()
            )

    counts = results.get("magnitude_counts")
    if isinstance(counts, Mapping) and counts:
        lines.append("")
        tally = ", ".join(
            f"{magnitude}: {int(counts.get(magnitude, 0))}" for magnitude in MAGNITUDE_ORDER
        )
        lines.append(f"_Magnitudes: {tally}_")

    return "\n".join(lines) + "\n"


def text_exporter(results: Dict[str, Any] | ParameterTree) -> str:
    """Render a parsed setup back into bracket/assignment text."""

    tree = results.get("tree") if not isinstance(results, ParameterTree) else results
    if not isinstance(tree, ParameterTree):
        raise TypeError("Text exporter requires a ParameterTree under 'tree'")
    return render_setup(tree)


exporters_registry: Dict[str, Exporter] = {
    "json": json_exporter,
    "markdown": markdown_exporter,
    "text": text_exporter,
}

__all__ = [
    "Exporter",
    "MAGNITUDE_LABELS",
    "exporters_registry",
    "format_parameter",
    "json_exporter",
    "markdown_exporter",
    "render_setup",
    "text_exporter",
]
