"""Unit-aware differences between two parsed setups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, MutableMapping, Tuple

from .model import Parameter, ParameterGroup, ParameterTree

__all__ = [
    "COMPOSITE_SEPARATOR",
    "DeltaMap",
    "Magnitude",
    "MAGNITUDE_ORDER",
    "ParameterDelta",
    "SIGNIFICANT_MAGNITUDES",
    "classify_magnitude",
    "compute_deltas",
    "compute_parameter_delta",
    "delta_map_as_dict",
    "diff",
    "significant_deltas",
    "summarise_magnitudes",
]

logger = logging.getLogger(__name__)

Magnitude = Literal["none", "minor", "moderate", "major"]

MAGNITUDE_ORDER: Tuple[Magnitude, ...] = ("none", "minor", "moderate", "major")
SIGNIFICANT_MAGNITUDES: frozenset[str] = frozenset({"moderate", "major"})

COMPOSITE_SEPARATOR = " - "

DELTA_PRECISION = 3
PERCENT_PRECISION = 2

# (major above, moderate above); anything non-zero below is minor.
_UNIT_THRESHOLDS: Mapping[str, Tuple[float, float]] = MappingProxyType(
    {
        "psi": (2.0, 1.0),
        "kPa": (2.0, 1.0),
        "mm": (5.0, 2.0),
        "cm": (5.0, 2.0),
        "°": (1.0, 0.5),
        "deg": (1.0, 0.5),
    }
)
_PERCENT_MAJOR = 10.0
_PERCENT_MODERATE = 5.0
_PERCENT_MINOR = 1.0


def classify_magnitude(delta: float, percent_change: float, unit: str | None = None) -> Magnitude:
    """Return the severity tier for a change of ``delta`` expressed in ``unit``.

    Pressure, length and angle units use absolute thresholds on ``delta``;
    every other unit (or none) falls back to thresholds on the percentage
    change relative to the baseline.
    """

    abs_delta = abs(delta)
    if abs_delta == 0:
        return "none"

    thresholds = _UNIT_THRESHOLDS.get(unit or "")
    if thresholds is not None:
        major, moderate = thresholds
        if abs_delta > major:
            return "major"
        if abs_delta > moderate:
            return "moderate"
        return "minor"

    abs_percent = abs(percent_change)
    if abs_percent > _PERCENT_MAJOR:
        return "major"
    if abs_percent > _PERCENT_MODERATE:
        return "moderate"
    if abs_percent > _PERCENT_MINOR:
        return "minor"
    return "none"


@dataclass(frozen=True, slots=True)
class ParameterDelta:
    """Difference of one parameter between a baseline and a comparison setup."""

    old_value: float | str | None
    new_value: float | str | None
    delta: float
    percent_change: float
    unit: str | None
    magnitude: Magnitude

    @property
    def is_added(self) -> bool:
        return self.old_value is None and self.new_value is not None

    @property
    def is_removed(self) -> bool:
        return self.new_value is None and self.old_value is not None

    @property
    def is_significant(self) -> bool:
        return self.magnitude in SIGNIFICANT_MAGNITUDES

    def as_dict(self) -> Dict[str, Any]:
        return {
            "old_value": self.old_value,
            "new_value": self.new_value,
            "delta": self.delta,
            "percent_change": self.percent_change,
            "unit": self.unit,
            "magnitude": self.magnitude,
        }


DeltaMap = Mapping[str, Mapping[str, ParameterDelta]]


def _rounded(value: float, digits: int) -> float:
    # ``+ 0.0`` folds negative zero so swapped comparisons stay comparable.
    return round(value, digits) + 0.0


def compute_parameter_delta(
    old: Parameter | None, new: Parameter | None
) -> ParameterDelta:
    """Compare two leaves, treating text or a missing side as ``0``."""

    old_number = old.numeric_value() if old is not None else 0.0
    new_number = new.numeric_value() if new is not None else 0.0

    raw_delta = new_number - old_number
    raw_percent = (raw_delta / old_number) * 100.0 if old_number != 0 else 0.0
    delta = _rounded(raw_delta, DELTA_PRECISION)
    percent_change = _rounded(raw_percent, PERCENT_PRECISION)

    unit = (old.unit if old is not None else None) or (new.unit if new is not None else None)

    return ParameterDelta(
        old_value=old.value if old is not None else None,
        new_value=new.value if new is not None else None,
        delta=delta,
        percent_change=percent_change,
        unit=unit,
        # Graded on the rounded figures: 100 -> 110.004 is 10.0 %, not major.
        magnitude=classify_magnitude(delta, percent_change, unit),
    )


def _union_keys(first: Mapping[str, Any], second: Mapping[str, Any]) -> List[str]:
    ordered = list(first)
    ordered.extend(key for key in second if key not in first)
    return ordered


def _diff_group(
    group_a: ParameterGroup | None,
    group_b: ParameterGroup | None,
    prefix: str,
    target: MutableMapping[str, ParameterDelta],
) -> None:
    entries_a: Mapping[str, Any] = group_a if group_a is not None else {}
    entries_b: Mapping[str, Any] = group_b if group_b is not None else {}

    for name in _union_keys(entries_a, entries_b):
        node_a = entries_a.get(name)
        node_b = entries_b.get(name)
        key = f"{prefix}{COMPOSITE_SEPARATOR}{name}" if prefix else name

        if isinstance(node_a, ParameterGroup) or isinstance(node_b, ParameterGroup):
            if isinstance(node_a, Parameter) or isinstance(node_b, Parameter):
                logger.debug(
                    "Skipping parameter with mismatched shapes",
                    extra={"event": "delta.shape_mismatch", "context": {"parameter": key}},
                )
                continue
            _diff_group(node_a, node_b, key, target)
            continue

        if node_a is None and node_b is None:
            continue
        target[key] = compute_parameter_delta(node_a, node_b)


def diff(tree_a: ParameterTree, tree_b: ParameterTree) -> DeltaMap:
    """Diff ``tree_a`` (baseline) against ``tree_b`` (comparison).

    Sections and parameters are visited in first-seen order: every name of
    the baseline, then names that only exist in the comparison. Nested groups
    are flattened into ``"<group> - <parameter>"`` keys. Sections that yield
    no comparable entries are left out of the result.
    """

    result: Dict[str, Mapping[str, ParameterDelta]] = {}
    for section in _union_keys(tree_a, tree_b):
        entries: Dict[str, ParameterDelta] = {}
        _diff_group(tree_a.get(section), tree_b.get(section), "", entries)
        if entries:
            result[section] = MappingProxyType(entries)
    return MappingProxyType(result)


compute_deltas = diff


def summarise_magnitudes(delta_map: DeltaMap) -> Dict[str, int]:
    """Count the deltas of ``delta_map`` per severity tier."""

    counts = {magnitude: 0 for magnitude in MAGNITUDE_ORDER}
    for parameters in delta_map.values():
        for delta in parameters.values():
            counts[delta.magnitude] += 1
    return counts


def significant_deltas(delta_map: DeltaMap) -> DeltaMap:
    """Return the moderate and major entries of ``delta_map``."""

    filtered: Dict[str, Mapping[str, ParameterDelta]] = {}
    for section, parameters in delta_map.items():
        kept = {name: delta for name, delta in parameters.items() if delta.is_significant}
        if kept:
            filtered[section] = MappingProxyType(kept)
    return MappingProxyType(filtered)


def delta_map_as_dict(delta_map: DeltaMap) -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {
        section: {name: delta.as_dict() for name, delta in parameters.items()}
        for section, parameters in delta_map.items()
    }
