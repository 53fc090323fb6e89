"""Setup data model and delta engine."""

from setup_delta.core.delta import (
    COMPOSITE_SEPARATOR,
    DeltaMap,
    MAGNITUDE_ORDER,
    Magnitude,
    ParameterDelta,
    SIGNIFICANT_MAGNITUDES,
    classify_magnitude,
    compute_deltas,
    compute_parameter_delta,
    delta_map_as_dict,
    diff,
    significant_deltas,
    summarise_magnitudes,
)
from setup_delta.core.model import (
    Node,
    Parameter,
    ParameterGroup,
    ParameterTree,
    ParseDiagnostic,
    ParseResult,
)

__all__ = [
    "COMPOSITE_SEPARATOR",
    "DeltaMap",
    "MAGNITUDE_ORDER",
    "Magnitude",
    "Node",
    "Parameter",
    "ParameterDelta",
    "ParameterGroup",
    "ParameterTree",
    "ParseDiagnostic",
    "ParseResult",
    "SIGNIFICANT_MAGNITUDES",
    "classify_magnitude",
    "compute_deltas",
    "compute_parameter_delta",
    "delta_map_as_dict",
    "diff",
    "significant_deltas",
    "summarise_magnitudes",
]
