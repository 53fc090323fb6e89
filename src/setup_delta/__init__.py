"""Top-level package for setup-delta.

Parse racing car setups exported as bracketed text or HTML tables, diff
two of them parameter by parameter, grade every change by magnitude and
explain the significant ones for a given car class and track.
"""

from ._version import __version__
from .comparison import SetupComparison, compare_loaded_setups, compare_setups
from .core import (
    DeltaMap,
    Parameter,
    ParameterDelta,
    ParameterGroup,
    ParameterTree,
    ParseDiagnostic,
    ParseResult,
    classify_magnitude,
    diff,
    significant_deltas,
    summarise_magnitudes,
)
from .exporters import exporters_registry, render_setup
from .ingestion import (
    HTMLSetupParser,
    LoadedSetup,
    SetupLoadError,
    SetupParser,
    load_setup,
    parse_html_setup,
    parse_setup,
)
from .interpretation import (
    Interpretation,
    InterpretationContext,
    InterpretationEngine,
    interpret,
)

__all__ = [
    "DeltaMap",
    "HTMLSetupParser",
    "Interpretation",
    "InterpretationContext",
    "InterpretationEngine",
    "LoadedSetup",
    "Parameter",
    "ParameterDelta",
    "ParameterGroup",
    "ParameterTree",
    "ParseDiagnostic",
    "ParseResult",
    "SetupComparison",
    "SetupLoadError",
    "SetupParser",
    "__version__",
    "classify_magnitude",
    "compare_loaded_setups",
    "compare_setups",
    "diff",
    "exporters_registry",
    "interpret",
    "load_setup",
    "parse_html_setup",
    "parse_setup",
    "render_setup",
    "significant_deltas",
    "summarise_magnitudes",
]
