"""Rule-based interpretation of significant setup deltas."""

from setup_delta.interpretation.context import (
    CarProfile,
    InterpretationContext,
    TrackProfile,
)
from setup_delta.interpretation.engine import InterpretationEngine, interpret
from setup_delta.interpretation.rules import (
    DEFAULT_RULE_SETS,
    Interpretation,
    InterpretationRule,
    SectionRules,
)

__all__ = [
    "CarProfile",
    "DEFAULT_RULE_SETS",
    "Interpretation",
    "InterpretationContext",
    "InterpretationEngine",
    "InterpretationRule",
    "SectionRules",
    "TrackProfile",
    "interpret",
]
