"""Assemble a complete comparison record from two parsed setups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

from .core.delta import DeltaMap, delta_map_as_dict, diff, summarise_magnitudes
from .core.model import ParameterTree
from .ingestion.loader import LoadedSetup
from .interpretation.engine import InterpretationEngine
from .interpretation.rules import Interpretation

__all__ = ["SetupComparison", "compare_loaded_setups", "compare_setups"]


@dataclass(frozen=True)
class SetupComparison:
    """Both setups, their deltas and the interpretations derived from them."""

    setup_a_name: str
    setup_b_name: str
    setup_a: ParameterTree
    setup_b: ParameterTree
    deltas: DeltaMap
    interpretations: Tuple[Interpretation, ...] = ()
    car_class: str | None = None
    track: str | None = None
    magnitude_counts: Mapping[str, int] = field(default_factory=dict)

    def as_dict(self, *, include_unchanged: bool = True) -> Dict[str, Any]:
        """Plain record suitable for JSON storage.

        ``include_unchanged=False`` drops deltas whose magnitude is ``none``.
        """

        deltas = delta_map_as_dict(self.deltas)
        if not include_unchanged:
            changed: Dict[str, Dict[str, Any]] = {}
            for section, parameters in deltas.items():
                kept = {
                    name: payload
                    for name, payload in parameters.items()
                    if payload["magnitude"] != "none"
                }
                if kept:
                    changed[section] = kept
            deltas = changed
        return {
            "setup_a_name": self.setup_a_name,
            "setup_b_name": self.setup_b_name,
            "car_class": self.car_class,
            "track": self.track,
            "setup_a": self.setup_a.as_dict(),
            "setup_b": self.setup_b.as_dict(),
            "deltas": deltas,
            "interpretations": [item.as_dict() for item in self.interpretations],
            "magnitude_counts": dict(self.magnitude_counts),
        }


def compare_setups(
    setup_a: ParameterTree,
    setup_b: ParameterTree,
    *,
    car_class: str | None = None,
    track: str | None = None,
    setup_a_name: str = "Setup A",
    setup_b_name: str = "Setup B",
    engine: InterpretationEngine | None = None,
) -> SetupComparison:
    """Diff ``setup_a`` (baseline) against ``setup_b`` and interpret the result."""

    deltas = diff(setup_a, setup_b)
    interpreter = engine or InterpretationEngine()
    interpretations = interpreter.interpret(deltas, car_class, track)
    return SetupComparison(
        setup_a_name=setup_a_name,
        setup_b_name=setup_b_name,
        setup_a=setup_a,
        setup_b=setup_b,
        deltas=deltas,
        interpretations=tuple(interpretations),
        car_class=car_class,
        track=track,
        magnitude_counts=summarise_magnitudes(deltas),
    )


def compare_loaded_setups(
    setup_a: LoadedSetup,
    setup_b: LoadedSetup,
    *,
    car_class: str | None = None,
    track: str | None = None,
    engine: InterpretationEngine | None = None,
) -> SetupComparison:
    return compare_setups(
        setup_a.tree,
        setup_b.tree,
        car_class=car_class,
        track=track,
        setup_a_name=setup_a.name,
        setup_b_name=setup_b.name,
        engine=engine,
    )
