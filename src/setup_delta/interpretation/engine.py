"""Rule engine turning a delta map into ordered interpretations."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from ..core.delta import DeltaMap
from .context import InterpretationContext
from .rules import DEFAULT_RULE_SETS, Interpretation, InterpretationRule, SectionRules

__all__ = ["InterpretationEngine", "interpret"]

logger = logging.getLogger(__name__)


class InterpretationEngine:
    """Aggregate per-section rule sets and apply them to a delta map.

    Only moderate and major deltas are considered. Within a section the
    first matching rule wins; deltas no rule matches produce nothing.
    """

    def __init__(self, rule_sets: Sequence[SectionRules] | None = None) -> None:
        self.rule_sets: Tuple[SectionRules, ...] = tuple(
            DEFAULT_RULE_SETS if rule_sets is None else rule_sets
        )
        index: Dict[str, List[SectionRules]] = {}
        for rule_set in self.rule_sets:
            for section in rule_set.sections:
                index.setdefault(section.lower(), []).append(rule_set)
        self._sets_by_section = {section: tuple(sets) for section, sets in index.items()}

    def rule_sets_for(self, section: str) -> Tuple[SectionRules, ...]:
        return self._sets_by_section.get(section.lower(), ())

    def rule_for(self, section: str, parameter: str) -> InterpretationRule | None:
        """Return the first rule of the first rule set covering ``section`` that matches."""

        for rule_set in self.rule_sets_for(section):
            rule = rule_set.first_match(parameter)
            if rule is not None:
                return rule
        return None

    def interpret_with_context(
        self, delta_map: DeltaMap, context: InterpretationContext
    ) -> List[Interpretation]:
        interpretations: List[Interpretation] = []
        for section, parameters in delta_map.items():
            if not self.rule_sets_for(section):
                continue
            for parameter, delta in parameters.items():
                if not delta.is_significant:
                    continue
                rule = self.rule_for(section, parameter)
                if rule is not None:
                    interpretations.extend(rule.evaluate(parameter, delta, context))
        logger.debug(
            "Interpreted setup deltas",
            extra={
                "event": "interpretation.done",
                "context": {
                    "profile": context.profile_label,
                    "interpretations": len(interpretations),
                },
            },
        )
        return interpretations

    def interpret(
        self,
        delta_map: DeltaMap,
        car_class: str | None = None,
        track: str | None = None,
    ) -> List[Interpretation]:
        context = InterpretationContext.from_names(car_class, track)
        return self.interpret_with_context(delta_map, context)


_DEFAULT_ENGINE = InterpretationEngine()


def interpret(
    delta_map: DeltaMap,
    car_class: str | None = None,
    track: str | None = None,
) -> List[Interpretation]:
    """Interpret ``delta_map`` with the default rule table."""

    return _DEFAULT_ENGINE.interpret(delta_map, car_class, track)
