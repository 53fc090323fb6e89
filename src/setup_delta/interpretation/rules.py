"""Heuristic rules translating significant setup deltas into handling notes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Literal, Protocol, Sequence, Tuple

from ..core.delta import ParameterDelta
from .context import InterpretationContext

__all__ = [
    "AntiRollBarRule",
    "BrakeBiasRule",
    "CamberRule",
    "CompressionDampingRule",
    "DEFAULT_RULE_SETS",
    "DiffPreloadRule",
    "FrontWingRule",
    "Impact",
    "Interpretation",
    "InterpretationRule",
    "ReboundDampingRule",
    "RearWingRule",
    "RideHeightRule",
    "SectionRules",
    "ToeRule",
    "TyrePressureRule",
]

Impact = Literal["positive", "negative", "neutral"]


@dataclass(frozen=True, slots=True)
class Interpretation:
    """Human readable explanation of the likely effect of one change."""

    parameter: str
    category: str
    icon: str
    summary: str
    explanation: str
    impact: Impact

    def as_dict(self) -> Dict[str, Any]:
        return {
            "parameter": self.parameter,
            "category": self.category,
            "icon": self.icon,
            "summary": self.summary,
            "explanation": self.explanation,
            "impact": self.impact,
        }


class InterpretationRule(Protocol):
    """Interface implemented by interpretation rules."""

    def matches(self, parameter: str) -> bool:
        ...

    def evaluate(
        self,
        parameter: str,
        delta: ParameterDelta,
        context: InterpretationContext,
    ) -> Iterable[Interpretation]:
        ...


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _amount(delta: ParameterDelta) -> str:
    text = _format_number(abs(delta.delta))
    unit = delta.unit or ""
    if not unit:
        return text
    if unit in {"°", "%"}:
        return f"{text}{unit}"
    return f"{text} {unit}"


def _location(parameter: str, candidates: Sequence[str] = ("front", "rear")) -> str:
    for candidate in candidates:
        if candidate in parameter:
            return candidate
    return ""


def _titled(location: str, noun: str) -> str:
    if location:
        return f"{location.capitalize()} {noun}"
    return noun[:1].upper() + noun[1:]


def _phrased(location: str, noun: str) -> str:
    return f"{location} {noun}" if location else noun


class _KeywordRule(ABC):
    """Matches parameters whose lowercase name satisfies every keyword group.

    Each entry of ``required`` is a tuple of alternatives; the rule applies
    when at least one alternative of every group occurs in the name. An empty
    ``required`` matches every parameter.
    """

    required: Tuple[Tuple[str, ...], ...] = ()

    def matches(self, parameter: str) -> bool:
        name = parameter.lower()
        return all(any(word in name for word in group) for group in self.required)

    def evaluate(
        self,
        parameter: str,
        delta: ParameterDelta,
        context: InterpretationContext,
    ) -> Iterable[Interpretation]:
        yield self.build(parameter, parameter.lower(), delta, delta.delta > 0, context)

    @abstractmethod
    def build(
        self,
        parameter: str,
        name: str,
        delta: ParameterDelta,
        is_increase: bool,
        context: InterpretationContext,
    ) -> Interpretation:
        """Return the interpretation of a matched, significant delta."""


class FrontWingRule(_KeywordRule):
    """Front wing or flap angle changes front downforce."""

    required = (("front",), ("wing", "flap"))

    def build(self, parameter, name, delta, is_increase, context):
        track = context.track
        if track.is_oval:
            track_note = " On oval tracks, front downforce is crucial for stability through banking."
        elif track.is_high_speed:
            track_note = " On high-speed tracks, this will significantly affect straight-line speed."
        elif track.is_street_circuit:
            track_note = " On street circuits, front downforce helps with the many slow corners."
        else:
            track_note = ""

        car = context.car
        if car.is_formula:
            car_note = " Formula cars are highly sensitive to aerodynamic changes."
        elif car.is_stock_car:
            car_note = " Stock cars rely heavily on aerodynamic balance for close racing."
        else:
            car_note = ""

        if is_increase:
            effect = (
                "add more front downforce, improving front-end grip and potentially "
                "causing understeer"
            )
        else:
            effect = "reduce front downforce, making the car more prone to oversteer on turn-in"
        return Interpretation(
            parameter=parameter,
            category="Aerodynamics",
            icon="wind",
            summary=f"Front downforce {'increased' if is_increase else 'decreased'}",
            explanation=(
                f"{'Increasing' if is_increase else 'Decreasing'} front wing angle by "
                f"{_amount(delta)} will {effect}.{track_note}{car_note}"
            ),
            impact="neutral" if is_increase else "negative",
        )


class RearWingRule(_KeywordRule):
    """Rear wing or flap angle trades rear stability against drag."""

    required = (("rear",), ("wing", "flap"))

    def build(self, parameter, name, delta, is_increase, context):
        track = context.track
        if track.is_oval:
            track_note = (
                " Critical for oval stability - less wing needed on superspeedways, "
                "more on shorter ovals."
            )
        elif track.is_high_speed:
            track_note = " Balance drag vs downforce carefully for long straights."
        elif track.is_street_circuit:
            track_note = " Higher rear wing helps with traction out of slow corners."
        else:
            track_note = ""

        car = context.car
        if car.is_formula:
            car_note = " DRS zones make rear wing setting even more critical."
        elif car.is_gt:
            car_note = " GT cars need rear stability for amateur drivers."
        else:
            car_note = ""

        if is_increase:
            effect = (
                "improve rear stability and traction, especially in high-speed corners, "
                "but may increase drag"
            )
        else:
            effect = (
                "reduce drag and improve top speed, but may make the rear unstable in "
                "fast corners"
            )
        return Interpretation(
            parameter=parameter,
            category="Aerodynamics",
            icon="wind",
            summary=f"Rear downforce {'increased' if is_increase else 'decreased'}",
            explanation=(
                f"{'Increasing' if is_increase else 'Decreasing'} rear wing by "
                f"{_amount(delta)} will {effect}.{track_note}{car_note}"
            ),
            impact="positive" if is_increase else "negative",
        )


class RideHeightRule(_KeywordRule):
    required = (("ride",), ("height",))

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name)
        if is_increase:
            effect = "reduce downforce and mechanical grip, but improve ride over kerbs"
        else:
            effect = (
                "increase downforce and reduce drag, improving cornering speed but "
                "making the car stiffer"
            )
        return Interpretation(
            parameter=parameter,
            category="Aerodynamics",
            icon="height",
            summary=f"{_titled(location, 'ride height')} {'raised' if is_increase else 'lowered'}",
            explanation=(
                f"{'Raising' if is_increase else 'Lowering'} {_phrased(location, 'ride height')} "
                f"by {_amount(delta)} will {effect}."
            ),
            impact="negative" if is_increase else "positive",
        )


class TyrePressureRule(_KeywordRule):
    required = (("pressure",),)

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name, ("front", "rear", "left", "right"))
        if is_increase:
            effect = (
                "make the tire stiffer, improving response but reducing contact patch "
                "and mechanical grip"
            )
        else:
            effect = (
                "increase the contact patch and mechanical grip, but may make the tire "
                "feel sluggish"
            )
        return Interpretation(
            parameter=parameter,
            category="Tire Pressure",
            icon="gauge",
            summary=f"{_titled(location, 'tire pressure')} {'increased' if is_increase else 'decreased'}",
            explanation=(
                f"{'Increasing' if is_increase else 'Decreasing'} {_phrased(location, 'tire pressure')} "
                f"by {_amount(delta)} will {effect}."
            ),
            impact="neutral",
        )


class CamberRule(_KeywordRule):
    """Camber changes are reported against the size of the baseline value."""

    required = (("camber",),)

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name)
        baseline = delta.old_value if isinstance(delta.old_value, float) else 0.0
        direction = "increased" if abs(delta.delta) > abs(baseline) else "decreased"
        return Interpretation(
            parameter=parameter,
            category="Suspension Geometry",
            icon="rotate",
            summary=f"{_titled(location, 'camber')} {direction}",
            explanation=(
                f"Adjusting {_phrased(location, 'camber')} by {_amount(delta)} will affect "
                "tire contact patch in corners. More negative camber improves cornering "
                "grip but may reduce straight-line grip."
            ),
            impact="neutral",
        )


class ToeRule(_KeywordRule):
    required = (("toe",),)

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name)
        return Interpretation(
            parameter=parameter,
            category="Suspension Geometry",
            icon="rotate",
            summary=f"{_titled(location, 'toe')} adjusted",
            explanation=(
                f"Changing {_phrased(location, 'toe')} by {_amount(delta)} will affect "
                "straight-line stability and turn-in response. Toe-in improves stability, "
                "toe-out improves turn-in but may cause instability."
            ),
            impact="neutral",
        )


class CompressionDampingRule(_KeywordRule):
    required = (("bump", "compression"),)

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name)
        if is_increase:
            effect = (
                "slow down weight transfer during braking and corner entry, improving "
                "stability but potentially reducing grip"
            )
        else:
            effect = "allow faster weight transfer, improving mechanical grip but may cause instability"
        return Interpretation(
            parameter=parameter,
            category="Damping",
            icon="spring",
            summary=(
                f"{_titled(location, 'compression damping')} "
                f"{'stiffened' if is_increase else 'softened'}"
            ),
            explanation=(
                f"{'Increasing' if is_increase else 'Decreasing'} "
                f"{_phrased(location, 'compression damping')} will {effect}."
            ),
            impact="neutral" if is_increase else "positive",
        )


class ReboundDampingRule(_KeywordRule):
    required = (("rebound", "extension"),)

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name)
        if is_increase:
            effect = (
                "slow down the suspension extension, keeping the tire planted longer but "
                "may cause the car to sit lower"
            )
        else:
            effect = (
                "allow faster suspension extension, improving ride quality but may cause "
                "the car to be bouncy"
            )
        return Interpretation(
            parameter=parameter,
            category="Damping",
            icon="spring",
            summary=(
                f"{_titled(location, 'rebound damping')} "
                f"{'stiffened' if is_increase else 'softened'}"
            ),
            explanation=(
                f"{'Increasing' if is_increase else 'Decreasing'} "
                f"{_phrased(location, 'rebound damping')} will {effect}."
            ),
            impact="neutral",
        )


class AntiRollBarRule(_KeywordRule):
    """Every anti-roll bar change is treated as a stiffness change."""

    def build(self, parameter, name, delta, is_increase, context):
        location = _location(name)
        if is_increase:
            effect = (
                "reduce body roll and improve response, but may reduce mechanical grip in "
                "that end of the car"
            )
        else:
            effect = (
                "increase mechanical grip and improve ride quality, but may increase body "
                "roll and reduce response"
            )
        return Interpretation(
            parameter=parameter,
            category="Anti-Roll Bar",
            icon="bar",
            summary=f"{_titled(location, 'ARB')} {'stiffened' if is_increase else 'softened'}",
            explanation=(
                f"{'Stiffening' if is_increase else 'Softening'} the "
                f"{_phrased(location, 'anti-roll bar')} will {effect}."
            ),
            impact="neutral" if is_increase else "positive",
        )


class BrakeBiasRule(_KeywordRule):
    required = (("bias", "balance"),)

    def build(self, parameter, name, delta, is_increase, context):
        if is_increase:
            effect = (
                "put more braking force on the front, reducing the risk of rear lockup but "
                "increasing front tire wear"
            )
        else:
            effect = (
                "shift more braking to the rear, improving front tire life but increasing "
                "risk of rear instability under braking"
            )
        return Interpretation(
            parameter=parameter,
            category="Braking",
            icon="brake",
            summary=f"Brake bias {'moved forward' if is_increase else 'moved rearward'}",
            explanation=f"Adjusting brake bias by {_amount(delta)} will {effect}.",
            impact="neutral",
        )


class DiffPreloadRule(_KeywordRule):
    required = (("preload",),)

    def build(self, parameter, name, delta, is_increase, context):
        if is_increase:
            effect = (
                "make the differential lock more aggressively, improving traction but may "
                "cause understeer"
            )
        else:
            effect = "allow more wheel speed difference, improving turn-in but may cause wheelspin"
        return Interpretation(
            parameter=parameter,
            category="Differential",
            icon="gear",
            summary=f"Differential preload {'increased' if is_increase else 'decreased'}",
            explanation=(
                f"{'Increasing' if is_increase else 'Decreasing'} diff preload will {effect}."
            ),
            impact="neutral",
        )


@dataclass(frozen=True, slots=True)
class SectionRules:
    """Ordered rules applied to the deltas of the listed sections."""

    sections: frozenset[str]
    rules: Tuple[InterpretationRule, ...]

    def first_match(self, parameter: str) -> InterpretationRule | None:
        for rule in self.rules:
            if rule.matches(parameter):
                return rule
        return None


DEFAULT_RULE_SETS: Tuple[SectionRules, ...] = (
    SectionRules(
        frozenset({"aero"}),
        (FrontWingRule(), RearWingRule(), RideHeightRule()),
    ),
    SectionRules(
        frozenset({"tires", "tyres"}),
        (TyrePressureRule(), CamberRule(), ToeRule()),
    ),
    SectionRules(
        frozenset({"dampers", "shocks"}),
        (CompressionDampingRule(), ReboundDampingRule()),
    ),
    SectionRules(frozenset({"arb", "antiroll"}), (AntiRollBarRule(),)),
    SectionRules(frozenset({"brakes"}), (BrakeBiasRule(),)),
    SectionRules(frozenset({"differential", "diff"}), (DiffPreloadRule(),)),
)
