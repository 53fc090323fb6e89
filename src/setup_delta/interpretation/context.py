"""Car and track context derived from free-text session metadata."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Tuple

__all__ = [
    "CarProfile",
    "InterpretationContext",
    "TrackProfile",
    "normalise_free_text",
]

OVAL_KEYWORDS: Tuple[str, ...] = ("oval", "speedway", "superspeedway")
STREET_KEYWORDS: Tuple[str, ...] = ("street", "monaco", "detroit", "long beach")
HIGH_SPEED_KEYWORDS: Tuple[str, ...] = ("monza", "spa", "silverstone")

FORMULA_KEYWORDS: Tuple[str, ...] = ("formula", "f1", "f2", "f3", "indycar")
GT_KEYWORDS: Tuple[str, ...] = ("gt3", "gte", "gtd", "gt4")
STOCK_CAR_KEYWORDS: Tuple[str, ...] = ("nascar", "xfinity", "truck")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalise_free_text(text: str | None) -> str:
    """Lowercase ``text`` and collapse punctuation runs into single spaces."""

    if not text:
        return ""
    return _NON_ALNUM.sub(" ", text.lower()).strip()


def _mentions(text: str, keywords: Tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


@dataclass(frozen=True, slots=True)
class TrackProfile:
    """Venue traits inferred from a track name."""

    name: str | None = None
    is_oval: bool = False
    is_street_circuit: bool = False
    is_high_speed: bool = False

    @classmethod
    def from_name(cls, name: str | None) -> "TrackProfile":
        text = normalise_free_text(name)
        is_oval = _mentions(text, OVAL_KEYWORDS)
        return cls(
            name=name,
            is_oval=is_oval,
            is_street_circuit=_mentions(text, STREET_KEYWORDS),
            is_high_speed=is_oval or _mentions(text, HIGH_SPEED_KEYWORDS),
        )


@dataclass(frozen=True, slots=True)
class CarProfile:
    """Vehicle family inferred from a car class name."""

    name: str | None = None
    is_formula: bool = False
    is_gt: bool = False
    is_stock_car: bool = False

    @classmethod
    def from_name(cls, name: str | None) -> "CarProfile":
        text = normalise_free_text(name)
        return cls(
            name=name,
            is_formula=_mentions(text, FORMULA_KEYWORDS),
            is_gt=_mentions(text, GT_KEYWORDS),
            is_stock_car=_mentions(text, STOCK_CAR_KEYWORDS),
        )


@dataclass(frozen=True, slots=True)
class InterpretationContext:
    """Context shared with the rules to condition their explanations."""

    car: CarProfile = field(default_factory=CarProfile)
    track: TrackProfile = field(default_factory=TrackProfile)

    @classmethod
    def from_names(
        cls, car_class: str | None = None, track: str | None = None
    ) -> "InterpretationContext":
        return cls(car=CarProfile.from_name(car_class), track=TrackProfile.from_name(track))

    @property
    def profile_label(self) -> str:
        return f"{self.car.name or 'generic'}/{self.track.name or 'generic'}"
