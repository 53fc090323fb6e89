"""Read-only vocabularies used to normalise setup section and parameter labels."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

__all__ = [
    "CORNER_POSITIONS",
    "DEFAULT_PARENT_SECTION",
    "HTML_SECTION_OVERRIDES",
    "PARENT_SECTION_KEYWORDS",
    "POSITIONAL_TOKENS",
    "SECTION_SYNONYMS",
    "infer_parent_section",
    "is_positional",
    "normalise_corner",
    "normalise_parameter_label",
    "normalise_parameter_token",
    "normalise_section_name",
    "section_token",
]

# Substring matches, evaluated in order; the first hit names the section.
SECTION_SYNONYMS: Tuple[Tuple[str, str], ...] = (
    ("suspension", "suspension"),
    ("chassis", "suspension"),
    ("aerodynamics", "aero"),
    ("aero", "aero"),
    ("tyres", "tires"),
    ("tires", "tires"),
    ("tire", "tires"),
    ("tyre", "tires"),
    ("dampers", "dampers"),
    ("damper", "dampers"),
    ("shocks", "dampers"),
    ("shock", "dampers"),
    ("anti-roll", "arb"),
    ("antiroll", "arb"),
    ("sway", "arb"),
    ("arb", "arb"),
    ("brakes", "brakes"),
    ("brake", "brakes"),
    ("differential", "differential"),
    ("diff", "differential"),
)

# Exact heading labels used by tabular exports.
HTML_SECTION_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        "front suspension": "suspension",
        "rear suspension": "suspension",
        "anti-roll bars": "arb",
        "antiroll bars": "arb",
        "sway bars": "arb",
        "gearing": "gearing",
        "transmission": "gearing",
        "alignment": "alignment",
    }
)

POSITIONAL_TOKENS: Tuple[str, ...] = ("front", "rear", "left", "right")

PARENT_SECTION_KEYWORDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("tire", "tyre", "pressure"), "tires"),
    (("spring", "damper", "shock"), "suspension"),
    (("arb", "antiroll", "anti-roll"), "arb"),
    (("aero", "wing", "ride height"), "aero"),
)
DEFAULT_PARENT_SECTION = "general"

CORNER_POSITIONS: Mapping[str, str] = MappingProxyType(
    {
        "left front": "left_front",
        "lf": "left_front",
        "right front": "right_front",
        "rf": "right_front",
        "left rear": "left_rear",
        "lr": "left_rear",
        "right rear": "right_rear",
        "rr": "right_rear",
        "front": "front",
        "rear": "rear",
        "left": "left",
        "right": "right",
    }
)

_NON_TOKEN = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_WORD_SEPARATORS = re.compile(r"[_\-\s]+")


def _collapse(label: str) -> str:
    return _WHITESPACE.sub(" ", label.strip().lower())


def section_token(label: str) -> str:
    """Derive a lowercase ``snake`` token for a label outside the vocabulary."""

    return _NON_TOKEN.sub("_", label.lower()).strip("_")


def normalise_section_name(
    label: str,
    synonyms: Sequence[Tuple[str, str]] = SECTION_SYNONYMS,
    overrides: Mapping[str, str] | None = None,
) -> str:
    """Map a raw section label onto its canonical section token."""

    collapsed = _collapse(label)
    if overrides:
        exact = overrides.get(collapsed)
        if exact is not None:
            return exact
    for keyword, canonical in synonyms:
        if keyword in collapsed:
            return canonical
    return section_token(collapsed)


def is_positional(label: str) -> bool:
    collapsed = _collapse(label)
    return any(token in collapsed for token in POSITIONAL_TOKENS)


def infer_parent_section(label: str) -> str:
    """Guess the parent section of a positional header seen before any section."""

    collapsed = _collapse(label)
    for keywords, section in PARENT_SECTION_KEYWORDS:
        if any(keyword in collapsed for keyword in keywords):
            return section
    return DEFAULT_PARENT_SECTION


def normalise_parameter_label(key: str) -> str:
    """Return ``key`` as Title Case words.

    ``tirePressure``, ``tire_pressure`` and ``tire-pressure`` all become
    ``Tire Pressure``.
    """

    expanded = _CAMEL_BOUNDARY.sub(" ", key.strip())
    words = [word for word in _WORD_SEPARATORS.split(expanded) if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def normalise_parameter_token(name: str) -> str:
    """Return ``name`` as a lowercase ``snake`` token (``Ride Height`` -> ``ride_height``)."""

    return section_token(name)


def normalise_corner(
    label: str, positions: Mapping[str, str] = CORNER_POSITIONS
) -> str:
    collapsed = _collapse(label)
    return positions.get(collapsed) or section_token(collapsed)
