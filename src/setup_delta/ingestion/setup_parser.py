"""Parser for bracketed ``key = value`` setup files."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, List, Sequence, Tuple

from ..core.model import Parameter, ParameterTree, ParseDiagnostic, ParseResult
from .vocabulary import (
    SECTION_SYNONYMS,
    infer_parent_section,
    is_positional,
    normalise_parameter_label,
    normalise_section_name,
)

__all__ = [
    "COMMENT_PREFIXES",
    "SetupParser",
    "parse_setup",
    "parse_setup_with_diagnostics",
    "parse_value",
]

logger = logging.getLogger(__name__)

COMMENT_PREFIXES: Tuple[str, ...] = (";", "#")

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"
_VALUE_WITH_UNIT = re.compile(rf"^(?P<number>{_NUMBER})\s*(?P<unit>[A-Za-z°%][A-Za-z°%/]*)$")
_PLAIN_NUMBER = re.compile(rf"^{_NUMBER}$")
_WHITESPACE = re.compile(r"\s+")


def parse_value(raw: str) -> Parameter:
    """Turn the right-hand side of an assignment into a :class:`Parameter`.

    ``"28 psi"`` keeps ``psi`` as the unit, ``"52.5"`` becomes a unitless
    number and anything else, including numbers too large for a float, is
    kept as trimmed text.
    """

    value = raw.strip()
    match = _VALUE_WITH_UNIT.match(value)
    if match:
        number = float(match.group("number"))
        if math.isfinite(number):
            return Parameter(number, match.group("unit"))
    elif _PLAIN_NUMBER.match(value):
        number = float(value)
        if math.isfinite(number):
            return Parameter(number)
    return Parameter(value)


class SetupParser:
    """Build a :class:`ParameterTree` from bracket/assignment setup text.

    Headers naming a position (front, rear, left or right) open a sub-section
    inside the latest regular section. When such a header shows up before any
    regular section, the parent is inferred from keywords in its name.
    Lines that cannot be interpreted are skipped and reported as
    :class:`ParseDiagnostic` entries instead of raising.
    """

    def __init__(self, *, synonyms: Sequence[Tuple[str, str]] = SECTION_SYNONYMS) -> None:
        self._synonyms = tuple(synonyms)

    def parse(self, text: str) -> ParameterTree:
        return self.parse_with_diagnostics(text).tree

    def parse_with_diagnostics(self, text: str) -> ParseResult:
        sections: Dict[str, Dict[str, Any]] = {}
        diagnostics: List[ParseDiagnostic] = []
        current_section: str | None = None
        current_subsection: str | None = None

        def skip(location: str, line: str, reason: str) -> None:
            diagnostics.append(ParseDiagnostic(location, line, reason))
            logger.debug(
                "Skipping setup line",
                extra={
                    "event": "setup_parser.skip",
                    "context": {"location": location, "reason": reason},
                },
            )

        for number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_PREFIXES):
                continue
            location = f"line {number}"

            if line.startswith("[") and line.endswith("]"):
                label = _WHITESPACE.sub(" ", line[1:-1].strip().lower())
                if not label:
                    skip(location, line, "empty section header")
                    continue
                if is_positional(label):
                    current_subsection = label
                    if current_section is None:
                        current_section = infer_parent_section(label)
                        sections.setdefault(current_section, {})
                    continue
                section = normalise_section_name(label, self._synonyms)
                if not section:
                    skip(location, line, "section header has no usable name")
                    continue
                current_section = section
                current_subsection = None
                sections.setdefault(current_section, {})
                continue

            key, separator, value = line.partition("=")
            if not separator:
                skip(location, line, "missing '='")
                continue
            name = normalise_parameter_label(key)
            if not name:
                skip(location, line, "empty key")
                continue
            if current_section is None:
                skip(location, line, "assignment before any section header")
                continue

            target = sections[current_section]
            if current_subsection is not None:
                group = target.setdefault(current_subsection, {})
                if not isinstance(group, dict):
                    skip(location, line, "sub-section name clashes with a parameter")
                    continue
                target = group
            target[name] = parse_value(value)

        tree = ParameterTree(sections)
        logger.debug(
            "Parsed setup text",
            extra={
                "event": "setup_parser.done",
                "context": {"sections": len(tree), "skipped": len(diagnostics)},
            },
        )
        return ParseResult(tree, tuple(diagnostics))


_DEFAULT_PARSER = SetupParser()


def parse_setup(text: str) -> ParameterTree:
    """Parse setup ``text`` with the default vocabulary."""

    return _DEFAULT_PARSER.parse(text)


def parse_setup_with_diagnostics(text: str) -> ParseResult:
    return _DEFAULT_PARSER.parse_with_diagnostics(text)
