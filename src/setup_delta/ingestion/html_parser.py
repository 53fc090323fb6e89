"""Parser for tabular HTML setup exports (a heading followed by a table)."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, List, Mapping, MutableMapping, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from ..core.model import Parameter, ParameterTree, ParseDiagnostic, ParseResult
from .vocabulary import (
    CORNER_POSITIONS,
    HTML_SECTION_OVERRIDES,
    SECTION_SYNONYMS,
    normalise_corner,
    normalise_parameter_token,
    normalise_section_name,
)

__all__ = [
    "DEFAULT_HEADING_TAGS",
    "HTMLSetupParser",
    "PARSER",
    "parse_cell_value",
    "parse_html_setup",
    "parse_html_setup_with_diagnostics",
]

logger = logging.getLogger(__name__)

# Built-in parser so no compiled extension is needed.
PARSER = "html.parser"
DEFAULT_HEADING_TAGS: Tuple[str, ...] = ("h2",)

_NON_NUMERIC = re.compile(r"[^0-9\-.]+")
_LEADING_NUMBER = re.compile(r"^[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_TRAILING_UNIT = re.compile(r"([A-Za-z%]+)\s*$")


def parse_cell_value(text: str) -> Parameter:
    """Parse a table cell such as ``"28 psi"`` or ``"-2.5 deg"``.

    Everything but digits, ``-`` and ``.`` is stripped before reading the
    number; the trailing alphabetic or ``%`` run of the original text is the
    unit. Cells without a usable number are kept as text with an empty unit.
    """

    value = text.strip()
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
    number = float(match.group(0)) if match else math.nan
    if not math.isfinite(number):
        return Parameter(value, "")
    unit = _TRAILING_UNIT.search(value)
    return Parameter(number, unit.group(1) if unit else "")


def _cell_text(cell: Tag) -> str:
    return cell.get_text(" ", strip=True)


class HTMLSetupParser:
    """Build a :class:`ParameterTree` from heading + table markup.

    Rows are dispatched on their ``td`` count: two cells hold a key/value
    pair, three cells a left/right pair and four cells a corner row whose
    values are named by the table's header row. Other rows are ignored.
    """

    def __init__(
        self,
        *,
        heading_tags: Sequence[str] = DEFAULT_HEADING_TAGS,
        features: str = PARSER,
        synonyms: Sequence[Tuple[str, str]] = SECTION_SYNONYMS,
        section_overrides: Mapping[str, str] = HTML_SECTION_OVERRIDES,
        positions: Mapping[str, str] = CORNER_POSITIONS,
    ) -> None:
        self._heading_tags = tuple(tag.lower() for tag in heading_tags)
        self._features = features
        self._synonyms = tuple(synonyms)
        self._section_overrides = section_overrides
        self._positions = positions

    def parse(self, markup: str) -> ParameterTree:
        return self.parse_with_diagnostics(markup).tree

    def parse_with_diagnostics(self, markup: str) -> ParseResult:
        soup = BeautifulSoup(markup, self._features)
        sections: Dict[str, Dict[str, Any]] = {}
        diagnostics: List[ParseDiagnostic] = []

        def skip(location: str, source: str, reason: str) -> None:
            diagnostics.append(ParseDiagnostic(location, source, reason))
            logger.debug(
                "Skipping setup markup",
                extra={
                    "event": "html_parser.skip",
                    "context": {"location": location, "reason": reason},
                },
            )

        for heading in soup.find_all(list(self._heading_tags)):
            title = _cell_text(heading)
            location = f"heading {title!r}"
            section = normalise_section_name(
                title, self._synonyms, self._section_overrides
            )
            if not section:
                skip(location, title, "heading has no usable section name")
                continue
            table = heading.find_next_sibling()
            if not isinstance(table, Tag) or table.name != "table":
                skip(location, title, "heading is not followed by a table")
                continue

            group = sections.setdefault(section, {})
            rows = table.find_all("tr")
            headers = [_cell_text(cell) for cell in rows[0].find_all("th")] if rows else []

            for index, row in enumerate(rows, start=1):
                cells = [_cell_text(cell) for cell in row.find_all("td")]
                if not cells:
                    continue
                row_location = f"{location} row {index}"
                source = " | ".join(cells)
                if len(cells) == 2:
                    self._store_pair(group, cells, row_location, source, skip)
                elif len(cells) == 3:
                    self._store_left_right(group, cells, row_location, source, skip)
                elif len(cells) == 4:
                    self._store_corner(group, cells, headers, row_location, source, skip)
                else:
                    skip(row_location, source, f"unsupported column count {len(cells)}")

        tree = ParameterTree(sections)
        logger.debug(
            "Parsed setup markup",
            extra={
                "event": "html_parser.done",
                "context": {"sections": len(tree), "skipped": len(diagnostics)},
            },
        )
        return ParseResult(tree, tuple(diagnostics))

    @staticmethod
    def _subgroup(
        group: MutableMapping[str, Any], name: str
    ) -> MutableMapping[str, Any] | None:
        subgroup = group.setdefault(name, {})
        if isinstance(subgroup, dict):
            return subgroup
        return None

    def _store_pair(self, group, cells, location, source, skip) -> None:
        name = normalise_parameter_token(cells[0])
        if not name:
            skip(location, source, "empty parameter name")
            return
        group[name] = parse_cell_value(cells[1])

    def _store_left_right(self, group, cells, location, source, skip) -> None:
        name = normalise_parameter_token(cells[0])
        if not name:
            skip(location, source, "empty parameter name")
            return
        for side, text in (("left", cells[1]), ("right", cells[2])):
            subgroup = self._subgroup(group, side)
            if subgroup is None:
                skip(location, source, f"'{side}' already holds a parameter")
                continue
            subgroup[name] = parse_cell_value(text)

    def _store_corner(self, group, cells, headers, location, source, skip) -> None:
        corner = normalise_corner(cells[0], self._positions)
        if not corner:
            skip(location, source, "empty corner name")
            return
        subgroup = self._subgroup(group, corner)
        if subgroup is None:
            skip(location, source, f"'{corner}' already holds a parameter")
            return
        for column in range(1, len(cells)):
            header = headers[column] if column < len(headers) else ""
            name = normalise_parameter_token(header)
            if not name:
                skip(location, cells[column], f"column {column + 1} has no header")
                continue
            subgroup[name] = parse_cell_value(cells[column])


_DEFAULT_PARSER = HTMLSetupParser()


def parse_html_setup(markup: str) -> ParameterTree:
    """Parse an HTML setup export with the default headings and vocabulary."""

    return _DEFAULT_PARSER.parse(markup)


def parse_html_setup_with_diagnostics(markup: str) -> ParseResult:
    return _DEFAULT_PARSER.parse_with_diagnostics(markup)
