from __future__ import annotations

import pytest

from setup_delta.core.model import Parameter
from setup_delta.ingestion.html_parser import (
    HTMLSetupParser,
    parse_cell_value,
    parse_html_setup,
    parse_html_setup_with_diagnostics,
)

from tests.helpers import HTML_SETUP


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("28 psi", Parameter(28.0, "psi")),
        ("-2.5 deg", Parameter(-2.5, "deg")),
        ("5", Parameter(5.0, "")),
        ("7 clicks", Parameter(7.0, "clicks")),
        ("12.5%", Parameter(12.5, "%")),
        ("Soft", Parameter("Soft", "")),
        ("9" * 400 + " psi", Parameter("9" * 400 + " psi", "")),
        ("", Parameter("", "")),
    ],
)
def test_parse_cell_value(text: str, expected: Parameter) -> None:
    assert parse_cell_value(text) == expected


def test_corner_table_is_grouped_by_corner() -> None:
    tree = parse_html_setup(HTML_SETUP)

    assert tree["tires"]["left_front"] == {
        "pressure": Parameter(28.0, "psi"),
        "camber": Parameter(-2.5, "deg"),
        "toe": Parameter(0.1, "deg"),
    }
    assert set(tree["tires"]) == {"left_front", "right_front"}


def test_three_column_rows_split_into_left_and_right() -> None:
    tree = parse_html_setup(HTML_SETUP)

    assert tree["arb"] == {
        "left": {"stiffness": Parameter(5.0, "")},
        "right": {"stiffness": Parameter(4.0, "")},
    }


def test_two_column_rows_are_key_value_pairs() -> None:
    tree = parse_html_setup(HTML_SETUP)

    assert tree["aero"] == {
        "front_wing": Parameter(4.0, ""),
        "rear_wing": Parameter(7.0, "clicks"),
    }


def test_headings_outside_configured_tags_are_ignored() -> None:
    tree = parse_html_setup(HTML_SETUP)

    assert list(tree) == ["tires", "arb", "aero"]


def test_heading_without_following_table_is_reported() -> None:
    markup = "<h2>Brakes</h2><p>No data</p><h2>Aero</h2><table><tr><td>Front Wing</td><td>3</td></tr></table>"

    result = parse_html_setup_with_diagnostics(markup)

    assert list(result.tree) == ["aero"]
    assert [item.reason for item in result.diagnostics] == ["heading is not followed by a table"]
    assert result.diagnostics[0].source == "Brakes"


def test_unsupported_rows_are_skipped() -> None:
    markup = (
        "<h2>Aero</h2><table>"
        "<tr><td>only one</td></tr>"
        "<tr><td>a</td><td>b</td><td>c</td><td>d</td><td>e</td></tr>"
        "<tr><td>Rear Wing</td><td>6</td></tr>"
        "</table>"
    )

    result = parse_html_setup_with_diagnostics(markup)

    assert result.tree["aero"] == {"rear_wing": Parameter(6.0, "")}
    assert [item.reason for item in result.diagnostics] == [
        "unsupported column count 1",
        "unsupported column count 5",
    ]


def test_corner_row_without_headers_is_reported() -> None:
    markup = "<h2>Tires</h2><table><tr><td>LF</td><td>28 psi</td><td>-2 deg</td><td>0 deg</td></tr></table>"

    result = parse_html_setup_with_diagnostics(markup)

    assert result.tree["tires"] == {"left_front": {}}
    assert len(result.diagnostics) == 3
    assert all("has no header" in item.reason for item in result.diagnostics)


@pytest.mark.parametrize(
    ("heading", "section"),
    [
        ("Front Suspension", "suspension"),
        ("Sway Bars", "arb"),
        ("Transmission", "gearing"),
        ("Alignment", "alignment"),
        ("Tyres", "tires"),
        ("Differential", "differential"),
        ("Shocks", "dampers"),
        ("Fuel & Strategy", "fuel_strategy"),
    ],
)
def test_section_headings_are_normalised(heading: str, section: str) -> None:
    markup = f"<h2>{heading}</h2><table><tr><td>Value</td><td>1</td></tr></table>"

    assert list(parse_html_setup(markup)) == [section]


def test_custom_heading_tags() -> None:
    parser = HTMLSetupParser(heading_tags=("h3",))
    markup = (
        "<h2>Aero</h2><table><tr><td>Front Wing</td><td>3</td></tr></table>"
        "<h3>Brakes</h3><table><tr><td>Bias</td><td>56 %</td></tr></table>"
    )

    tree = parser.parse(markup)

    assert list(tree) == ["brakes"]
    assert tree["brakes"]["bias"] == Parameter(56.0, "%")


def test_markup_without_tables_yields_empty_tree() -> None:
    assert len(parse_html_setup("<html><body><p>Nothing</p></body></html>")) == 0
