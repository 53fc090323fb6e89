from __future__ import annotations

import pytest

from setup_delta.core.model import Parameter, ParameterGroup, ParameterTree
from setup_delta.ingestion.setup_parser import (
    SetupParser,
    parse_setup,
    parse_setup_with_diagnostics,
    parse_value,
)

from tests.helpers import BASELINE_SETUP


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("28 psi", Parameter(28.0, "psi")),
        ("28psi", Parameter(28.0, "psi")),
        ("-2.5 deg", Parameter(-2.5, "deg")),
        ("500 lb/in", Parameter(500.0, "lb/in")),
        ("56 %", Parameter(56.0, "%")),
        ("1.5°", Parameter(1.5, "°")),
        ("52.5", Parameter(52.5)),
        ("  .75  ", Parameter(0.75)),
        ("soft", Parameter("soft")),
        ("28 lb / in", Parameter("28 lb / in")),
        ("1e999", Parameter("1e999")),
        ("-1e999 psi", Parameter("-1e999 psi")),
        ("", Parameter("")),
    ],
)
def test_parse_value(raw: str, expected: Parameter) -> None:
    assert parse_value(raw) == expected


def test_parse_builds_sections_and_positional_subsections() -> None:
    tree = parse_setup(BASELINE_SETUP)

    assert list(tree) == ["aero", "tires", "dampers", "arb", "brakes", "differential"]
    assert tree["aero"]["Front Wing"] == Parameter(5.0, "deg")
    assert tree["aero"]["Ride Height Front"] == Parameter(52.0, "mm")
    assert tree["tires"]["Compound"] == Parameter("soft")
    left_front = tree["tires"]["left front"]
    assert isinstance(left_front, ParameterGroup)
    assert left_front == {"Pressure": Parameter(27.5, "psi"), "Camber": Parameter(-3.2, "deg")}
    assert tree["arb"]["Front"] == Parameter(500.0, "lb/in")
    assert tree["brakes"]["Brake Bias"] == Parameter(56.0, "%")
    assert tree["differential"]["Preload"] == Parameter(80.0, "Nm")


def test_section_synonyms_are_applied() -> None:
    text = """
[Tyre Pressures]
Front = 27 psi
[Shock Absorbers]
Bump = 4
[Sway Bars]
Front = 3
[Chassis]
Spring Rate = 120 N/mm
[Gear Ratios]
Final Drive = 3.5
"""
    tree = parse_setup(text)

    assert list(tree) == ["tires", "dampers", "arb", "suspension", "gear_ratios"]


def test_parameter_keys_are_title_cased() -> None:
    tree = parse_setup("[Aero]\nfrontWing = 5\nride_height-rear = 60 mm\n  REAR   flap = 2\n")

    assert set(tree["aero"]) == {"Front Wing", "Ride Height Rear", "Rear Flap"}


def test_positional_header_before_any_section_infers_parent() -> None:
    tree = parse_setup("[Left Front Tire]\nPressure = 28 psi\n[Front Spring]\nRate = 120\n")

    assert tree["tires"]["left front tire"] == {"Pressure": Parameter(28.0, "psi")}
    # Positional headers stay attached to the last regular section.
    assert tree["tires"]["front spring"] == {"Rate": Parameter(120.0)}


def test_positional_header_without_keywords_uses_general_section() -> None:
    tree = parse_setup("[Rear]\nToe = 0.2 deg\n")

    assert tree["general"]["rear"] == {"Toe": Parameter(0.2, "deg")}


def test_regular_header_closes_subsection() -> None:
    tree = parse_setup("[Tires]\n[Left Front]\nPressure = 28 psi\n[Brakes]\nBias = 56\n")

    assert tree["brakes"] == {"Bias": Parameter(56.0)}
    assert "Bias" not in tree["tires"]["left front"]


def test_repeated_section_merges_and_last_value_wins() -> None:
    tree = parse_setup("[Aero]\nFront Wing = 4\n[Brakes]\nBias = 55\n[Aero]\nFront Wing = 6\nRear Wing = 7\n")

    assert tree["aero"] == {"Front Wing": Parameter(6.0), "Rear Wing": Parameter(7.0)}


def test_comments_blank_lines_and_crlf_are_ignored() -> None:
    text = "; header\r\n\r\n# note\r\n[Aero]\r\n  Front Wing = 5 deg  \r\n"

    result = parse_setup_with_diagnostics(text)

    assert result.tree == {"aero": {"Front Wing": Parameter(5.0, "deg")}}
    assert result.diagnostics == ()


def test_all_comment_input_yields_empty_tree() -> None:
    tree = parse_setup("; nothing\n# to see\n\n")

    assert isinstance(tree, ParameterTree)
    assert len(tree) == 0


def test_malformed_lines_are_skipped_with_diagnostics() -> None:
    text = "Orphan = 1\n[Aero]\nno equals here\n = 5\n[]\n[!!!]\nFront Wing = 5\n"

    result = parse_setup_with_diagnostics(text)

    assert result.tree == {"aero": {"Front Wing": Parameter(5.0)}}
    reasons = [item.reason for item in result.diagnostics]
    assert reasons == [
        "assignment before any section header",
        "missing '='",
        "empty key",
        "empty section header",
        "section header has no usable name",
    ]
    assert result.diagnostics[0].location == "line 1"
    assert result.skipped == 5


def test_parameter_and_subsection_with_same_words_coexist() -> None:
    text = "[Tires]\nleft front = 3\n[Left Front]\nPressure = 28 psi\n"

    result = parse_setup_with_diagnostics(text)

    assert result.tree["tires"] == {
        "Left Front": Parameter(3.0),
        "left front": {"Pressure": Parameter(28.0, "psi")},
    }
    assert result.diagnostics == ()


def test_value_may_contain_equals_sign() -> None:
    tree = parse_setup("[Notes]\nComment = a=b\n")

    assert tree["notes"]["Comment"] == Parameter("a=b")


def test_custom_synonyms_replace_default_vocabulary() -> None:
    parser = SetupParser(synonyms=(("wing", "aero"),))

    tree = parser.parse("[Wings]\nFront = 4\n[Tires]\nPressure = 28 psi\n")

    assert list(tree) == ["aero", "tires"]


def test_parsed_tree_is_read_only() -> None:
    tree = parse_setup("[Aero]\nFront Wing = 5\n")

    with pytest.raises(TypeError):
        tree["aero"]["Front Wing"] = Parameter(6.0)  # type: ignore[index]
