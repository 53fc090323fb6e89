from __future__ import annotations

import logging
from pathlib import Path

import pytest

from setup_delta.core.model import Parameter
from setup_delta.ingestion.html_parser import HTMLSetupParser
from setup_delta.ingestion.loader import (
    SetupLoadError,
    detect_format,
    load_setup,
    parse_setup_source,
    setup_name,
)

from tests.helpers import BASELINE_SETUP, HTML_SETUP


@pytest.mark.parametrize(
    ("text", "path", "expected"),
    [
        ("[Aero]\nFront Wing = 5\n", None, "text"),
        ("[Aero]\nFront Wing = 5\n", Path("export.html"), "html"),
        ("  <html><body></body></html>", None, "html"),
        ("Exported setup\n<h2>Tires</h2><table></table>", None, "html"),
        ("[Notes]\nComment = <3 laps\n", Path("race.sto"), "text"),
    ],
)
def test_detect_format(text: str, path: Path | None, expected: str) -> None:
    assert detect_format(text, path) == expected


@pytest.mark.parametrize(
    ("name", "expected"),
    [("monza_quali.sto", "monza_quali"), ("spa.baseline.html", "spa.baseline"), ("README", "README")],
)
def test_setup_name(name: str, expected: str) -> None:
    assert setup_name(Path(name)) == expected


def test_parse_setup_source_honours_explicit_format() -> None:
    resolved, result = parse_setup_source("<h2>Aero</h2>", format="text")

    assert resolved == "text"
    assert len(result.tree) == 0


def test_load_text_setup(setup_file_factory) -> None:
    path = setup_file_factory("gt3_baseline.sto", BASELINE_SETUP)

    loaded = load_setup(path)

    assert loaded.name == "gt3_baseline"
    assert loaded.source == path
    assert loaded.format == "text"
    assert loaded.tree["aero"]["Front Wing"] == Parameter(5.0, "deg")
    assert loaded.diagnostics == ()


def test_load_html_setup_with_custom_parser(setup_file_factory) -> None:
    path = setup_file_factory("spa.html", HTML_SETUP.replace("<h2>", "<h3>").replace("</h2>", "</h3>"))

    loaded = load_setup(path, html_parser=HTMLSetupParser(heading_tags=("h3",)))

    assert loaded.format == "html"
    assert list(loaded.tree) == ["tires", "arb", "aero"]


def test_load_tolerates_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "bom.sto"
    path.write_bytes(b"\xef\xbb\xbf[Aero]\r\nFront Wing = 5\r\n")

    loaded = load_setup(path)

    assert loaded.tree == {"aero": {"Front Wing": Parameter(5.0)}}


def test_load_reports_skipped_lines(setup_file_factory) -> None:
    path = setup_file_factory("broken.sto", "[Aero]\nnot an assignment\nFront Wing = 5\n")

    loaded = load_setup(path)

    assert [item.location for item in loaded.diagnostics] == ["line 2"]


def test_missing_file_raises_setup_load_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.sto"

    with pytest.raises(SetupLoadError) as excinfo:
        load_setup(missing)

    assert excinfo.value.path == missing
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_undecodable_file_raises_setup_load_error(tmp_path: Path) -> None:
    path = tmp_path / "latin1.sto"
    path.write_bytes("[Aero]\nNote = caf\xe9\n".encode("latin-1"))

    with pytest.raises(SetupLoadError, match="not valid UTF-8"):
        load_setup(path)


def test_load_logs_structured_event(setup_file_factory, caplog: pytest.LogCaptureFixture) -> None:
    path = setup_file_factory("quali.sto", BASELINE_SETUP)

    with caplog.at_level(logging.INFO, logger="setup_delta"):
        load_setup(path)

    (record,) = [record for record in caplog.records if getattr(record, "event", None) == "setup.loaded"]
    assert record.context["format"] == "text"
    assert record.context["sections"] == 6
    assert record.context["skipped"] == 0
