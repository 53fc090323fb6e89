"""Setup file ingestion: text and HTML parsers plus the file loader."""

from setup_delta.ingestion.html_parser import (
    HTMLSetupParser,
    parse_cell_value,
    parse_html_setup,
    parse_html_setup_with_diagnostics,
)
from setup_delta.ingestion.loader import (
    LoadedSetup,
    SetupLoadError,
    detect_format,
    load_setup,
    parse_setup_source,
    setup_name,
)
from setup_delta.ingestion.setup_parser import (
    SetupParser,
    parse_setup,
    parse_setup_with_diagnostics,
    parse_value,
)

__all__ = [
    "HTMLSetupParser",
    "LoadedSetup",
    "SetupLoadError",
    "SetupParser",
    "detect_format",
    "load_setup",
    "parse_cell_value",
    "parse_html_setup",
    "parse_html_setup_with_diagnostics",
    "parse_setup",
    "parse_setup_source",
    "parse_setup_with_diagnostics",
    "parse_value",
    "setup_name",
]
