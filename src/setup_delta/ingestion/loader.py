"""Read setup files from disk and dispatch them to the matching parser."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..core.model import ParameterTree, ParseDiagnostic, ParseResult
from .html_parser import HTMLSetupParser
from .setup_parser import SetupParser

__all__ = [
    "HTML_SUFFIXES",
    "LoadedSetup",
    "SetupFormat",
    "SetupLoadError",
    "detect_format",
    "load_setup",
    "parse_setup_source",
    "setup_name",
]

logger = logging.getLogger(__name__)

SetupFormat = Literal["text", "html"]

HTML_SUFFIXES = frozenset({".htm", ".html"})
_MARKUP_HINT = re.compile(r"<\s*(html|table|h[1-6])\b", re.IGNORECASE)


class SetupLoadError(OSError):
    """Raised when a setup file cannot be read or decoded."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


@dataclass(frozen=True, slots=True)
class LoadedSetup:
    """A parsed setup together with where it came from."""

    name: str
    source: Path | None
    format: SetupFormat
    tree: ParameterTree
    diagnostics: tuple[ParseDiagnostic, ...] = ()


def setup_name(path: Path) -> str:
    """Display name of a setup file: its file name without the suffix."""

    return path.stem if path.suffix else path.name


def detect_format(text: str, path: Path | None = None) -> SetupFormat:
    if path is not None and path.suffix.lower() in HTML_SUFFIXES:
        return "html"
    if text.lstrip().startswith("<") or _MARKUP_HINT.search(text):
        return "html"
    return "text"


def parse_setup_source(
    text: str,
    *,
    format: SetupFormat | None = None,
    path: Path | None = None,
    text_parser: SetupParser | None = None,
    html_parser: HTMLSetupParser | None = None,
) -> tuple[SetupFormat, ParseResult]:
    """Parse ``text`` choosing the parser from ``format`` or the content."""

    resolved = format or detect_format(text, path)
    if resolved == "html":
        return resolved, (html_parser or HTMLSetupParser()).parse_with_diagnostics(text)
    return resolved, (text_parser or SetupParser()).parse_with_diagnostics(text)


def load_setup(
    path: str | Path,
    *,
    format: SetupFormat | None = None,
    text_parser: SetupParser | None = None,
    html_parser: HTMLSetupParser | None = None,
) -> LoadedSetup:
    """Read and parse the setup stored at ``path``.

    Files are decoded as UTF-8 (a byte order mark is tolerated).
    :class:`SetupLoadError` is raised when the file cannot be read or is not
    valid UTF-8; malformed content never raises.
    """

    source = Path(path)
    try:
        payload = source.read_bytes()
    except OSError as exc:
        raise SetupLoadError(f"Unable to read setup file '{source}': {exc}", path=source) from exc
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SetupLoadError(f"Setup file '{source}' is not valid UTF-8", path=source) from exc

    resolved, result = parse_setup_source(
        text,
        format=format,
        path=source,
        text_parser=text_parser,
        html_parser=html_parser,
    )
    logger.info(
        "Loaded setup",
        extra={
            "event": "setup.loaded",
            "context": {
                "path": str(source),
                "format": resolved,
                "sections": len(result.tree),
                "skipped": result.skipped,
            },
        },
    )
    return LoadedSetup(
        name=setup_name(source),
        source=source,
        format=resolved,
        tree=result.tree,
        diagnostics=result.diagnostics,
    )
