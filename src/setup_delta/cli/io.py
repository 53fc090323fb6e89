"""Configuration discovery and setup file loading for the CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..configuration import config_table, load_project_config, resolve_pyproject_path
from ..ingestion.html_parser import DEFAULT_HEADING_TAGS, HTMLSetupParser
from ..ingestion.loader import LoadedSetup, SetupLoadError, load_setup
from .errors import CliError, error_from_load_failure

CONFIG_ENV_VAR = "SETUP_DELTA_CONFIG"


def _iter_unique_paths(candidates: Sequence[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml`` files.

    ``path`` wins over the ``SETUP_DELTA_CONFIG`` environment variable, which
    wins over the ``pyproject.toml`` in the working directory. The returned
    mapping always carries ``_config_path`` (``None`` when nothing matched).
    """

    bases: List[Path] = []
    if path is not None:
        bases.append(Path(path))
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    candidates = [
        candidate
        for candidate in (resolve_pyproject_path(base) for base in bases)
        if candidate is not None
    ]
    for candidate in _iter_unique_paths(candidates):
        loaded = load_project_config(candidate)
        if not loaded:
            continue
        payload, resolved = loaded
        data = dict(payload)
        data["_config_path"] = str(resolved)
        return data

    return {"_config_path": None}


def html_parser_from_config(config: Mapping[str, Any]) -> HTMLSetupParser:
    parse_cfg = config_table(config, "parse")
    raw_tags = parse_cfg.get("html_heading_tags", DEFAULT_HEADING_TAGS)
    if isinstance(raw_tags, str):
        raw_tags = [raw_tags]
    tags = tuple(str(tag).lower() for tag in raw_tags if str(tag).strip())
    if not tags:
        raise CliError(
            "'html_heading_tags' must name at least one heading tag.",
            category="usage",
            context={"config": config.get("_config_path")},
        )
    return HTMLSetupParser(heading_tags=tags)


def load_setup_argument(path: Path, config: Mapping[str, Any]) -> LoadedSetup:
    """Load ``path`` for a command, turning loader failures into :class:`CliError`."""

    try:
        return load_setup(path, html_parser=html_parser_from_config(config))
    except SetupLoadError as exc:
        raise error_from_load_failure(exc) from exc


__all__ = [
    "CONFIG_ENV_VAR",
    "html_parser_from_config",
    "load_cli_config",
    "load_setup_argument",
]
