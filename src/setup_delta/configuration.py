"""Helpers to load project-level configuration files."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from pathlib import Path
from typing import Any

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore


_PROJECT_FILENAME = "pyproject.toml"
_TOOL_TABLE = "setup_delta"


def _as_dict(payload: ABCMapping[str, Any]) -> dict[str, Any]:
    """Recursively coerce TOML mappings into regular dictionaries."""

    result: dict[str, Any] = {}
    for key, value in payload.items():
        key_str = str(key)
        if isinstance(value, ABCMapping):
            result[key_str] = _as_dict(value)
        elif isinstance(value, list):
            result[key_str] = [
                _as_dict(item) if isinstance(item, ABCMapping) else item for item in value
            ]
        else:
            result[key_str] = value
    return result


def resolve_pyproject_path(candidate: Path) -> Path | None:
    """Return the concrete ``pyproject.toml`` path for ``candidate`` if possible.

    Directories resolve to the ``pyproject.toml`` they contain; any other
    file name is rejected.
    """

    candidate = candidate.expanduser()
    if candidate.name == _PROJECT_FILENAME:
        return candidate
    if candidate.suffix:
        return None
    return candidate / _PROJECT_FILENAME


def _load_toml_mapping(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if isinstance(data, ABCMapping):
        return _as_dict(data)
    return None


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load the `[tool.setup_delta]` section from ``pyproject.toml``."""

    pyproject_path = resolve_pyproject_path(path)
    if pyproject_path is None:
        return None

    pyproject_path = pyproject_path.expanduser().resolve(strict=False)
    pyproject_payload = _load_toml_mapping(pyproject_path)
    if not pyproject_payload:
        return None

    tool_section = pyproject_payload.get("tool")
    if not isinstance(tool_section, ABCMapping):
        return None

    project_section = tool_section.get(_TOOL_TABLE)
    if not isinstance(project_section, ABCMapping):
        return None

    return _as_dict(project_section), pyproject_path


def config_table(config: ABCMapping[str, Any] | None, name: str) -> dict[str, Any]:
    """Return the ``name`` sub-table of ``config`` or an empty mapping."""

    table = (config or {}).get(name)
    if isinstance(table, ABCMapping):
        return dict(table)
    return {}


__all__ = [
    "config_table",
    "load_project_config",
    "resolve_pyproject_path",
]
