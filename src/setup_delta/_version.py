"""Package version lookup."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

from .configuration import _load_toml_mapping

DISTRIBUTION = "setup-delta"

_CHECKOUT_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _checkout_version(pyproject: Path = _CHECKOUT_PYPROJECT) -> str:
    """Read ``[project].version`` when running from an uninstalled checkout."""

    payload = _load_toml_mapping(pyproject) or {}
    version = payload.get("project", {}).get("version")
    if not isinstance(version, str):
        raise RuntimeError(f"No [project].version found in {pyproject}")
    return version


def _load_version() -> str:
    try:
        raw = metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        raw = _checkout_version()

    try:
        release = Version(raw).release
    except InvalidVersion as exc:
        raise RuntimeError(f"{DISTRIBUTION} has an invalid version {raw!r}") from exc
    if len(release) != 3:
        raise RuntimeError(f"{DISTRIBUTION} version {raw!r} is not MAJOR.MINOR.PATCH")
    return raw


__version__ = _load_version()

__all__ = ["__version__"]
