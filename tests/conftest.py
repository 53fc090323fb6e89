from __future__ import annotations

import logging
import sys
from pathlib import Path
from textwrap import dedent
from typing import Callable, Iterator

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers installed by ``setup_logging`` so tests stay isolated."""

    logger = logging.getLogger("setup_delta")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no configuration override."""

    monkeypatch.delenv("SETUP_DELTA_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def setup_file_factory(tmp_path: Path) -> Callable[[str, str], Path]:
    def factory(name: str, contents: str) -> Path:
        target = tmp_path / name
        target.write_text(dedent(contents).lstrip(), encoding="utf8")
        return target

    return factory
