"""Tests for the package version metadata."""

from importlib import metadata
from pathlib import Path

import pytest
from packaging.version import Version

import setup_delta
from setup_delta import _version as version_module

from tests.conftest import write_pyproject


def _not_installed(name):
    raise metadata.PackageNotFoundError(name)


def test_version_is_semver_patch():
    version = Version(setup_delta.__version__)

    assert len(version.release) == 3, (
        "setup_delta.__version__ must contain exactly three release components"
    )


def test_version_falls_back_to_checkout_pyproject(monkeypatch):
    monkeypatch.setattr(version_module.metadata, "version", _not_installed)

    assert version_module._load_version() == "0.1.0"


def test_checkout_version_reads_project_table(tmp_path: Path):
    pyproject = write_pyproject(tmp_path, '[project]\nname = "setup-delta"\nversion = "2.3.4"\n')

    assert version_module._checkout_version(pyproject) == "2.3.4"


def test_checkout_without_version_is_rejected(tmp_path: Path):
    pyproject = write_pyproject(tmp_path, '[project]\nname = "setup-delta"\n')

    with pytest.raises(RuntimeError):
        version_module._checkout_version(pyproject)


@pytest.mark.parametrize("raw", ["1.2", "not-a-version"])
def test_invalid_versions_are_rejected(monkeypatch, raw):
    monkeypatch.setattr(version_module.metadata, "version", lambda name: raw)

    with pytest.raises(RuntimeError):
        version_module._load_version()
