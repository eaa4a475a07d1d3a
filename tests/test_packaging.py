"""Tests for the declared package dependencies."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _project():
    with PYPROJECT.open("rb") as f:
        return tomllib.load(f)["project"]


def test_test_client_dependency_is_test_only():
    project = _project()
    runtime = [dep.split(">")[0].split("[")[0] for dep in project["dependencies"]]
    test_extra = [dep.split(">")[0] for dep in project["optional-dependencies"]["test"]]
    assert "httpx" not in runtime
    assert "httpx" in test_extra
