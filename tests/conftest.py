"""
pytest configuration and shared fixtures for appforge tests.

Fixtures
--------
temp_project_dir : Path
    A clean output directory for generation tests.

form_options : GenerateOptions
    Options for the ``quote-builder`` project on the form template.

generated_project : Path
    A freshly generated, un-built ``quote-builder`` project.

fake_toolchain : list[list[str]]
    Stubs ``subprocess.run`` so Node v22 and Bun look installed; the list
    collects every probed command.

missing_toolchain : None
    Stubs ``subprocess.run`` so neither Node nor Bun can be found.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from appforge.generator import generate_project
from appforge.models import GenerateOptions


@pytest.fixture
def temp_project_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory for generated projects."""
    project_dir = tmp_path / "test_projects"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def form_options(temp_project_dir: Path) -> GenerateOptions:
    """Options for a form-template project."""
    return GenerateOptions(
        name="quote-builder",
        description="Build and send quotes",
        template="form",
        output_dir=temp_project_dir,
    )


@pytest.fixture
def generated_project(form_options: GenerateOptions) -> Path:
    """Generate a project and return its path."""
    result = generate_project(form_options)
    assert result.success, result.errors
    return result.project_path


VERSIONS = {
    "node": "v22.11.0\n",
    "bun": "1.1.38\n",
}


@pytest.fixture
def fake_toolchain():
    """Pretend Node v22 and Bun are installed."""
    calls: list[list[str]] = []

    def run(args, **kwargs):
        calls.append(list(args))
        return subprocess.CompletedProcess(args, 0, stdout=VERSIONS[args[0]], stderr="")

    with patch("appforge.validator.subprocess.run", side_effect=run):
        yield calls


@pytest.fixture
def missing_toolchain():
    """Pretend neither Node nor Bun is installed."""
    with patch(
        "appforge.validator.subprocess.run",
        side_effect=FileNotFoundError("not found"),
    ):
        yield

