"""Shared pytest fixtures for the danf-generator test suite.

Provides reusable fixtures for:
- Flat prompt answers and the props built from them
- Temporary output directories and generator configs
- A mocked install command
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from danf_generator.answers.props import build_props
from danf_generator.config import GeneratorConfig


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

@pytest.fixture
def flat_answers() -> dict[str, str]:
    """The six generator answers, in prompt order."""
    return {
        "app.name": "blog",
        "app.description": "A blog built with danf",
        "repository.username": "jane",
        "author.name": "Jane Doe",
        "author.email": "jane@doe.js",
        "author.url": "https://janedoe.js",
    }


@pytest.fixture
def props(flat_answers: dict[str, str]) -> dict[str, Any]:
    """Props with a fixed secret and year so rendered output is stable."""
    return build_props(flat_answers, today=date(2016, 3, 14), secret="0000-secret")


# ---------------------------------------------------------------------------
# Paths & config
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Empty directory a project is generated into."""
    project_dir = tmp_path / "danf-jane-blog"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def generator_config(tmp_project_dir: Path) -> GeneratorConfig:
    """Unattended config writing into ``tmp_project_dir`` without installing."""
    return GeneratorConfig(
        output_dir=tmp_project_dir,
        interactive=False,
        skip_install=True,
    )


# ---------------------------------------------------------------------------
# Subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch the install command runner to succeed without spawning anything."""
    with patch(
        "danf_generator.pipeline.run_command",
        new_callable=AsyncMock,
        return_value=(0, "added 42 packages", ""),
    ) as mocked:
        yield mocked
