"""Integration tests for a complete generator run.

These tests run the real prompter (unattended), key-path merge, renderer and
scaffolder against a temporary directory and verify that the generated
project is complete and well-formed.

No external services (npm, network) are required.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from danf_generator.config import GeneratorConfig
from danf_generator.pipeline import Pipeline


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _generate(output_dir: Path, preset: dict[str, str]) -> dict[str, Any]:
    config = GeneratorConfig(output_dir=output_dir, interactive=False, skip_install=True)
    return await Pipeline(config).run(preset)


EXPECTED_FILES = [
    ".editorconfig",
    ".gitattributes",
    ".gitignore",
    ".travis.yml",
    ".yo-rc.json",
    "LICENSE",
    "Makefile",
    "README.md",
    "app-dev.js",
    "app-prod.js",
    "danf.js",
    "gulpfile.js",
    "package.json",
    "config/common/config/parameters.js",
    "config/server/config/events.js",
    "lib/client/.gitkeep",
    "lib/common/.gitkeep",
    "lib/server/.gitkeep",
    "resource/public/css/main.css",
    "resource/private/view/index.jade",
    "resource/private/view/layout.jade",
    "test/unit/example.js",
    "test/fixture/.gitkeep",
    "test/functional/.gitkeep",
]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestScaffoldValidation:
    """Test that a full run produces a valid project."""

    async def test_creates_files(self, tmp_path: Path):
        state = await _generate(tmp_path, {"app.name": "blog", "repository.username": "jane"})
        assert state["success"] is True
        for rel in EXPECTED_FILES:
            assert (tmp_path / rel).is_file(), rel

    async def test_no_template_files_left(self, tmp_path: Path):
        await _generate(tmp_path, {})
        leftovers = [p for p in tmp_path.rglob("*.j2")]
        assert leftovers == []

    async def test_travis_yaml_is_valid(self, tmp_path: Path):
        await _generate(tmp_path, {})
        travis = yaml.safe_load((tmp_path / ".travis.yml").read_text(encoding="utf-8"))
        assert travis["language"] == "node_js"

    async def test_package_json(self, tmp_path: Path):
        await _generate(
            tmp_path,
            {
                "app.name": "blog",
                "app.description": 'A "quoted" blog',
                "repository.username": "jane",
                "author.name": "Jane Doe",
            },
        )
        manifest = json.loads((tmp_path / "package.json").read_text(encoding="utf-8"))
        assert manifest["name"] == "danf-jane-blog"
        assert manifest["description"] == 'A "quoted" blog'
        assert manifest["author"]["name"] == "Jane Doe"
        assert manifest["repository"]["url"] == "https://github.com/jane/danf-jane-blog.git"

    async def test_answers_rendered_into_views(self, tmp_path: Path):
        await _generate(tmp_path, {"app.name": "blog", "author.url": "https://jane.js"})
        index = (tmp_path / "resource" / "private" / "view" / "index.jade").read_text(encoding="utf-8")
        assert "h1 blog" in index
        assert 'a(href="https://jane.js")' in index

    async def test_explicit_repository_name(self, tmp_path: Path):
        state = await _generate(
            tmp_path,
            {"author.name": "Jane", "app.name": "MyApp", "repository.name": "my-app"},
        )
        assert state["phase4"] == {"module": "myApp", "repository": "my-app"}
        readme = (tmp_path / "README.md").read_text(encoding="utf-8")
        assert "npm install my-app" in readme

    async def test_state_file(self, tmp_path: Path):
        await _generate(tmp_path, {"app.name": "blog"})
        state = json.loads((tmp_path / ".yo-rc.json").read_text(encoding="utf-8"))
        answers = state["generator-danf"]["answers"]
        assert answers["app.name"] == "blog"
        assert answers["author.name"] == "John Doe"

    async def test_second_run_refused(self, tmp_path: Path):
        await _generate(tmp_path, {})
        before = (tmp_path / "app-prod.js").read_text(encoding="utf-8")
        state = await _generate(tmp_path, {})
        assert state["success"] is False
        assert state["phases_failed"] == [2]
        assert (tmp_path / "app-prod.js").read_text(encoding="utf-8") == before

    async def test_collision_writes_nothing(self, tmp_path: Path):
        state = await _generate(tmp_path, {"author.name.first": "Jane"})
        assert state["success"] is False
        assert "author.name" in state["error"]
        assert list(tmp_path.iterdir()) == []
