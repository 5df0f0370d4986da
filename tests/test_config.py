"""Unit tests for GeneratorConfig (danf_generator.config).

Tests cover:
- Defaults and derived state path
- Validation of the install settings
- from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from danf_generator.config import STATE_FILENAME, GeneratorConfig


class TestDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = GeneratorConfig()
        assert config.output_dir == Path(".")
        assert config.template_dir is None
        assert config.skip_install is False
        assert config.force is False
        assert config.interactive is True
        assert config.install_command == "npm install"
        assert config.install_timeout == 600

    @pytest.mark.unit
    def test_state_path(self, tmp_path: Path):
        config = GeneratorConfig(output_dir=tmp_path)
        assert config.state_path == tmp_path / STATE_FILENAME
        assert config.state_path.name == ".yo-rc.json"

    @pytest.mark.unit
    def test_output_dir_coerced_to_path(self):
        assert GeneratorConfig(output_dir="out").output_dir == Path("out")


class TestValidation:
    @pytest.mark.unit
    def test_install_timeout_below_minimum_rejected(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(install_timeout=5)

    @pytest.mark.unit
    def test_empty_install_command_rejected(self):
        with pytest.raises(ValidationError):
            GeneratorConfig(install_command="")


class TestFromEnv:
    @pytest.mark.unit
    def test_empty_env_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert GeneratorConfig.from_env() == GeneratorConfig()

    @pytest.mark.unit
    def test_reads_every_variable(self, tmp_path: Path):
        env = {
            "DANF_OUTPUT_DIR": str(tmp_path),
            "DANF_TEMPLATE_DIR": str(tmp_path / "tpl"),
            "DANF_SKIP_INSTALL": "true",
            "DANF_FORCE": "1",
            "DANF_INSTALL_COMMAND": "yarn install",
            "DANF_INSTALL_TIMEOUT": "60",
        }
        with patch.dict(os.environ, env, clear=True):
            config = GeneratorConfig.from_env()
        assert config.output_dir == tmp_path
        assert config.template_dir == tmp_path / "tpl"
        assert config.skip_install is True
        assert config.force is True
        assert config.install_command == "yarn install"
        assert config.install_timeout == 60

    @pytest.mark.unit
    def test_falsy_flag(self):
        with patch.dict(os.environ, {"DANF_SKIP_INSTALL": "no"}, clear=True):
            assert GeneratorConfig.from_env().skip_install is False

    @pytest.mark.unit
    def test_invalid_timeout(self):
        with patch.dict(os.environ, {"DANF_INSTALL_TIMEOUT": "1"}, clear=True):
            with pytest.raises(ValidationError):
                GeneratorConfig.from_env()
