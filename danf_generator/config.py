"""Danf generator configuration.

Typed configuration for a generator run.  Settings use Pydantic v2 models so
they are validated at construction time and can be built from environment
variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

STATE_FILENAME = ".yo-rc.json"

_TRUTHY = {"1", "true", "yes", "on"}


class GeneratorConfig(BaseModel):
    """Settings for one generator run.

    Instances are created once by the CLI entry point (or by tests) and
    passed to the ``Pipeline``.
    """

    output_dir: Path = Field(default=Path("."), description="Directory the project is generated in")
    template_dir: Path | None = Field(
        default=None, description="Template root; the bundled templates when unset"
    )
    skip_install: bool = Field(default=False, description="Do not run the install command")
    force: bool = Field(default=False, description="Overwrite files that already exist")
    interactive: bool = Field(default=True, description="Ask the questions on the console")
    install_command: str = Field(default="npm install", min_length=1)
    install_timeout: int = Field(default=600, ge=10, description="Install timeout in seconds")

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def state_path(self) -> Path:
        """Generator state file written at the root of the new project."""
        return self.output_dir / STATE_FILENAME

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            DANF_OUTPUT_DIR, DANF_TEMPLATE_DIR, DANF_SKIP_INSTALL, DANF_FORCE,
            DANF_INSTALL_COMMAND, DANF_INSTALL_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DANF_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["DANF_OUTPUT_DIR"])
        if os.environ.get("DANF_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["DANF_TEMPLATE_DIR"])
        if os.environ.get("DANF_SKIP_INSTALL"):
            kwargs["skip_install"] = os.environ["DANF_SKIP_INSTALL"].strip().lower() in _TRUTHY
        if os.environ.get("DANF_FORCE"):
            kwargs["force"] = os.environ["DANF_FORCE"].strip().lower() in _TRUTHY
        if os.environ.get("DANF_INSTALL_COMMAND"):
            kwargs["install_command"] = os.environ["DANF_INSTALL_COMMAND"]
        if os.environ.get("DANF_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["DANF_INSTALL_TIMEOUT"])
        return cls(**kwargs)
