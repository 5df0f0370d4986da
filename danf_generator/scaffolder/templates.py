"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads templates from the bundled
``danf_generator/scaffolder/templates/`` directory (or a custom one) and
either renders them with the answer props or copies them verbatim.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIX = ".j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders and copies the files a new project is built from.

    Paths given to the renderer are relative to the template directory and
    always use ``/`` separators, as Jinja2 expects.  Undefined template
    variables raise instead of rendering as empty strings.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    # -- In-memory rendering -----------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"README.md.j2"``).
            context: Variables available inside the template.  Nested
                mappings are reachable with attribute syntax
                (``{{ author.name }}``).
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    def read(self, source_path: str) -> bytes:
        """Return the raw bytes of a static file."""
        return (self.template_dir / source_path).read_bytes()

    # -- Utility -----------------------------------------------------------

    def exists(self, path: str) -> bool:
        return (self.template_dir / path).exists()

    def list_files(self, prefix: str = "") -> list[str]:
        """Return a sorted list of every file under *prefix*.

        Paths are relative to the template root.  A missing prefix yields an
        empty list; a prefix naming a single file yields that file.
        """
        search = self.template_dir / prefix if prefix else self.template_dir
        if search.is_file():
            return [prefix]
        if not search.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search.rglob("*")
            if p.is_file()
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def write_file(path: Path, content: bytes) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
