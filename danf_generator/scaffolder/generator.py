"""Main scaffolding orchestrator.

Turns the answer props into a new Danf project: configuration, empty
client/common/server library folders, public and private resources, the
test skeleton and the project files (license, readme, package manifest,
build files).

Generation is split in three steps so that nothing is written unless the
whole project can be produced:

1. :meth:`ProjectGenerator.plan` lists the file operations.
2. :meth:`ProjectGenerator.build` renders and reads every file in memory.
3. :meth:`ProjectGenerator.generate` checks for conflicts and writes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import TemplateError

from .templates import TEMPLATE_SUFFIX, TemplateRenderer, write_file


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Raised when a project cannot be generated; nothing has been written."""


# ---------------------------------------------------------------------------
# File operations
# ---------------------------------------------------------------------------


class OperationKind(str, Enum):
    """How a destination file is produced."""
    COPY = "copy"
    RENDER = "render"
    WRITE = "write"


@dataclass
class FileOperation:
    """One file of the generated project.

    ``source`` is relative to the template directory, ``destination`` to the
    project root; both use ``/`` separators.  ``content`` is only used by
    ``WRITE`` operations.
    """

    kind: OperationKind
    destination: str
    source: str | None = None
    content: str = ""


_LIB_KEEP_FILES = [
    "lib/client/.gitkeep",
    "lib/common/.gitkeep",
    "lib/server/.gitkeep",
]

_TEST_KEEP_FILES = [
    "test/fixture/.gitkeep",
    "test/functional/.gitkeep",
]

# (kind, template, destination) for the files at the project root.
_PROJECT_FILES: list[tuple[OperationKind, str, str]] = [
    (OperationKind.COPY, "editorconfig", ".editorconfig"),
    (OperationKind.COPY, "gitattributes", ".gitattributes"),
    (OperationKind.COPY, "gitignore", ".gitignore"),
    (OperationKind.COPY, "travis.yml", ".travis.yml"),
    (OperationKind.RENDER, "LICENSE.j2", "LICENSE"),
    (OperationKind.RENDER, "README.md.j2", "README.md"),
    (OperationKind.COPY, "Makefile", "Makefile"),
    (OperationKind.RENDER, "package.json.j2", "package.json"),
    (OperationKind.COPY, "app-dev.js", "app-dev.js"),
    (OperationKind.RENDER, "app-prod.js.j2", "app-prod.js"),
    (OperationKind.COPY, "danf.js", "danf.js"),
    (OperationKind.COPY, "gulpfile.js", "gulpfile.js"),
]


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Generates a Danf project from the answer props.

    Args:
        props: Nested template context, as returned by ``build_props``.
        renderer: Template renderer; one over the bundled templates when
            omitted.
    """

    def __init__(self, props: dict[str, Any], renderer: TemplateRenderer | None = None) -> None:
        self.props = props
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def plan(self) -> list[FileOperation]:
        """Return every file operation, in writing order."""
        operations: list[FileOperation] = []
        operations.extend(self._plan_config())
        operations.extend(self._plan_lib())
        operations.extend(self._plan_resource())
        operations.extend(self._plan_test())
        operations.extend(self._plan_project())
        return operations

    def conflicts(
        self, root: str | Path, operations: list[FileOperation] | None = None
    ) -> list[Path]:
        """Return the planned destinations that already exist under *root*."""
        base = Path(root)
        ops = self.plan() if operations is None else operations
        return [base / op.destination for op in ops if (base / op.destination).exists()]

    def build(self, operations: list[FileOperation] | None = None) -> list[tuple[str, bytes]]:
        """Produce the content of every planned file in memory.

        Returns:
            ``(destination, content)`` pairs in writing order.

        Raises:
            ScaffoldError: A template is missing or fails to render.
        """
        ops = self.plan() if operations is None else operations
        files: list[tuple[str, bytes]] = []
        for op in ops:
            files.append((op.destination, self._materialise(op)))
        return files

    async def generate(self, root: str | Path, *, force: bool = False) -> list[Path]:
        """Generate the project under *root* and return the written paths.

        Raises:
            ScaffoldError: Some destination files already exist and *force*
                is off, or a template cannot be produced.  In both cases no
                file has been written.
        """
        project_root = Path(root)
        operations = self.plan()

        if not force:
            existing = self.conflicts(project_root, operations)
            if existing:
                listed = ", ".join(str(p.relative_to(project_root)) for p in existing)
                raise ScaffoldError(
                    f"{len(existing)} file(s) already exist in {project_root}: {listed}"
                )

        files = self.build(operations)

        written: list[Path] = []
        for destination, content in files:
            out = project_root / destination
            await asyncio.to_thread(write_file, out, content)
            written.append(out)
        return written

    # -- Writing steps -----------------------------------------------------

    def _plan_config(self) -> list[FileOperation]:
        return self._copy_tree("config")

    def _plan_lib(self) -> list[FileOperation]:
        return [FileOperation(OperationKind.WRITE, path) for path in _LIB_KEEP_FILES]

    def _plan_resource(self) -> list[FileOperation]:
        return [
            *self._copy_tree("resource/public"),
            *self._render_tree("resource/private/view"),
        ]

    def _plan_test(self) -> list[FileOperation]:
        return [
            *self._copy_tree("test"),
            *(FileOperation(OperationKind.WRITE, path) for path in _TEST_KEEP_FILES),
        ]

    def _plan_project(self) -> list[FileOperation]:
        return [
            FileOperation(kind, destination, source=source)
            for kind, source, destination in _PROJECT_FILES
        ]

    # -- Helpers -----------------------------------------------------------

    def _copy_tree(self, prefix: str) -> list[FileOperation]:
        """Copy every file under *prefix* to the same relative location."""
        return [
            FileOperation(OperationKind.COPY, source, source=source)
            for source in self.renderer.list_files(prefix)
        ]

    def _render_tree(self, prefix: str) -> list[FileOperation]:
        """Render every file under *prefix*, dropping a ``.j2`` suffix."""
        return [
            FileOperation(OperationKind.RENDER, _strip_template_suffix(source), source=source)
            for source in self.renderer.list_files(prefix)
        ]

    def _materialise(self, op: FileOperation) -> bytes:
        if op.kind is OperationKind.WRITE:
            return op.content.encode("utf-8")

        assert op.source is not None
        if not self.renderer.exists(op.source):
            raise ScaffoldError(f"Template not found: {op.source}")
        if op.kind is OperationKind.COPY:
            return self.renderer.read(op.source)

        try:
            return self.renderer.render(op.source, self.props).encode("utf-8")
        except TemplateError as exc:
            raise ScaffoldError(f"Failed to render {op.source}: {exc}") from exc


def _strip_template_suffix(path: str) -> str:
    return path[: -len(TEMPLATE_SUFFIX)] if path.endswith(TEMPLATE_SUFFIX) else path
