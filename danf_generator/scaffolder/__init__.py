"""Danf project scaffolder -- writes a new project from the answer props.

Quick usage::

    from danf_generator.answers import build_props
    from danf_generator.scaffolder import ProjectGenerator

    props = build_props({"app.name": "blog", "repository.username": "jane", ...})
    generator = ProjectGenerator(props)
    written = await generator.generate("/tmp/danf-jane-blog")
"""

from danf_generator.scaffolder.generator import (
    FileOperation,
    OperationKind,
    ProjectGenerator,
    ScaffoldError,
)
from danf_generator.scaffolder.templates import TemplateRenderer

__all__ = [
    "FileOperation",
    "OperationKind",
    "ProjectGenerator",
    "ScaffoldError",
    "TemplateRenderer",
]
