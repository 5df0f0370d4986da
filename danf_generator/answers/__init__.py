"""Prompt answers: collection, key-path merging and template props."""

from danf_generator.answers.keypath import (
    AnswerKeyError,
    Branch,
    Leaf,
    MalformedKeyError,
    StructuralCollisionError,
    flatten,
    lookup,
    merge,
    merge_tree,
    split_key_path,
)
from danf_generator.answers.prompts import DEFAULT_PROMPTS, Prompter, PromptSpec
from danf_generator.answers.props import PropsError, build_props

__all__ = [
    "AnswerKeyError",
    "Branch",
    "DEFAULT_PROMPTS",
    "Leaf",
    "MalformedKeyError",
    "PromptSpec",
    "Prompter",
    "PropsError",
    "StructuralCollisionError",
    "build_props",
    "flatten",
    "lookup",
    "merge",
    "merge_tree",
    "split_key_path",
]
