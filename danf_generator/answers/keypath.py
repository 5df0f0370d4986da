"""Key-path merging for prompt answers.

Prompt answers arrive as a flat mapping whose keys are dotted key-paths
(``"author.name"``).  Templates want a nested context (``author.name`` as
attribute access), so the answers are merged into a tree before rendering.

The tree is built from two node types, :class:`Leaf` and :class:`Branch`.
A key-path that would have to descend *through* a leaf, or replace a whole
branch with a leaf, is reported as a :class:`StructuralCollisionError`
regardless of the order in which the keys are seen.

Quick usage::

    from danf_generator.answers.keypath import merge

    merge({"author.name": "Jane", "app.name": "MyApp"})
    # {"author": {"name": "Jane"}, "app": {"name": "MyApp"}}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

DEFAULT_SEPARATOR = "."


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AnswerKeyError(ValueError):
    """Base class for key-path errors raised while merging answers."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(message)


class MalformedKeyError(AnswerKeyError):
    """Raised when a key-path contains an empty segment."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"Malformed key-path {key!r}: empty segment")


class StructuralCollisionError(AnswerKeyError):
    """Raised when one key-path is a strict prefix of another.

    Attributes:
        key: The key-path being merged when the collision was detected.
        conflicting_key: The previously merged key-path it collides with.
    """

    def __init__(self, key: str, conflicting_key: str) -> None:
        self.conflicting_key = conflicting_key
        super().__init__(
            key,
            f"Key-path {key!r} collides with {conflicting_key!r}: "
            "a value cannot be both a leaf and a branch",
        )


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass
class Leaf:
    """A terminal value, remembering the key-path that wrote it."""

    value: Any
    key: str


@dataclass
class Branch:
    """An interior node mapping one path segment to a child node."""

    children: dict[str, Node] = field(default_factory=dict)
    key: str = ""

    def child(self, segment: str) -> Node | None:
        return self.children.get(segment)

    def to_dict(self) -> dict[str, Any]:
        """Convert the tree to plain nested dictionaries."""
        return {
            segment: node.to_dict() if isinstance(node, Branch) else node.value
            for segment, node in self.children.items()
        }


Node = Union[Leaf, Branch]


# ---------------------------------------------------------------------------
# Key-path helpers
# ---------------------------------------------------------------------------


def split_key_path(
    key: str,
    sep: str = DEFAULT_SEPARATOR,
    *,
    allow_empty_segments: bool = False,
) -> tuple[str, ...]:
    """Split *key* into its path segments.

    A key without a separator yields a single segment.  Empty segments
    (``""``, ``"a..b"``, ``".a"``, ``"a."``) raise :class:`MalformedKeyError`
    unless *allow_empty_segments* is set, in which case ``""`` is kept as an
    ordinary segment.
    """
    if not sep:
        raise ValueError("sep must not be empty")
    parts = tuple(key.split(sep))
    if not allow_empty_segments and any(not part for part in parts):
        raise MalformedKeyError(key)
    return parts


def _iter_items(flat: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> Iterable[tuple[str, Any]]:
    if isinstance(flat, Mapping):
        return flat.items()
    return flat


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def merge_tree(
    flat: Mapping[str, Any] | Iterable[tuple[str, Any]],
    sep: str = DEFAULT_SEPARATOR,
    *,
    allow_empty_segments: bool = False,
) -> Branch:
    """Merge flat key-path answers into a :class:`Branch` tree.

    Entries are processed in the iteration order of *flat*, which also fixes
    the insertion order of the resulting mappings.  Writing the same full
    key-path twice (only possible when *flat* is a sequence of pairs) keeps
    the last value.

    Raises:
        MalformedKeyError: A key-path has an empty segment.
        StructuralCollisionError: A key-path is a strict prefix of another.
    """
    root = Branch()
    for key, value in _iter_items(flat):
        parts = split_key_path(key, sep, allow_empty_segments=allow_empty_segments)
        current = root
        for depth, part in enumerate(parts[:-1]):
            node = current.child(part)
            if node is None:
                node = Branch(key=sep.join(parts[: depth + 1]))
                current.children[part] = node
            elif isinstance(node, Leaf):
                raise StructuralCollisionError(key, node.key)
            current = node

        terminal = parts[-1]
        existing = current.child(terminal)
        if isinstance(existing, Branch):
            raise StructuralCollisionError(key, _first_leaf_key(existing))
        current.children[terminal] = Leaf(value=value, key=key)
    return root


def merge(
    flat: Mapping[str, Any] | Iterable[tuple[str, Any]],
    sep: str = DEFAULT_SEPARATOR,
    *,
    allow_empty_segments: bool = False,
) -> dict[str, Any]:
    """Merge flat key-path answers into plain nested dictionaries.

    Either a complete tree is returned or an :class:`AnswerKeyError` is
    raised; *flat* is never modified.
    """
    return merge_tree(flat, sep, allow_empty_segments=allow_empty_segments).to_dict()


def _first_leaf_key(branch: Branch) -> str:
    for node in branch.children.values():
        if isinstance(node, Leaf):
            return node.key
        return _first_leaf_key(node)
    return branch.key


# ---------------------------------------------------------------------------
# Tree access
# ---------------------------------------------------------------------------


def lookup(tree: Mapping[str, Any], key: str, sep: str = DEFAULT_SEPARATOR) -> Any:
    """Walk *tree* along *key* and return the value found there.

    Raises:
        KeyError: Some segment of *key* is absent, or the walk reaches a
            non-mapping value before the last segment.
    """
    current: Any = tree
    for part in split_key_path(key, sep, allow_empty_segments=True):
        if not isinstance(current, Mapping) or part not in current:
            raise KeyError(key)
        current = current[part]
    return current


def flatten(tree: Mapping[str, Any], sep: str = DEFAULT_SEPARATOR) -> dict[str, Any]:
    """Flatten nested mappings back into key-path form.

    Only leaves produce entries, so an empty nested mapping disappears.
    """
    flat: dict[str, Any] = {}

    def _walk(node: Mapping[str, Any], prefix: str | None) -> None:
        for segment, value in node.items():
            path = segment if prefix is None else f"{prefix}{sep}{segment}"
            if isinstance(value, Mapping):
                _walk(value, path)
            else:
                flat[path] = value

    _walk(tree, None)
    return flat
