"""Template context ("props") built from the prompt answers.

The flat answers are merged into a nested tree and then enriched with the
values every Danf project needs but nobody is asked for: the repository
name, the module id and name, a random application secret and the current
year.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from datetime import date
from typing import Any

from danf_generator.answers.keypath import lookup, merge

REPOSITORY_PREFIX = "danf-"


class PropsError(ValueError):
    """Raised when an answer required to derive the props is missing."""


def build_props(
    flat: Mapping[str, Any],
    *,
    today: date | None = None,
    secret: str | None = None,
) -> dict[str, Any]:
    """Merge *flat* answers and add the derived template values.

    Args:
        flat: Prompt answers keyed by dotted key-path.
        today: Date used for ``date.year``.  Defaults to today.
        secret: Value for ``app.secret``.  A random UUID4 when omitted.

    Returns:
        The nested template context.

    Raises:
        AnswerKeyError: The answers cannot be merged (see ``keypath``).
        PropsError: ``app.name`` or ``repository.username`` is missing, or
            one of the naming answers is a group rather than a value.
    """
    props = merge(flat)

    app = props.setdefault("app", {})
    if not isinstance(app, dict) or "name" not in app:
        raise PropsError("Missing answer: app.name")
    _require_value(app, "app.name")

    repository = props.setdefault("repository", {})
    if not isinstance(repository, dict):
        raise PropsError("Answer 'repository' must be a group of answers, not a value")
    if "name" not in repository:
        if "username" not in repository:
            raise PropsError("Missing answer: repository.username")
        _require_value(repository, "repository.username")
        repository["name"] = repository_name(repository["username"], app["name"])
    _require_value(repository, "repository.name")

    module_id = module_id_from_repository(repository["name"])
    props["module"] = {
        "id": module_id,
        "name": module_name_from_id(module_id),
    }

    app["secret"] = secret if secret is not None else str(uuid.uuid4())
    props["date"] = {"year": (today or date.today()).year}

    return props


def _require_value(group: dict[str, Any], key: str) -> None:
    leaf = key.rsplit(".", 1)[-1]
    if isinstance(group[leaf], dict):
        raise PropsError(f"Answer '{key}' must be a value, not a group of answers")


def repository_name(username: str, app_name: str) -> str:
    """``danf-<username>-<app name>``."""
    return f"{REPOSITORY_PREFIX}{username}-{app_name}"


def module_id_from_repository(name: str) -> str:
    """Strip the leading ``danf-`` from a repository name."""
    return re.sub(r"^danf-", "", name)


def module_name_from_id(module_id: str) -> str:
    """Camel-case a module id: ``john-my-app`` -> ``johnMyApp``.

    Every hyphen followed by a character other than ``.`` is removed and
    the character upper-cased.
    """
    return re.sub(r"-([^.])", lambda match: match.group(1).upper(), module_id)


def summary(props: Mapping[str, Any]) -> dict[str, str]:
    """Label -> value pairs describing a props tree, for the end-of-run table."""
    labels = {
        "Application": "app.name",
        "Module": "module.name",
        "Repository": "repository.name",
        "Author": "author.name",
    }
    rows: dict[str, str] = {}
    for label, key in labels.items():
        try:
            rows[label] = str(lookup(props, key))
        except KeyError:
            continue
    return rows
