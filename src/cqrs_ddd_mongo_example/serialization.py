"""Nested document -> dotted-key flattening for Mongo filters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .mapping import ID_FIELD_NAME


def _is_operator(key: str) -> bool:
    return key.startswith("$")


def _flatten_into(path: str, source: Any, result: dict[str, Any]) -> None:
    if not isinstance(source, Mapping):
        result[path] = source
        return
    prefix = f"{path}." if path else ""
    for key, value in source.items():
        if _is_operator(key):
            operators = result.setdefault(path, {})
            operators[key] = value
        else:
            _flatten_into(prefix + key, value, result)


def flat_map(document: Mapping[str, Any]) -> dict[str, Any]:
    """
    Collapse nested documents into dotted top-level keys.

    Operator keys (``$regex``, ``$options``, ...) are kept together as the
    operator document of their parent path::

        {"a": {"b": 1, "c": {"$regex": "^x"}}}
        -> {"a.b": 1, "a.c": {"$regex": "^x"}}

    Lists and scalars are leaves; empty nested documents vanish.
    """
    result: dict[str, Any] = {}
    _flatten_into("", document, result)
    return result


def drop_nulls(value: Any, *, include_null: bool = False) -> Any:
    """
    Remove ``None`` entries from documents, including those held in lists.

    A null ``_id`` is always removed. With ``include_null`` every other null
    entry is kept. List elements themselves are never dropped.
    """
    if isinstance(value, Mapping):
        return {
            key: drop_nulls(item, include_null=include_null)
            for key, item in value.items()
            if item is not None or (include_null and key != ID_FIELD_NAME)
        }
    if isinstance(value, list):
        return [drop_nulls(item, include_null=include_null) for item in value]
    return value
