"""
Query-by-example exception hierarchy.

All exceptions inherit from ``ExampleMappingError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class ExampleMappingError(Exception):
    """Base exception for all query-by-example errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class MappingError(ExampleMappingError):
    """Raised when a type cannot be described as a persistent entity."""


class ConversionError(ExampleMappingError):
    """Raised when a probe cannot be converted to a Mongo document."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONVERSION_ERROR",
            "message": str(self),
        }


class PathResolutionError(ExampleMappingError):
    """
    A document path segment matches no property of the current entity.

    Neither a property with that logical name nor one serialized under that
    field name exists. Carries fuzzy-matched suggestions.

    Example error message::

        Cannot resolve 'adress' of path 'adress.city' on 'Person'.
        Did you mean: address?
    """

    def __init__(
        self,
        path: str,
        segment: str,
        entity_name: str,
        available_fields: list[str],
        root_entity_name: str | None = None,
    ) -> None:
        self.path = path
        self.segment = segment
        self.entity_name = entity_name
        self.available_fields = available_fields
        self.root_entity_name = root_entity_name or entity_name
        self.suggestions = get_close_matches(segment, available_fields, n=3, cutoff=0.6)

        message = f"Cannot resolve '{segment}' of path '{path}' on '{entity_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PATH_RESOLUTION_ERROR",
            "path": self.path,
            "segment": self.segment,
            "entity": self.entity_name,
            "root_entity": self.root_entity_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }
