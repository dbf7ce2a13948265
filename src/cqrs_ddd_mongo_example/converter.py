"""Pydantic probe -> BSON-ready document conversion (field names, Decimal128)."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
import types
from typing import Any, Protocol, Union, get_args, get_origin, runtime_checkable
from uuid import UUID

from bson.decimal128 import Decimal128
from pydantic import BaseModel

from .exceptions import ConversionError, ExampleMappingError
from .mapping import MappingContext

_COLLECTION_ORIGINS = (list, tuple, set, frozenset)
_UNION_ORIGINS = (Union, types.UnionType)


@runtime_checkable
class MongoConverter(Protocol):
    """Turns a value into a nested document keyed by field names."""

    @property
    def mapping_context(self) -> MappingContext: ...

    def convert_to_mongo_type(self, value: Any) -> Any: ...


class PydanticMongoConverter:
    """
    Writes pydantic models as Mongo documents.

    Uses ``model_dump(mode='python')`` so field serializers and model config
    apply, then re-keys the dump through the ``MappingContext``: keys become
    the stored field names (identifier -> ``_id``, aliases, field maps) in
    declaration order. ``None`` values are written as-is; dropping them is
    the caller's concern. Decimal -> Decimal128, UUID -> str, Enum -> value.
    """

    def __init__(self, mapping_context: MappingContext | None = None) -> None:
        self._mapping_context = mapping_context or MappingContext()

    @property
    def mapping_context(self) -> MappingContext:
        return self._mapping_context

    def convert_to_mongo_type(self, value: Any) -> Any:
        try:
            if isinstance(value, BaseModel):
                return self._write_entity(type(value), value.model_dump(mode="python"))
            return self._serialize_value(value)
        except ExampleMappingError:
            raise
        except Exception as e:
            raise ConversionError(
                f"Cannot convert {type(value).__name__}: {e}"
            ) from e

    def _write_entity(
        self, model_type: type[BaseModel], data: dict[str, Any]
    ) -> dict[str, Any]:
        entity = self._mapping_context.get_persistent_entity(model_type)
        doc: dict[str, Any] = {}
        for prop in entity.iter_properties():
            if prop.name not in data:
                continue
            value = data[prop.name]
            if prop.is_entity:
                value = self._write_nested(prop.annotation, prop.actual_type, value)
            doc[prop.field_name] = self._serialize_value(value)
        return doc

    def _write_nested(
        self, annotation: Any, model_type: type[BaseModel], value: Any
    ) -> Any:
        """Re-key dumped nested models, following the declared container shape."""
        if value is None:
            return None
        origin = get_origin(annotation)
        args = [a for a in get_args(annotation) if a not in (type(None), Ellipsis)]
        if origin in _UNION_ORIGINS:
            return self._write_nested(args[0], model_type, value)
        if origin is dict and isinstance(value, dict):
            return {
                k: self._write_nested(args[1], model_type, v) for k, v in value.items()
            }
        if origin in _COLLECTION_ORIGINS and isinstance(value, list | tuple | set):
            return [self._write_nested(args[0], model_type, v) for v in value]
        if isinstance(value, dict):
            return self._write_entity(model_type, value)
        return value

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, Enum):
            return self._serialize_value(value.value)
        if isinstance(value, Decimal):
            return Decimal128(str(value))
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, Mapping):
            return {str(k): self._serialize_value(v) for k, v in value.items()}
        if isinstance(value, list | tuple | set | frozenset):
            return [self._serialize_value(v) for v in value]
        return value
