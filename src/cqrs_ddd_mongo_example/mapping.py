"""
Persistent entity metadata derived from pydantic models.

``MappingContext`` describes a model type as a ``PersistentEntity``: its
properties in declaration order, the field name each one is stored under,
which properties hold nested entities and which one is the identifier.

Field names follow the same rules the converter writes documents with:

- the identifier property (``id_field``, default ``"id"``) is stored as ``_id``;
- an explicit ``field_maps[model][name]`` entry wins next;
- then the pydantic ``serialization_alias``, then ``alias``;
- otherwise the property name itself.
"""

from __future__ import annotations

import logging
import threading
import types
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from .exceptions import MappingError

logger = logging.getLogger(__name__)

ID_FIELD_NAME = "_id"

_COLLECTION_ORIGINS = (list, tuple, set, frozenset)
_UNION_ORIGINS = (Union, types.UnionType)


def _actual_type(annotation: Any) -> Any:
    """Unwrap ``Optional``, collections and mappings to the element type."""
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    args = [a for a in get_args(annotation) if a not in (type(None), Ellipsis)]
    if origin in _UNION_ORIGINS:
        return _actual_type(args[0]) if len(args) == 1 else annotation
    if origin in _COLLECTION_ORIGINS:
        return _actual_type(args[0]) if args else annotation
    if origin is dict and len(args) == 2:
        return _actual_type(args[1])
    return annotation


def _is_model_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


@dataclass(frozen=True)
class PersistentProperty:
    """A single model property and the document field it maps to."""

    name: str
    field_name: str
    annotation: Any
    actual_type: Any
    is_id: bool = False

    @property
    def is_entity(self) -> bool:
        """True when the property (or its elements) is a nested model."""
        return _is_model_type(self.actual_type)


class PersistentEntity:
    """Ordered property metadata of one model type."""

    def __init__(
        self, model_type: type[BaseModel], properties: list[PersistentProperty]
    ) -> None:
        self.type = model_type
        self._properties = tuple(properties)
        self._by_name = {p.name: p for p in self._properties}
        self._id_property = next((p for p in self._properties if p.is_id), None)

    @property
    def name(self) -> str:
        return self.type.__name__

    @property
    def properties(self) -> tuple[PersistentProperty, ...]:
        return self._properties

    @property
    def field_names(self) -> list[str]:
        return [p.field_name for p in self._properties]

    @property
    def id_property(self) -> PersistentProperty | None:
        return self._id_property

    @property
    def has_id_property(self) -> bool:
        return self._id_property is not None

    def get_property(self, name: str) -> PersistentProperty | None:
        """Look up a property by its logical name only."""
        return self._by_name.get(name)

    def iter_properties(self) -> Iterator[PersistentProperty]:
        """Iterate properties in declaration order."""
        return iter(self._properties)

    def get_identifier(self, instance: Any) -> Any:
        """Return the identifier value of ``instance`` or ``None``."""
        if self._id_property is None:
            return None
        return getattr(instance, self._id_property.name, None)

    def __repr__(self) -> str:
        return f"PersistentEntity({self.name}, fields={self.field_names})"


class MappingContext:
    """
    Builds and caches ``PersistentEntity`` metadata per model type.

    Entities are immutable once built; the cache itself is guarded by a lock
    so a context can be shared between threads.
    """

    def __init__(
        self,
        *,
        id_field: str = "id",
        field_maps: Mapping[type[BaseModel], Mapping[str, str]] | None = None,
    ) -> None:
        self._id_field = id_field
        self._field_maps = dict(field_maps or {})
        self._entities: dict[type[Any], PersistentEntity] = {}
        self._lock = threading.Lock()

    @property
    def id_field(self) -> str:
        return self._id_field

    def has_persistent_entity_for(self, model_type: Any) -> bool:
        return _is_model_type(model_type)

    def get_persistent_entity(self, model_type: Any) -> PersistentEntity:
        """Return (building on first use) the entity for ``model_type``."""
        if not self.has_persistent_entity_for(model_type):
            raise MappingError(
                f"Cannot describe {model_type!r}: not a pydantic model type"
            )
        entity = self._entities.get(model_type)
        if entity is not None:
            return entity
        with self._lock:
            entity = self._entities.get(model_type)
            if entity is None:
                entity = self._build_entity(model_type)
                self._entities[model_type] = entity
        return entity

    def _build_entity(self, model_type: type[BaseModel]) -> PersistentEntity:
        field_map = self._field_maps.get(model_type, {})
        properties = [
            self._build_property(name, info, field_map)
            for name, info in model_type.model_fields.items()
        ]
        entity = PersistentEntity(model_type, properties)
        logger.debug("Built %r", entity)
        return entity

    def _build_property(
        self, name: str, info: FieldInfo, field_map: Mapping[str, str]
    ) -> PersistentProperty:
        is_id = name == self._id_field
        if is_id:
            field_name = ID_FIELD_NAME
        elif name in field_map:
            field_name = field_map[name]
        else:
            field_name = info.serialization_alias or info.alias or name
        return PersistentProperty(
            name=name,
            field_name=field_name,
            annotation=info.annotation,
            actual_type=_actual_type(info.annotation),
            is_id=is_id,
        )
