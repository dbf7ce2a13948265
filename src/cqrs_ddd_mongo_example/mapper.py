"""
Example -> MongoDB filter document compilation.

``MongoExampleMapper`` converts the probe of an :class:`Example` into a
document, strips an unset identifier, then walks the document depth-first.
Each field picks up the matching rules registered for its path: a
``PropertySpecifier`` may transform (or veto) the value and override how
strings are matched. Strings become literals or ``$regex`` operator
documents; nested documents are descended into.

Specifiers are keyed by *logical* property paths while the document is
keyed by *field* names. A field whose raw dotted path has no specifier is
translated back to its logical path through the entity metadata before the
lookup.

Usage::

    example = (
        Example.of(Person(name="Alice", address=Address(city="NYC")))
        .with_property_specifier("address.city", string_matcher=StringMatcher.STARTING)
    )
    MongoExampleMapper().get_mapped_example(example)
    # {"name": "Alice", "address.city": {"$regex": "^NYC"}}
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from .converter import MongoConverter, PydanticMongoConverter
from .example import Example, NullHandling, StringMatcher
from .exceptions import ConversionError, PathResolutionError
from .mapping import ID_FIELD_NAME, MappingContext, PersistentEntity, PersistentProperty
from .regex import MongoRegexCreator
from .serialization import drop_nulls, flat_map

logger = logging.getLogger(__name__)


class MongoExampleMapper:
    """Compiles query-by-example probes into MongoDB filter documents."""

    def __init__(
        self,
        converter: MongoConverter | None = None,
        *,
        regex_creator: MongoRegexCreator | None = None,
    ) -> None:
        self._converter = converter or PydanticMongoConverter()
        self._regex_creator = regex_creator or MongoRegexCreator()

    @property
    def mapping_context(self) -> MappingContext:
        return self._converter.mapping_context

    def get_mapped_example(
        self,
        example: Example,
        entity: PersistentEntity | None = None,
    ) -> dict[str, Any]:
        """
        Build the filter document for ``example``.

        Args:
            example: Probe plus matching configuration.
            entity: Metadata to resolve paths against. Derived from the
                probe's type when omitted.

        Raises:
            PathResolutionError: A document path cannot be mapped back to
                a property while looking up specifiers.
            ConversionError: The probe cannot be converted.
        """
        if entity is None:
            entity = self.mapping_context.get_persistent_entity(example.probe_type)

        reference = self._converter.convert_to_mongo_type(example.probe)
        if not isinstance(reference, dict):
            raise ConversionError(
                f"Probe {type(example.probe).__name__} did not convert to a document"
            )

        id_property = entity.id_property
        if id_property is not None and entity.get_identifier(example.probe) is None:
            reference.pop(id_property.field_name, None)

        self._apply_property_specs("", reference, example, entity)

        if example.null_handling == NullHandling.INCLUDE_NULL:
            return drop_nulls(reference, include_null=True)
        return drop_nulls(flat_map(reference))

    def resolve_property_path(self, path: str, entity: PersistentEntity) -> str:
        """
        Translate a dotted field-name path into a dotted property-name path.

        Each segment is looked up by property name first, then by field
        name in declaration order (first match wins). Resolution stops after
        the first segment that is not a nested entity; remaining segments
        belong to that property's value.
        """
        current = entity
        resolved: list[str] = []
        for segment in path.split("."):
            prop = current.get_property(segment)
            if prop is None:
                prop = self._find_by_field_name(current, segment)
            if prop is None:
                raise PathResolutionError(
                    path=path,
                    segment=segment,
                    entity_name=current.name,
                    available_fields=current.field_names,
                    root_entity_name=entity.name,
                )
            resolved.append(prop.name)
            if not (
                prop.is_entity
                and self.mapping_context.has_persistent_entity_for(prop.actual_type)
            ):
                break
            current = self.mapping_context.get_persistent_entity(prop.actual_type)

        mapped = ".".join(resolved)
        logger.debug("Resolved document path %s -> %s on %s", path, mapped, entity.name)
        return mapped

    @staticmethod
    def _find_by_field_name(
        entity: PersistentEntity, field_name: str
    ) -> PersistentProperty | None:
        for prop in entity.iter_properties():
            if prop.field_name == field_name:
                return prop
        return None

    def _apply_property_specs(
        self,
        path: str,
        document: dict[str, Any],
        example: Example,
        entity: PersistentEntity,
    ) -> None:
        # Iterate over a snapshot; entries are replaced or removed in place.
        for key, value in list(document.items()):
            if key == ID_FIELD_NAME and value is None:
                del document[key]
                continue

            property_path = f"{path}.{key}" if path else key
            string_matcher = example.string_matcher
            ignore_case = example.ignore_case
            specifier = None

            if example.has_property_specifiers:
                mapped_path = (
                    property_path
                    if example.has_property_specifier(property_path)
                    else self.resolve_property_path(property_path, entity)
                )
                specifier = example.get_property_specifier(mapped_path)
                if specifier is not None:
                    logger.debug(
                        "Applying specifier %s to %s", mapped_path, property_path
                    )
                    if specifier.string_matcher is not None:
                        string_matcher = specifier.string_matcher
                    if specifier.ignore_case is not None:
                        ignore_case = specifier.ignore_case

            if specifier is not None:
                value = specifier.transform_value(value)
                if value is None:
                    logger.debug("Transformer removed %s from example", property_path)
                    del document[key]
                    continue
                document[key] = value

            if isinstance(value, str):
                document[key] = self._apply_string_matcher(
                    value, string_matcher, ignore_case
                )
            elif isinstance(value, dict):
                self._apply_property_specs(property_path, value, example, entity)

    def _apply_string_matcher(
        self, value: str, string_matcher: StringMatcher, ignore_case: bool
    ) -> str | dict[str, str]:
        if string_matcher == StringMatcher.DEFAULT:
            if not ignore_case:
                return value
            operator = {"$regex": self._regex_creator.quote(value)}
        else:
            pattern = self._regex_creator.to_regular_expression(value, string_matcher)
            operator = {"$regex": pattern}
        if ignore_case:
            operator["$options"] = "i"
        return operator


@lru_cache(maxsize=1)
def _default_mapper() -> MongoExampleMapper:
    return MongoExampleMapper()


def get_mapped_example(example: Example) -> dict[str, Any]:
    """Compile ``example`` with a shared default mapper."""
    return _default_mapper().get_mapped_example(example)
