"""Query-by-example for MongoDB.

Compiles a partially populated pydantic probe plus per-path matching rules
into a MongoDB filter document.
"""

from __future__ import annotations

from .converter import MongoConverter, PydanticMongoConverter
from .example import Example, NullHandling, PropertySpecifier, StringMatcher
from .exceptions import (
    ConversionError,
    ExampleMappingError,
    MappingError,
    PathResolutionError,
)
from .mapper import MongoExampleMapper, get_mapped_example
from .mapping import MappingContext, PersistentEntity, PersistentProperty
from .regex import MongoRegexCreator, to_regular_expression
from .serialization import drop_nulls, flat_map

__all__ = [
    # Configuration
    "Example",
    "PropertySpecifier",
    "StringMatcher",
    "NullHandling",
    # Compilation
    "MongoExampleMapper",
    "get_mapped_example",
    # Metadata
    "MappingContext",
    "PersistentEntity",
    "PersistentProperty",
    # Conversion
    "MongoConverter",
    "PydanticMongoConverter",
    # Utilities
    "MongoRegexCreator",
    "to_regular_expression",
    "drop_nulls",
    "flat_map",
    # Exceptions
    "ExampleMappingError",
    "MappingError",
    "ConversionError",
    "PathResolutionError",
]
