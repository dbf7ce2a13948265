"""
Query-by-example configuration.

An ``Example`` wraps a *probe* (a partially populated model instance) with
the rules used to turn it into a filter: the default string matching mode,
case sensitivity, null handling and per-path ``PropertySpecifier``
overrides keyed by dotted logical property path.

Both types are immutable. Every ``with_*`` method returns a copy, so one
configuration can be shared freely between concurrent compiles.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any


class StringMatcher(str, Enum):
    """How string values of the probe are matched."""

    DEFAULT = "default"
    EXACT = "exact"
    STARTING = "starting"
    ENDING = "ending"
    CONTAINING = "containing"
    REGEX = "regex"


class NullHandling(str, Enum):
    """Whether ``None`` values of the probe take part in the filter."""

    INCLUDE_NULL = "include_null"
    IGNORE_NULL = "ignore_null"


ValueTransformer = Callable[[Any], Any]


@dataclass(frozen=True)
class PropertySpecifier:
    """
    Per-path override of the example's matching rules.

    Attributes:
        path: Dotted logical property path, e.g. ``"address.city"``.
        string_matcher: Overrides the example's default matcher when set.
        ignore_case: Overrides the example's case sensitivity when set.
        value_transformer: Applied to the document value before matching.
            Returning ``None`` removes the field from the filter.
    """

    path: str
    string_matcher: StringMatcher | None = None
    ignore_case: bool | None = None
    value_transformer: ValueTransformer | None = None

    @property
    def has_string_matcher(self) -> bool:
        return self.string_matcher is not None

    def transform_value(self, value: Any) -> Any:
        """Run the transformer, if any. Exceptions propagate to the caller."""
        if self.value_transformer is None:
            return value
        return self.value_transformer(value)

    def with_string_matcher(self, matcher: StringMatcher) -> PropertySpecifier:
        return replace(self, string_matcher=matcher)

    def with_ignore_case(self, ignore_case: bool = True) -> PropertySpecifier:
        return replace(self, ignore_case=ignore_case)

    def with_value_transformer(
        self, transformer: ValueTransformer | None
    ) -> PropertySpecifier:
        return replace(self, value_transformer=transformer)


@dataclass(frozen=True)
class Example:
    """
    Immutable probe plus matching configuration.

    Attributes:
        probe: Model instance whose populated fields are matched on.
        string_matcher: Default matching mode for string values.
        ignore_case: Default case sensitivity for string values.
        null_handling: ``IGNORE_NULL`` drops ``None`` values and flattens
            the filter to dotted keys; ``INCLUDE_NULL`` keeps both.
        property_specifiers: Overrides keyed by dotted logical path.
    """

    probe: Any = field(hash=False)
    string_matcher: StringMatcher = StringMatcher.DEFAULT
    ignore_case: bool = False
    null_handling: NullHandling = NullHandling.IGNORE_NULL
    property_specifiers: Mapping[str, PropertySpecifier] = field(
        default_factory=dict, hash=False
    )

    def __post_init__(self) -> None:
        # Detach from the caller's dict; the copy stays read-only.
        specifiers = MappingProxyType(dict(self.property_specifiers))
        object.__setattr__(self, "property_specifiers", specifiers)

    @classmethod
    def of(cls, probe: Any) -> Example:
        """Create an example with default matching rules."""
        if probe is None:
            raise ValueError("Probe must not be None")
        return cls(probe=probe)

    @property
    def probe_type(self) -> type[Any]:
        return type(self.probe)

    @property
    def has_property_specifiers(self) -> bool:
        return bool(self.property_specifiers)

    def has_property_specifier(self, path: str) -> bool:
        return path in self.property_specifiers

    def get_property_specifier(self, path: str) -> PropertySpecifier | None:
        return self.property_specifiers.get(path)

    def with_string_matcher(self, matcher: StringMatcher) -> Example:
        """Return a copy with the default string matcher replaced."""
        return replace(self, string_matcher=matcher)

    def with_ignore_case(self, ignore_case: bool = True) -> Example:
        """Return a copy with default case sensitivity replaced."""
        return replace(self, ignore_case=ignore_case)

    def with_null_handling(self, null_handling: NullHandling) -> Example:
        return replace(self, null_handling=null_handling)

    def with_include_null_values(self) -> Example:
        return self.with_null_handling(NullHandling.INCLUDE_NULL)

    def with_property_specifier(
        self,
        path_or_specifier: str | PropertySpecifier,
        *,
        string_matcher: StringMatcher | None = None,
        ignore_case: bool | None = None,
        value_transformer: ValueTransformer | None = None,
    ) -> Example:
        """
        Return a copy with a specifier registered for its path.

        Accepts either a ready ``PropertySpecifier`` or a dotted path plus
        the override keywords. A specifier already registered for the same
        path is replaced.
        """
        if isinstance(path_or_specifier, PropertySpecifier):
            specifier = path_or_specifier
        else:
            specifier = PropertySpecifier(
                path=path_or_specifier,
                string_matcher=string_matcher,
                ignore_case=ignore_case,
                value_transformer=value_transformer,
            )
        if not specifier.path:
            raise ValueError("Property specifier path must not be empty")
        specifiers = dict(self.property_specifiers)
        specifiers[specifier.path] = specifier
        return replace(self, property_specifiers=specifiers)
