"""Tests for Example / PropertySpecifier configuration."""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import BaseModel

from cqrs_ddd_mongo_example import (
    Example,
    NullHandling,
    PropertySpecifier,
    StringMatcher,
)


class Person(BaseModel):
    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None


def test_defaults():
    example = Example.of(Person(first_name="Alice"))
    assert example.string_matcher == StringMatcher.DEFAULT
    assert example.ignore_case is False
    assert example.null_handling == NullHandling.IGNORE_NULL
    assert example.has_property_specifiers is False
    assert example.probe_type is Person


def test_of_rejects_none():
    with pytest.raises(ValueError, match="Probe"):
        Example.of(None)


def test_builders_return_copies():
    base = Example.of(Person())
    changed = (
        base.with_string_matcher(StringMatcher.CONTAINING)
        .with_ignore_case()
        .with_include_null_values()
    )
    assert base.string_matcher == StringMatcher.DEFAULT
    assert base.ignore_case is False
    assert base.null_handling == NullHandling.IGNORE_NULL
    assert changed.string_matcher == StringMatcher.CONTAINING
    assert changed.ignore_case is True
    assert changed.null_handling == NullHandling.INCLUDE_NULL


def test_example_is_frozen():
    example = Example.of(Person())
    with pytest.raises(dataclasses.FrozenInstanceError):
        example.ignore_case = True  # type: ignore[misc]


def test_with_property_specifier_by_path():
    base = Example.of(Person())
    example = base.with_property_specifier(
        "address.city", string_matcher=StringMatcher.STARTING, ignore_case=True
    )
    assert base.has_property_specifiers is False
    assert example.has_property_specifier("address.city")
    spec = example.get_property_specifier("address.city")
    assert spec is not None
    assert spec.string_matcher == StringMatcher.STARTING
    assert spec.ignore_case is True
    assert example.get_property_specifier("address") is None


def test_with_property_specifier_instance_replaces_same_path():
    first = PropertySpecifier("last_name", string_matcher=StringMatcher.ENDING)
    second = PropertySpecifier("last_name", ignore_case=True)
    example = (
        Example.of(Person())
        .with_property_specifier(first)
        .with_property_specifier(second)
    )
    assert list(example.property_specifiers) == ["last_name"]
    assert example.get_property_specifier("last_name") is second


def test_with_property_specifier_rejects_empty_path():
    with pytest.raises(ValueError, match="path"):
        Example.of(Person()).with_property_specifier("")


def test_specifiers_are_detached_from_caller_dict():
    specifiers = {"last_name": PropertySpecifier("last_name", ignore_case=True)}
    example = Example(probe=Person(), property_specifiers=specifiers)
    specifiers["first_name"] = PropertySpecifier("first_name")
    assert list(example.property_specifiers) == ["last_name"]
    extra = PropertySpecifier("first_name")
    with pytest.raises(TypeError):
        example.property_specifiers["first_name"] = extra  # type: ignore[index]


def test_example_is_hashable():
    probe = Person(first_name="Alice")
    example = Example.of(probe).with_property_specifier("first_name", ignore_case=True)
    same = Example.of(probe).with_property_specifier("first_name", ignore_case=True)
    assert example == same
    assert hash(example) == hash(same)
    assert len({example, same}) == 1


class TestPropertySpecifier:
    def test_transform_without_transformer_is_identity(self):
        spec = PropertySpecifier("name")
        assert spec.transform_value("x") == "x"
        assert spec.has_string_matcher is False

    def test_transform_applies_function(self):
        spec = PropertySpecifier("name").with_value_transformer(str.upper)
        assert spec.transform_value("abc") == "ABC"

    def test_transform_exception_propagates(self):
        def boom(_value):
            raise RuntimeError("bad transform")

        spec = PropertySpecifier("name", value_transformer=boom)
        with pytest.raises(RuntimeError, match="bad transform"):
            spec.transform_value("abc")

    def test_copy_builders(self):
        spec = PropertySpecifier("name")
        changed = spec.with_string_matcher(StringMatcher.REGEX).with_ignore_case()
        assert spec.string_matcher is None
        assert spec.ignore_case is None
        assert changed.has_string_matcher
        assert changed.ignore_case is True
