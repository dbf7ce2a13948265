"""Tests for exceptions module."""

from __future__ import annotations

from cqrs_ddd_mongo_example import (
    ConversionError,
    ExampleMappingError,
    MappingError,
    PathResolutionError,
)


def test_hierarchy():
    assert issubclass(MappingError, ExampleMappingError)
    assert issubclass(ConversionError, ExampleMappingError)
    assert issubclass(PathResolutionError, ExampleMappingError)


def test_path_resolution_error_message():
    err = PathResolutionError(
        path="adress.city",
        segment="adress",
        entity_name="Person",
        available_fields=["_id", "name", "address"],
    )
    assert "adress.city" in str(err)
    assert "Person" in str(err)
    assert "address" in err.suggestions
    assert "Did you mean: address?" in str(err)


def test_path_resolution_error_to_dict():
    err = PathResolutionError("zzz", "zzz", "Person", ["name", "age"])
    d = err.to_dict()
    assert d["error"] == "PATH_RESOLUTION_ERROR"
    assert d["path"] == "zzz"
    assert d["segment"] == "zzz"
    assert d["entity"] == "Person"
    assert d["root_entity"] == "Person"
    assert d["suggestions"] == []
    assert d["available_fields"] == ["age", "name"]


def test_base_to_dict():
    d = MappingError("not a model").to_dict()
    assert d == {"error": "MappingError", "message": "not a model"}


def test_conversion_error_to_dict():
    d = ConversionError("boom").to_dict()
    assert d["error"] == "CONVERSION_ERROR"
