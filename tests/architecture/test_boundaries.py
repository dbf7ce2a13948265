from pytest_archon import archrule


def test_configuration_independence() -> None:
    """
    Example configuration is a plain value.
    It must not depend on metadata, conversion, compilation or the driver.
    """
    (
        archrule("configuration_is_independent")
        .match("cqrs_ddd_mongo_example.example")
        .should_not_import("cqrs_ddd_mongo_example.mapper")
        .should_not_import("cqrs_ddd_mongo_example.mapping")
        .should_not_import("cqrs_ddd_mongo_example.converter")
        .should_not_import("bson*")
        .should_not_import("pymongo*")
        .check("cqrs_ddd_mongo_example")
    )


def test_exceptions_isolation() -> None:
    """
    Exceptions are the lowest level.
    They must not import any other module of the package, nor the driver.
    """
    (
        archrule("exceptions_isolation")
        .match("cqrs_ddd_mongo_example.exceptions")
        .should_not_import("cqrs_ddd_mongo_example.example")
        .should_not_import("cqrs_ddd_mongo_example.mapping")
        .should_not_import("cqrs_ddd_mongo_example.converter")
        .should_not_import("cqrs_ddd_mongo_example.mapper")
        .should_not_import("bson*")
        .should_not_import("pymongo*")
        .check("cqrs_ddd_mongo_example")
    )


def test_metadata_layering() -> None:
    """
    Entity metadata is consumed by conversion and compilation, never the reverse.
    """
    (
        archrule("metadata_layering")
        .match("cqrs_ddd_mongo_example.mapping")
        .should_not_import("cqrs_ddd_mongo_example.converter")
        .should_not_import("cqrs_ddd_mongo_example.mapper")
        .check("cqrs_ddd_mongo_example")
    )


def test_converter_does_not_compile() -> None:
    """
    The converter produces raw documents; it must not know about examples.
    """
    (
        archrule("converter_independence")
        .match("cqrs_ddd_mongo_example.converter")
        .should_not_import("cqrs_ddd_mongo_example.mapper")
        .should_not_import("cqrs_ddd_mongo_example.example")
        .check("cqrs_ddd_mongo_example")
    )
