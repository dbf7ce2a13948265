"""Shared fixtures for query-by-example tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_mongo_example import MappingContext, MongoExampleMapper


@pytest.fixture
def mapping_context() -> MappingContext:
    return MappingContext()


@pytest.fixture
def mapper() -> MongoExampleMapper:
    return MongoExampleMapper()
