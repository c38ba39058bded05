"""
Tests for edge collection naming and edge type synthesis.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from arangomap.core.edges import (
    camelize,
    common_namespace,
    derive_collection_name,
    edge_type,
)
from arangomap.core.errors import NotASchemaError
from arangomap.core.schema import EdgeRecord, SchemaKind, classify


def test_derive_collection_name_is_order_independent(models):
    assert derive_collection_name(models.User, models.Post) == "post_user"
    assert derive_collection_name(models.Post, models.User) == "post_user"
    assert derive_collection_name("myapp.accounts.User", "myapp.blog.Post") == "post_user"


def test_camelize():
    assert camelize("post_user") == "PostUser"
    assert camelize("works-for") == "WorksFor"


def test_common_namespace():
    class A:
        __module__ = "myapp.accounts.models"

    class B:
        __module__ = "myapp.blog.models"

    class C:
        __module__ = "other"

    assert common_namespace(A, B) == "myapp"
    assert common_namespace(A, C) == ""


def test_edge_type_synthesizes_registered_edge(models, registry):
    model = edge_type(models.User, models.Post, registry=registry)

    assert issubclass(model, EdgeRecord)
    assert model.__name__ == "PostUser"
    assert model.__module__.endswith("edges")
    assert classify(model) is SchemaKind.EDGE

    record_type = registry.require(model)
    assert record_type.source == "post_user"
    assert record_type.from_type is models.User
    assert record_type.to_type is models.Post


def test_edge_type_is_reused_in_either_order(models, registry):
    first = edge_type(models.User, models.Post, registry=registry)
    assert edge_type(models.User, models.Post, registry=registry) is first
    assert edge_type(models.Post, models.User, registry=registry) is first


def test_edge_type_with_collection_name(models, registry):
    model = edge_type(models.User, models.Post, collection_name="authored", registry=registry)
    assert model.__name__ == "Authored"
    assert registry.source(model) == "authored"


def test_edge_type_lookup_only(models, registry):
    assert edge_type(models.User, models.Post, create=False, registry=registry) is None
    created = edge_type(models.User, models.Post, registry=registry)
    assert edge_type(models.User, models.Post, create=False, registry=registry) is created


def test_edge_type_concurrent_callers_share_one_type(models, registry):
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(
            pool.map(lambda _: edge_type(models.User, models.Post, registry=registry), range(16))
        )
    assert len({id(model) for model in results}) == 1


def test_edge_type_requires_registered_types(models, registry):
    class Unknown:
        pass

    with pytest.raises(NotASchemaError):
        edge_type(models.User, Unknown, registry=registry)
