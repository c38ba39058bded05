"""
Tests for record type registration and classification.
"""

from typing import Optional

import pytest
from pydantic import BaseModel, Field

from arangomap.core.errors import NotASchemaError, NotAnEdgeError
from arangomap.core.schema import (
    Record,
    SchemaKind,
    classify,
    is_document,
    is_edge,
    registry_for,
    require_kind,
    schema_type,
    schema_type_or_raise,
)


def test_classify_registered_types(models):
    assert classify(models.User) is SchemaKind.DOCUMENT
    assert classify(models.UserPosts) is SchemaKind.EDGE
    assert is_document(models.Post)
    assert is_edge(models.UserPosts)
    assert not is_edge(models.User)


def test_classify_instances(models):
    assert classify(models.User(first_name="John")) is SchemaKind.DOCUMENT
    assert classify(models.UserPosts(_from="users/1", _to="posts/2")) is SchemaKind.EDGE


def test_classify_unregistered():
    class Plain(BaseModel):
        name: str = ""

    assert classify(Plain) is SchemaKind.UNCLASSIFIED
    assert classify("not a type") is SchemaKind.UNCLASSIFIED
    assert classify(42) is SchemaKind.UNCLASSIFIED


def test_schema_type(models):
    assert schema_type(models.User) == "document"
    assert schema_type(models.UserPosts) == "edge"
    assert schema_type(int) is None


def test_schema_type_or_raise():
    with pytest.raises(NotASchemaError):
        schema_type_or_raise(int)


def test_descriptor_fields_use_wire_names(models, registry):
    record_type = registry.require(models.UserPosts)
    assert record_type.source == "user_posts"
    assert record_type.fields[0] == "_key"
    assert {"_from", "_to", "type", "post_id"} <= set(record_type.fields)
    assert record_type.from_type is models.User
    assert record_type.to_type is models.Post
    assert record_type.foreign_keys == ["_from", "_to", "post_id"]


def test_registration_is_idempotent(models, registry):
    first = registry.require(models.User)
    assert registry.register(models.User, "elsewhere") is first
    assert registry_for(models.User) is registry


def test_reference_fields_without_associations_are_documents(registry):
    @registry.document("links")
    class Link(Record):
        from_id: Optional[str] = Field(default=None, alias="_from")
        to_id: Optional[str] = Field(default=None, alias="_to")

    assert classify(Link) is SchemaKind.DOCUMENT


def test_edge_decorator_requires_reference_fields(models, registry):
    with pytest.raises(NotAnEdgeError):

        @registry.edge("broken", from_=models.User, to=models.Post)
        class Broken(Record):
            weight: int = 0


def test_register_rejects_non_models(registry):
    with pytest.raises(NotASchemaError):
        registry.register(dict, "dicts")


def test_require_kind(models):
    assert require_kind(models.UserPosts, SchemaKind.EDGE).model is models.UserPosts
    assert require_kind(models.UserPosts, SchemaKind.DOCUMENT).model is models.UserPosts

    with pytest.raises(NotAnEdgeError):
        require_kind(models.User, SchemaKind.EDGE)
    with pytest.raises(NotASchemaError):
        require_kind(int, SchemaKind.DOCUMENT)


def test_by_source_only_finds_documents(models, registry):
    assert registry.by_source("users").model is models.User
    assert registry.by_source("user_posts") is None
    assert registry.by_source("missing") is None
