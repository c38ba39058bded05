"""
Tests for document identifier parsing and record identifiers.
"""

import pytest

from arangomap.core.errors import (
    InvalidIdentifierError,
    InvalidReferenceError,
    NotASchemaError,
)
from arangomap.core.identifiers import (
    DocumentId,
    format_id,
    id_from_record,
    id_from_type,
    parse_id,
    struct_id,
    wire_name,
)


def test_parse_id_valid():
    parsed = parse_id("users/12345")
    assert parsed == DocumentId("users", "12345")
    assert parsed.collection == "users"
    assert parsed.key == "12345"
    assert str(parsed) == "users/12345"


@pytest.mark.parametrize(
    "value, reason",
    [
        ("users", "missing '/'"),
        ("/123", "empty collection"),
        ("users/", "empty key"),
        ("us ers/1", "invalid collection"),
        ("users/1/2", "invalid key"),
        (123, "expected a string"),
    ],
)
def test_parse_id_rejects_with_reason(value, reason):
    with pytest.raises(InvalidIdentifierError) as exc_info:
        parse_id(value)
    assert reason in exc_info.value.reason
    assert exc_info.value.value == value


def test_format_then_parse_gives_back_parts():
    for collection, key in [("users", "1"), ("user_posts", "a-b_c"), ("X", "0")]:
        assert parse_id(format_id(collection, key)) == (collection, key)


def test_wire_name():
    assert wire_name("id") == "_key"
    assert wire_name("rev") == "_rev"
    assert wire_name("first_name") == "first_name"


def test_id_from_type(models):
    assert id_from_type(models.User, "123456") == "users/123456"


def test_id_from_type_invalid_key(models):
    with pytest.raises(InvalidReferenceError):
        id_from_type(models.User, "bad key")


def test_id_from_type_unregistered():
    class Unknown:
        pass

    with pytest.raises(NotASchemaError):
        id_from_type(Unknown, "1")


def test_id_from_record(models):
    assert id_from_record(models.Post(id="54321", title="Hi")) == "posts/54321"


def test_id_from_record_without_key(models):
    with pytest.raises(InvalidReferenceError):
        id_from_record(models.User(first_name="John"))


def test_struct_id_accepts_strings_and_records(models):
    assert struct_id("users/1") == "users/1"
    assert struct_id(models.User(id="1")) == "users/1"


@pytest.mark.parametrize("value", ["users", "users/a b", 42, None])
def test_struct_id_rejects_invalid_values(value):
    with pytest.raises(InvalidReferenceError):
        struct_id(value)
