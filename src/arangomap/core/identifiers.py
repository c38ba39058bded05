"""
Document identifier parsing and formatting.

An ArangoDB document is addressed by `<collection>/<key>`. This module is the
only place that builds or validates those strings.

Links:
- ArangoDB document keys: https://docs.arangodb.com/stable/concepts/data-structure/documents/

Sample input:
    parse_id("users/123")

Expected output:
    DocumentId(collection='users', key='123')
"""

import re
from typing import Any, NamedTuple

from arangomap.core.errors import InvalidIdentifierError, InvalidReferenceError
from arangomap.core.schema import registry_for

# Logical field name <-> wire name used by the document API
WIRE_KEYS = {
    "id": "_key",
    "rev": "_rev",
    "document_id": "_id",
}
IDENTITY_KEYS = ("_id", "_key", "_rev")

NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class DocumentId(NamedTuple):
    collection: str
    key: str

    def __str__(self) -> str:
        return f"{self.collection}/{self.key}"


def wire_name(field: str) -> str:
    """Map a logical field name to its wire name, leaving other names as-is."""
    return WIRE_KEYS.get(field, field)


def is_valid_key(key: Any) -> bool:
    return isinstance(key, str) and NAME_PATTERN.fullmatch(key) is not None


def format_id(collection: str, key: Any) -> str:
    """Build `collection/key`."""
    return f"{collection}/{key}"


def parse_id(value: Any) -> DocumentId:
    """
    Parse a `collection/key` string.

    Args:
        value: The candidate identifier.

    Returns:
        DocumentId: The parsed collection and key.

    Raises:
        InvalidIdentifierError: With the reason the value was rejected.
    """
    if not isinstance(value, str):
        raise InvalidIdentifierError(value, f"expected a string, got {type(value).__name__}")
    if "/" not in value:
        raise InvalidIdentifierError(value, "missing '/' separator")

    collection, _, key = value.partition("/")
    if not collection:
        raise InvalidIdentifierError(value, "empty collection name")
    if not key:
        raise InvalidIdentifierError(value, "empty key")
    if not NAME_PATTERN.fullmatch(collection):
        raise InvalidIdentifierError(value, f"invalid collection name {collection!r}")
    if not NAME_PATTERN.fullmatch(key):
        raise InvalidIdentifierError(value, f"invalid key {key!r}")

    return DocumentId(collection, key)


def id_from_record(instance: Any) -> str:
    """
    Get the document identifier of a record instance.

    Raises:
        NotASchemaError: If the instance's type is not registered.
        InvalidReferenceError: If the instance has no usable key.
    """
    record_type = registry_for(type(instance)).require(type(instance))
    key = getattr(instance, "id", None)
    if key is None:
        raise InvalidReferenceError(
            f"{type(instance).__name__} instance has no key, it was probably never stored"
        )
    return id_from_type(record_type.model, key)


def id_from_type(model: Any, key: Any) -> str:
    """
    Get a document identifier from a record type and a key.

    Sample input:
        id_from_type(User, "123456")

    Expected output:
        "users/123456"
    """
    record_type = registry_for(model).require(model)
    if not is_valid_key(key):
        raise InvalidReferenceError(f"Invalid key {key!r} for {record_type.name}")
    return format_id(record_type.source, key)


def struct_id(value: Any) -> str:
    """
    Get a validated identifier from a record instance or an identifier string.

    Raises:
        InvalidReferenceError: If the value is neither.
    """
    if isinstance(value, str):
        try:
            return str(parse_id(value))
        except InvalidIdentifierError as e:
            raise InvalidReferenceError(str(e)) from e

    if registry_for(type(value)).lookup(type(value)) is None:
        raise InvalidReferenceError(f"Invalid record or document id: {value!r}")
    return id_from_record(value)


if __name__ == "__main__":
    import sys

    all_validation_failures = []
    total_tests = 0

    total_tests += 1
    parsed = parse_id("users/123")
    if parsed != DocumentId("users", "123") or str(parsed) != "users/123":
        all_validation_failures.append(f"parse_id: expected users/123, got {parsed}")

    for bad in ("users", "/123", "users/", "us ers/1", "users/1/2"):
        total_tests += 1
        try:
            parse_id(bad)
            all_validation_failures.append(f"parse_id accepted {bad!r}")
        except InvalidIdentifierError:
            pass

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        sys.exit(0)
