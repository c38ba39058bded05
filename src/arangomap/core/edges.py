"""
Edge type synthesis.

Derives deterministic edge collection names for a pair of record types and
creates a minimal edge record type on demand when the caller does not supply
one. Synthesized types live under `<common module prefix>.edges`; the
collection name is order independent, so `(User, Post)` and `(Post, User)`
share the `post_user` collection and the `PostUser` edge type.

Callers needing extra edge attributes must register an explicit edge type.

Links:
- Pydantic dynamic models: https://docs.pydantic.dev/latest/concepts/models/#dynamic-model-creation

Sample input:
    edge_type(myapp.accounts.User, myapp.blog.Post)

Expected output:
    <class 'myapp.edges.PostUser'> registered against collection 'post_user'
"""

from typing import Any, List, Optional, Type, Union

from loguru import logger
from pydantic import BaseModel, create_model

from arangomap.core.schema import (
    FROM_FIELD,
    TO_FIELD,
    Association,
    EdgeRecord,
    RecordType,
    SchemaRegistry,
    registry_for,
)

EDGES_NAMESPACE = "edges"


def short_name(obj: Union[type, str]) -> str:
    """Unqualified name of a type, or the last dotted part of a string."""
    if isinstance(obj, str):
        return obj.rsplit(".", 1)[-1]
    return obj.__name__


def derive_collection_name(type_a: Union[type, str], type_b: Union[type, str]) -> str:
    """
    Edge collection name for two types: lower-cased short names, sorted, joined by '_'.

    Sample input:
        derive_collection_name(User, Post)

    Expected output:
        "post_user"
    """
    names = sorted(short_name(t).lower() for t in (type_a, type_b))
    return "_".join(names)


def camelize(name: str) -> str:
    """'post_user' -> 'PostUser'"""
    return "".join(part[:1].upper() + part[1:] for part in name.replace("-", "_").split("_") if part)


def _parent_modules(model: type) -> List[str]:
    return model.__module__.split(".")


def common_namespace(type_a: type, type_b: type) -> str:
    """Longest common dotted module prefix of two types (may be empty)."""
    common = []
    for part_a, part_b in zip(_parent_modules(type_a), _parent_modules(type_b)):
        if part_a != part_b:
            break
        common.append(part_a)
    return ".".join(common)


def edge_namespace(type_a: type, type_b: type) -> str:
    parent = common_namespace(type_a, type_b)
    return f"{parent}.{EDGES_NAMESPACE}" if parent else EDGES_NAMESPACE


def edge_type(
    type_a: Any,
    type_b: Any,
    collection_name: Optional[str] = None,
    create: bool = True,
    registry: Optional[SchemaRegistry] = None,
) -> Optional[Type[BaseModel]]:
    """
    Get (or synthesize) the edge record type between two record types.

    Args:
        type_a: Record type (or instance) used as the `_from` vertex on creation.
        type_b: Record type (or instance) used as the `_to` vertex on creation.
        collection_name: Explicit collection name, otherwise derived.
        create: When False, only look up an already synthesized type.
        registry: Registry to use, defaults to the one `type_a` belongs to.

    Returns:
        The edge model class, or None if `create` is False and none exists.

    Raises:
        NotASchemaError: If either type is not a registered record type.
    """
    registry = registry or registry_for(type_a)
    record_a = registry.require(type_a)
    record_b = registry_for(type_b).require(type_b)

    name = collection_name or derive_collection_name(record_a.model, record_b.model)
    namespace = edge_namespace(record_a.model, record_b.model)
    class_name = camelize(name)
    qualified = f"{namespace}.{class_name}"

    if not create:
        existing = registry.lookup(qualified)
        return existing.model if existing else None

    def factory():
        logger.info(
            f"Synthesizing edge type {qualified} for '{name}' "
            f"({record_a.name} -> {record_b.name})"
        )
        model = create_model(class_name, __base__=EdgeRecord, __module__=namespace)
        associations = [
            Association("from", FROM_FIELD, record_a.model),
            Association("to", TO_FIELD, record_b.model),
        ]
        return model, name, associations

    record_type: RecordType = registry.register_if_absent(qualified, factory)
    return record_type.model


if __name__ == "__main__":
    import sys

    all_validation_failures = []
    total_tests = 0

    total_tests += 1
    if derive_collection_name("User", "Post") != derive_collection_name("Post", "User"):
        all_validation_failures.append("derive_collection_name is order dependent")

    total_tests += 1
    if derive_collection_name("myapp.User", "myapp.Post") != "post_user":
        all_validation_failures.append(
            f"Expected 'post_user', got {derive_collection_name('myapp.User', 'myapp.Post')!r}"
        )

    total_tests += 1
    if camelize("works_for") != "WorksFor":
        all_validation_failures.append(f"camelize: expected 'WorksFor', got {camelize('works_for')!r}")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        sys.exit(0)
