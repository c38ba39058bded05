"""
ArangoDB Relationship Operations.

This module manages edges between stored records:
- Creating an edge between two records, synthesizing the edge type and
  collection when the caller does not provide one
- Finding and deleting every edge between two records

Edge direction is data, not structure: the derived collection for
`(User, Post)` is the same as for `(Post, User)`.

Links:
- ArangoDB Python Driver: https://docs.python-arango.com/
- ArangoDB Graph Features: https://docs.arangodb.com/stable/graphs/

Sample input:
    create_edge(store, user, post, edge=UserPosts, fields={"type": "wrote"})

Expected output:
    UserPosts(id='789', from_id='users/12345', to_id='posts/54321', type='wrote')
"""

from typing import Any, Dict, List, Mapping, Optional, Union

from loguru import logger
from pydantic import BaseModel, ValidationError

from arangomap.core.collections import CollectionType, ensure_collection, require_collection
from arangomap.core.db.crud import delete_record, insert_record, to_wire_fields
from arangomap.core.edges import edge_type
from arangomap.core.errors import InvalidInputError, NotASchemaError
from arangomap.core.identifiers import parse_id, struct_id
from arangomap.core.materialize import raw_to_record
from arangomap.core.query import aql_query
from arangomap.core.results import Conflict, Ok
from arangomap.core.schema import RecordType, SchemaKind, require_kind
from arangomap.core.utils.connection import Store

Vertex = Union[BaseModel, str]


def _vertex_model(store: Store, vertex: Vertex) -> Any:
    if isinstance(vertex, BaseModel):
        return type(vertex)
    collection = parse_id(struct_id(vertex)).collection
    record_type = store.registry.by_source(collection)
    if record_type is None:
        raise NotASchemaError(collection)
    return record_type.model


def resolve_edge(
    store: Store,
    from_: Vertex,
    to: Vertex,
    edge: Optional[Any] = None,
    collection_name: Optional[str] = None,
) -> RecordType:
    """
    The edge type to use between two vertices.

    An explicit `edge` wins over `collection_name`; otherwise the edge type
    is synthesized (or reused) for the pair.

    Raises:
        NotASchemaError: If a type involved is not registered.
        NotAnEdgeError: If `edge` is not an edge type.
    """
    if edge is None:
        edge = edge_type(
            _vertex_model(store, from_),
            _vertex_model(store, to),
            collection_name=collection_name,
            registry=store.registry,
        )
    return require_kind(edge, SchemaKind.EDGE)


def create_edge(
    store: Store,
    from_: Vertex,
    to: Vertex,
    edge: Optional[Any] = None,
    collection_name: Optional[str] = None,
    fields: Optional[Mapping[str, Any]] = None,
) -> Union[BaseModel, Conflict]:
    """
    Create an edge between two records.

    Args:
        store: Store connection.
        from_: Record instance or document id for the `_from` vertex.
        to: Record instance or document id for the `_to` vertex.
        edge: Explicit edge type, required for edges with extra fields.
        collection_name: Collection for a synthesized edge type.
        fields: Values for the edge's own fields (needs `edge`).

    Returns:
        The stored edge instance, or Conflict on a unique violation.

    Raises:
        InvalidReferenceError: If a vertex is not a stored record or valid id.
        MissingCollectionError: If a vertex collection does not exist, or the
            edge collection is missing on a static store.
        InvalidInputError: If the edge fields fail validation.
    """
    from_id = struct_id(from_)
    to_id = struct_id(to)
    record_type = resolve_edge(store, from_, to, edge, collection_name)

    if fields and edge is None:
        logger.warning(f"Ignoring fields for synthesized edge type {record_type.name}")
        fields = None

    ensure_collection(store, record_type.source, CollectionType.EDGE)
    require_collection(store, parse_id(from_id).collection, CollectionType.DOCUMENT)
    require_collection(store, parse_id(to_id).collection, CollectionType.DOCUMENT)

    attrs: Dict[str, Any] = dict(fields or {})
    attrs.update({"_from": from_id, "_to": to_id})
    try:
        instance = record_type.model.model_validate(attrs)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid fields for {record_type.name}: {e}") from e

    logger.debug(f"Creating {record_type.name} edge {from_id} -> {to_id}")
    return insert_record(store, instance)


def find_edges(
    store: Store,
    from_: Vertex,
    to: Vertex,
    edge: Optional[Any] = None,
    collection_name: Optional[str] = None,
    conditions: Optional[Mapping[str, Any]] = None,
) -> List[BaseModel]:
    """
    All edges from `from_` to `to`, optionally filtered by field equality.

    Condition field names are passed as attribute bind parameters, never
    spliced into the query text.
    """
    from_id = struct_id(from_)
    to_id = struct_id(to)
    record_type = resolve_edge(store, from_, to, edge, collection_name)

    query = "FOR e IN @@collection FILTER e._from == @from_id AND e._to == @to_id"
    variables: List = [
        ("@collection", record_type.source),
        ("from_id", from_id),
        ("to_id", to_id),
    ]
    for i, (attribute, value) in enumerate(to_wire_fields(record_type.model, conditions or {}).items()):
        query += f" FILTER e.@attr{i} == @value{i}"
        variables.extend([(f"attr{i}", attribute), (f"value{i}", value)])
    query += " RETURN e"

    return raw_to_record(aql_query(store, query, variables), record_type.model)


def delete_all_edges(
    store: Store,
    from_: Vertex,
    to: Vertex,
    edge: Optional[Any] = None,
    collection_name: Optional[str] = None,
    conditions: Optional[Mapping[str, Any]] = None,
) -> int:
    """
    Delete every edge from `from_` to `to` matching `conditions`.

    Returns:
        int: The number of edges deleted. Edges removed concurrently by
        someone else are not counted.

    Raises:
        MissingCollectionError: If the edge collection does not exist.
    """
    record_type = resolve_edge(store, from_, to, edge, collection_name)
    require_collection(store, record_type.source, CollectionType.EDGE)

    deleted = 0
    for found in find_edges(store, from_, to, record_type.model, conditions=conditions):
        if isinstance(delete_record(store, found), Ok):
            deleted += 1

    logger.debug(f"Deleted {deleted} {record_type.name} edges")
    return deleted
