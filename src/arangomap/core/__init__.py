"""Core functionality for arangomap.

This package provides the translation and graph-relationship logic: record
classification, edge synthesis, collection provisioning, typed writes, query
variable binding and result materialization.
"""

from arangomap.core.collections import (
    CollectionType,
    collection_exists,
    ensure_collection,
    require_collection,
)
from arangomap.core.db import (
    insert,
    insert_all,
    update,
    delete,
    insert_record,
    update_record,
    delete_record,
    dump_fields,
    create_edge,
    find_edges,
    delete_all_edges,
)
from arangomap.core.edges import derive_collection_name, edge_type
from arangomap.core.errors import (
    ArangoMapError,
    NotASchemaError,
    NotAnEdgeError,
    InvalidIdentifierError,
    InvalidReferenceError,
    InvalidInputError,
    UnsupportedOperationError,
    MissingCollectionError,
    StoreError,
)
from arangomap.core.identifiers import (
    DocumentId,
    format_id,
    parse_id,
    id_from_record,
    id_from_type,
    struct_id,
)
from arangomap.core.materialize import raw_to_record
from arangomap.core.api import api_request
from arangomap.core.query import AQL, aql_query, bind_variables
from arangomap.core.results import Ok, Conflict, Stale
from arangomap.core.schema import (
    Association,
    EdgeRecord,
    Record,
    RecordType,
    SchemaKind,
    SchemaRegistry,
    classify,
    document,
    edge,
    is_document,
    is_edge,
    lookup,
    registry,
    require_kind,
    schema_type,
    schema_type_or_raise,
)
from arangomap.core.utils.connection import Store, connect_store

__all__ = [
    # Records and classification
    "Record",
    "EdgeRecord",
    "Association",
    "RecordType",
    "SchemaKind",
    "SchemaRegistry",
    "registry",
    "document",
    "edge",
    "lookup",
    "classify",
    "is_document",
    "is_edge",
    "require_kind",
    "schema_type",
    "schema_type_or_raise",

    # Identifiers
    "DocumentId",
    "format_id",
    "parse_id",
    "id_from_record",
    "id_from_type",
    "struct_id",

    # Edges and collections
    "derive_collection_name",
    "edge_type",
    "CollectionType",
    "collection_exists",
    "ensure_collection",
    "require_collection",

    # Writes and graph operations
    "insert",
    "insert_all",
    "update",
    "delete",
    "insert_record",
    "update_record",
    "delete_record",
    "dump_fields",
    "create_edge",
    "find_edges",
    "delete_all_edges",
    "Ok",
    "Conflict",
    "Stale",

    # Queries
    "AQL",
    "aql_query",
    "bind_variables",
    "api_request",
    "raw_to_record",

    # Connection
    "Store",
    "connect_store",

    # Errors
    "ArangoMapError",
    "NotASchemaError",
    "NotAnEdgeError",
    "InvalidIdentifierError",
    "InvalidReferenceError",
    "InvalidInputError",
    "UnsupportedOperationError",
    "MissingCollectionError",
    "StoreError",
]
