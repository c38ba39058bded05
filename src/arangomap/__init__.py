"""
arangomap: typed records on top of ArangoDB.

Application code declares records as pydantic models, registers them against
collections, and writes them through the document API. Edges between records
get their collection and type synthesized on demand.

High-level usage examples:

1. Declaring records:
   ```python
   from arangomap import Record, EdgeRecord, document, edge

   @document("users")
   class User(Record):
       first_name: str = ""

   @document("posts")
   class Post(Record):
       title: str = ""

   @edge("user_posts", from_=User, to=Post)
   class UserPosts(EdgeRecord):
       type: str = ""
   ```

2. Writing records and edges:
   ```python
   from arangomap import connect_store, insert_record, create_edge

   store = connect_store()
   user = insert_record(store, User(first_name="John"))
   post = insert_record(store, Post(title="Hello"))

   # Explicit edge type with extra fields
   create_edge(store, user, post, edge=UserPosts, fields={"type": "wrote"})

   # Synthesized edge type and collection ("post_user")
   create_edge(store, user, post)
   ```

3. Raw queries:
   ```python
   from arangomap import AQL, aql_query, raw_to_record

   rows = aql_query(
       store,
       "FOR u IN users FILTER u._key IN @keys RETURN u",
       [("keys", AQL("FOR p IN posts RETURN p.author_key"))],
   )
   users = raw_to_record(rows, User)
   ```
"""

__version__ = "0.1.0"

from arangomap.core import (
    # Records and classification
    Record,
    EdgeRecord,
    Association,
    SchemaKind,
    SchemaRegistry,
    registry,
    document,
    edge,
    classify,
    require_kind,

    # Identifiers
    DocumentId,
    parse_id,
    format_id,
    id_from_record,
    id_from_type,

    # Edges and collections
    derive_collection_name,
    edge_type,
    CollectionType,
    collection_exists,
    ensure_collection,

    # Writes and graph operations
    insert,
    insert_all,
    update,
    delete,
    insert_record,
    update_record,
    delete_record,
    create_edge,
    delete_all_edges,
    Ok,
    Conflict,
    Stale,

    # Queries
    AQL,
    aql_query,
    bind_variables,
    api_request,
    raw_to_record,

    # Connection
    Store,
    connect_store,

    # Errors
    ArangoMapError,
)

__all__ = [
    "__version__",
    "Record",
    "EdgeRecord",
    "Association",
    "SchemaKind",
    "SchemaRegistry",
    "registry",
    "document",
    "edge",
    "classify",
    "require_kind",
    "DocumentId",
    "parse_id",
    "format_id",
    "id_from_record",
    "id_from_type",
    "derive_collection_name",
    "edge_type",
    "CollectionType",
    "collection_exists",
    "ensure_collection",
    "insert",
    "insert_all",
    "update",
    "delete",
    "insert_record",
    "update_record",
    "delete_record",
    "create_edge",
    "delete_all_edges",
    "Ok",
    "Conflict",
    "Stale",
    "AQL",
    "aql_query",
    "bind_variables",
    "api_request",
    "raw_to_record",
    "Store",
    "connect_store",
    "ArangoMapError",
]
