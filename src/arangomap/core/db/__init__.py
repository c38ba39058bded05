"""
arangomap Core Database Operations.

This package provides the write and graph operations, structured in layers:
- crud: typed insert/update/delete translated to document API calls
- relationships: edge creation and deletion between stored records

These modules provide pure business logic with no presentation concerns.
"""

from arangomap.core.db.crud import (
    insert,
    insert_all,
    update,
    delete,
    insert_record,
    update_record,
    delete_record,
    dump_fields,
)

from arangomap.core.db.relationships import (
    create_edge,
    find_edges,
    delete_all_edges,
    resolve_edge,
)

__all__ = [
    # CRUD operations
    "insert",
    "insert_all",
    "update",
    "delete",
    "insert_record",
    "update_record",
    "delete_record",
    "dump_fields",

    # Relationship operations
    "create_edge",
    "find_edges",
    "delete_all_edges",
    "resolve_edge",
]
