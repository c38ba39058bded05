"""
Collection existence checks and provisioning.

Collections are created lazily before the first write unless the store is
static, in which case they are managed externally and a missing collection
is a deployment defect. Nothing is cached between calls; the server is the
source of truth.

Links:
- ArangoDB collections API: https://docs.arangodb.com/stable/develop/http-api/collections/

Sample input:
    ensure_collection(store, "user_posts", CollectionType.EDGE)

Expected output:
    True  (the edge collection exists, creating it if it was missing)
"""

from enum import IntEnum
from typing import Any, Dict, Optional, Union

from loguru import logger

from arango.exceptions import CollectionCreateError, CollectionListError

from arangomap.core.errors import MissingCollectionError, StoreError
from arangomap.core.schema import SchemaKind, require_kind
from arangomap.core.utils.connection import Store

# ERROR_ARANGO_DUPLICATE_NAME
DUPLICATE_NAME = 1207


class CollectionType(IntEnum):
    DOCUMENT = 2
    EDGE = 3

    @classmethod
    def coerce(cls, value: Union["CollectionType", SchemaKind, str, int, None]) -> "CollectionType":
        """Accept 2/3, 'document'/'edge' or a SchemaKind. Unknown values mean DOCUMENT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, SchemaKind):
            return cls.EDGE if value is SchemaKind.EDGE else cls.DOCUMENT
        if isinstance(value, str):
            return cls.EDGE if value.lower() == "edge" else cls.DOCUMENT
        if isinstance(value, int) and value in (2, 3):
            return cls(value)
        return cls.DOCUMENT


def collection_info(store: Store, name: str) -> Optional[Dict[str, Any]]:
    """Server metadata for collection `name`, or None if it does not exist."""
    try:
        collections = store.db.collections()
    except CollectionListError as e:
        logger.error(f"Failed to list collections: {e}")
        raise StoreError.from_arango(e, "Failed to list collections") from e

    for info in collections:
        if info["name"] == name:
            return info
    return None


def collection_exists(
    store: Store,
    name: str,
    kind: Union[CollectionType, SchemaKind, str, int, None] = CollectionType.DOCUMENT,
) -> bool:
    """
    Check if a collection exists.

    True only if the collection exists, is not a system collection and, when
    `kind` is given, has exactly that type. Pass `kind=None` to skip the type
    check.
    """
    info = collection_info(store, str(name))
    if info is None or info.get("system", False):
        return False
    if kind is None:
        return True
    expected = CollectionType.coerce(kind)
    actual = CollectionType.coerce(info.get("type"))
    return actual == expected


def create_collection(store: Store, name: str, kind: CollectionType) -> bool:
    """
    Create a collection.

    Returns:
        bool: True if it was created, False if the name was already taken.
    """
    try:
        store.db.create_collection(name, edge=kind is CollectionType.EDGE)
        logger.info(f"Created {kind.name.lower()} collection '{name}'")
        return True
    except CollectionCreateError as e:
        if getattr(e, "error_code", None) == DUPLICATE_NAME:
            logger.debug(f"Collection '{name}' already exists")
            return False
        logger.error(f"Failed to create collection '{name}': {e}")
        raise StoreError.from_arango(e, f"Failed to create collection '{name}'") from e


def ensure_collection(
    store: Store,
    name: str,
    kind: Union[CollectionType, SchemaKind, str, int] = CollectionType.DOCUMENT,
) -> bool:
    """
    Make sure collection `name` exists with the right type.

    The check and the create are not atomic, so a duplicate name on create
    is re-checked: it only counts as existing if the type matches.

    Returns:
        bool: True if the collection already existed, False if it was created.

    Raises:
        MissingCollectionError: If it is missing and the store is static.
        StoreError: If a collection with that name exists with the other type.
    """
    kind = CollectionType.coerce(kind)
    if collection_exists(store, name, kind):
        return True

    if store.static:
        raise MissingCollectionError(
            name, f"Collection ({name}) does not exist. Maybe a migration is missing."
        )

    if create_collection(store, name, kind):
        return False

    if collection_exists(store, name, kind):
        return True

    logger.error(f"Collection '{name}' exists with a different type, expected {kind.name.lower()}")
    raise StoreError(
        f"Collection '{name}' exists with a different type, expected {kind.name.lower()}",
        http_code=409,
        error_code=DUPLICATE_NAME,
    )


def ensure_collection_for(store: Store, model: Any) -> str:
    """Ensure the collection backing a record type exists; returns its name."""
    record_type = require_kind(model, SchemaKind.DOCUMENT)
    ensure_collection(store, record_type.source, record_type.kind)
    return record_type.source


def require_collection(
    store: Store,
    name: str,
    kind: Union[CollectionType, SchemaKind, str, int] = CollectionType.DOCUMENT,
) -> None:
    """Raise MissingCollectionError unless the collection exists with `kind`."""
    if not collection_exists(store, name, kind):
        raise MissingCollectionError(name, f"Collection {name} does not exist")
