"""
Core ArangoDB CRUD operations for registered record types.

This module turns typed writes into document API calls:
- Insert (single and bulk) with lazy collection provisioning
- Update and delete, addressed by document key only
- Edge writes, rewriting `_from`/`_to` keys into full document identifiers

Each write goes Validated -> CollectionEnsured -> Sent and ends in `Ok`,
`Conflict` (unique constraint), `Stale` (404 on a keyed target) or a raised
error. Nothing is retried here.

Links:
- ArangoDB Python Driver: https://docs.python-arango.com/
- ArangoDB document API: https://docs.arangodb.com/stable/develop/http-api/documents/

Sample input:
    insert(store, UserPosts, {"_from": "12345", "_to": "posts/54321"}, returning=["id", "_from"])

Expected output:
    Ok(fields=[('id', '9876'), ('_from', 'users/12345')], document={...})
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger
from pydantic import BaseModel

from arango.exceptions import (
    DocumentDeleteError,
    DocumentInsertError,
    DocumentUpdateError,
)

from arangomap.core.collections import ensure_collection_for
from arangomap.core.errors import (
    InvalidIdentifierError,
    InvalidReferenceError,
    StoreError,
    UnsupportedOperationError,
)
from arangomap.core.identifiers import (
    IDENTITY_KEYS,
    format_id,
    id_from_record,
    is_valid_key,
    parse_id,
    wire_name,
)
from arangomap.core.materialize import raw_to_record
from arangomap.core.results import Conflict, Ok, Stale, WriteResult
from arangomap.core.schema import (
    EDGE_FIELDS,
    RecordType,
    SchemaKind,
    lookup,
    require_kind,
)
from arangomap.core.utils.connection import Store
from arangomap.core.utils.log_utils import truncate_large_value

# ERROR_ARANGO_UNIQUE_CONSTRAINT_VIOLATED
UNIQUE_CONSTRAINT_VIOLATED = 1210

Fields = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


def to_document(fields: Fields) -> Dict[str, Any]:
    """Field value set (mapping or ordered pairs) -> dict, keeping order."""
    if isinstance(fields, Mapping):
        return dict(fields)
    return {name: value for name, value in fields}


def key_to_id(value: Any, target: Any) -> str:
    """
    Turn an edge endpoint into a full document identifier.

    A bare key is prefixed with the target type's collection; a value that
    already contains '/' must be a valid identifier and is left untouched.
    """
    if isinstance(value, BaseModel):
        return id_from_record(value)
    if not isinstance(value, str):
        raise InvalidReferenceError(f"Invalid edge endpoint {value!r}")
    if "/" in value:
        try:
            return str(parse_id(value))
        except InvalidIdentifierError as e:
            raise InvalidReferenceError(str(e)) from e
    if not is_valid_key(value):
        raise InvalidReferenceError(f"Invalid document key {value!r}")

    target_type = lookup(target)
    if target_type is None:
        raise InvalidReferenceError(f"Cannot resolve collection for key {value!r}")
    return format_id(target_type.source, value)


def process_fields(
    record_type: RecordType, document: Dict[str, Any], partial: bool = False
) -> Dict[str, Any]:
    """
    Prepare fields for the store.

    Documents pass through. For edges, foreign keys other than `_from`/`_to`
    are dropped and both endpoints are rewritten to document identifiers.
    With `partial` (updates) the endpoints are only rewritten when present.
    """
    if record_type.kind is not SchemaKind.EDGE:
        return document

    stripped = [fk for fk in record_type.foreign_keys if fk not in EDGE_FIELDS]
    document = {k: v for k, v in document.items() if k not in stripped}

    for endpoint, target in (("_from", record_type.from_type), ("_to", record_type.to_type)):
        if endpoint not in document:
            if partial:
                continue
            raise InvalidReferenceError(f"{record_type.name} requires '{endpoint}'")
        document[endpoint] = key_to_id(document[endpoint], target)

    return document


def should_return_new(returning: Iterable[str], return_new: bool = False) -> bool:
    """Ask the server for the new document unless only identity keys are wanted."""
    return return_new or any(wire_name(f) not in IDENTITY_KEYS for f in returning)


def _extract_doc(response: Dict[str, Any], return_new: bool) -> Dict[str, Any]:
    if return_new:
        return response["new"]
    return {k: v for k, v in response.items() if k in IDENTITY_KEYS}


def _single_doc_result(doc: Dict[str, Any], returning: Iterable[str]) -> Ok:
    return Ok(fields=[(f, doc.get(wire_name(f))) for f in returning], document=doc)


def _key_from_filters(filters: Fields) -> str:
    """Only `[("_key", key)]` is supported; anything else fails before any I/O."""
    pairs = list(filters.items()) if isinstance(filters, Mapping) else list(filters)
    if len(pairs) != 1 or wire_name(pairs[0][0]) != "_key":
        names = ", ".join(str(p[0]) for p in pairs) if pairs else "nothing"
        raise UnsupportedOperationError(
            f"Only filtering by _key is supported for update/delete, got: {names}"
        )
    key = pairs[0][1]
    if not is_valid_key(key):
        raise InvalidReferenceError(f"Invalid document key {key!r}")
    return key


def _write_error(
    error: Exception,
    action: str,
    collection: str,
    key: Optional[str] = None,
    stale_on_404: bool = False,
) -> WriteResult:
    """Downgrade a store error to Conflict/Stale, or raise it as StoreError."""
    if getattr(error, "error_code", None) == UNIQUE_CONSTRAINT_VIOLATED:
        message = getattr(error, "error_message", None) or str(error)
        logger.debug(f"{action} on '{collection}' hit a unique constraint: {message}")
        return Conflict(errors=[("unique", message)])

    if stale_on_404 and getattr(error, "http_code", None) == 404:
        logger.debug(f"{action} on '{collection}/{key}' is stale")
        return Stale(collection=collection, key=key)

    logger.error(f"{action} on '{collection}' failed: {error}")
    raise StoreError.from_arango(error, f"{action} on '{collection}' failed") from error


def insert(
    store: Store,
    model: Any,
    fields: Fields,
    returning: Sequence[str] = (),
    return_new: bool = False,
) -> WriteResult:
    """
    Insert a single document.

    Args:
        store: Store connection.
        model: Registered record type.
        fields: Field value set using wire names (`_key`, `_from`, ...).
        returning: Field names to read back (logical or wire names).
        return_new: Always request the server's full new document.

    Returns:
        Ok with the returning values, or Conflict on a unique violation.

    Raises:
        NotASchemaError: If `model` is not registered.
        InvalidReferenceError: If edge endpoints cannot be resolved.
        MissingCollectionError: If the collection is missing on a static store.
        StoreError: For any other store failure.
    """
    record_type = require_kind(model, SchemaKind.DOCUMENT)
    document = process_fields(record_type, to_document(fields))
    collection = record_type.source

    logger.debug(f"insert into '{collection}': {truncate_large_value(document)}")

    ensure_collection_for(store, record_type)

    return_new = should_return_new(returning, return_new)
    try:
        response = store.db.collection(collection).insert(document, return_new=return_new)
    except DocumentInsertError as e:
        return _write_error(e, "insert", collection)

    return _single_doc_result(_extract_doc(response, return_new), returning)


def insert_all(
    store: Store,
    model: Any,
    rows: Iterable[Fields],
    returning: Sequence[str] = (),
    return_new: bool = False,
) -> Tuple[int, Optional[List[List[Any]]]]:
    """
    Insert many documents in one bulk request.

    Returns:
        tuple: (inserted count, returning rows) where the rows are None when
        no returning fields were requested.

    Raises:
        StoreError: If the request or any single document fails.
    """
    record_type = require_kind(model, SchemaKind.DOCUMENT)
    documents = [process_fields(record_type, to_document(row)) for row in rows]
    collection = record_type.source

    logger.debug(f"insert_all into '{collection}': {truncate_large_value(documents)}")

    ensure_collection_for(store, record_type)

    return_new = should_return_new(returning, return_new)
    try:
        results = store.db.collection(collection).insert_many(documents, return_new=return_new)
    except DocumentInsertError as e:
        logger.error(f"insert_all into '{collection}' failed: {e}")
        raise StoreError.from_arango(e, f"insert_all into '{collection}' failed") from e

    errors = [r for r in results if isinstance(r, Exception)]
    if errors:
        logger.error(f"insert_all into '{collection}': {len(errors)} of {len(results)} documents failed")
        raise StoreError.from_arango(errors[0], f"insert_all into '{collection}' failed")

    if not returning:
        return len(results), None

    docs = [_extract_doc(r, return_new) for r in results]
    return len(docs), [[doc.get(wire_name(f)) for f in returning] for doc in docs]


def update(
    store: Store,
    model: Any,
    fields: Fields,
    filters: Fields,
    returning: Sequence[str] = (),
    return_new: bool = False,
) -> WriteResult:
    """
    Patch a single document addressed by key.

    Args:
        filters: Must be exactly `[("_key", key)]` (or `{"_key": key}`).

    Returns:
        Ok, Conflict on a unique violation, or Stale if the key is gone.

    Raises:
        UnsupportedOperationError: For any other filter shape, before any I/O.
    """
    key = _key_from_filters(filters)
    record_type = require_kind(model, SchemaKind.DOCUMENT)
    document = process_fields(record_type, to_document(fields), partial=True)
    document.pop("_key", None)
    collection = record_type.source

    logger.debug(f"update '{collection}/{key}': {truncate_large_value(document)}")

    ensure_collection_for(store, record_type)

    return_new = should_return_new(returning, return_new)
    try:
        response = store.db.collection(collection).update(
            {"_key": key, **document}, check_rev=False, return_new=return_new
        )
    except DocumentUpdateError as e:
        return _write_error(e, "update", collection, key, stale_on_404=True)

    return _single_doc_result(_extract_doc(response, return_new), returning)


def delete(store: Store, model: Any, filters: Fields) -> WriteResult:
    """
    Delete a single document addressed by key.

    Returns:
        Ok, or Stale if the server reports the document as not found.

    Raises:
        UnsupportedOperationError: For any filter other than the key, before any I/O.
    """
    key = _key_from_filters(filters)
    record_type = require_kind(model, SchemaKind.DOCUMENT)
    collection = record_type.source

    logger.debug(f"delete '{collection}/{key}'")

    try:
        store.db.collection(collection).delete(key)
    except DocumentDeleteError as e:
        return _write_error(e, "delete", collection, key, stale_on_404=True)

    return Ok()


# ---- Record-level helpers ----


def dump_fields(instance: BaseModel) -> Dict[str, Any]:
    """Record instance -> field value set with wire names, unset values left out."""
    document = instance.model_dump(by_alias=True, exclude_none=True)
    if "id" in document:
        document["_key"] = document.pop("id")
    return document


def to_wire_fields(model: Any, changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename logical field names (`id`, `from_id`, ...) to wire names."""
    model_fields = model.model_fields
    document = {}
    for name, value in changes.items():
        info = model_fields.get(name)
        document[(info.alias if info and info.alias else wire_name(name))] = value
    return document


def insert_record(store: Store, instance: BaseModel) -> Union[BaseModel, Conflict]:
    """Insert a record instance and return the stored version."""
    model = type(instance)
    result = insert(store, model, dump_fields(instance), return_new=True)
    if isinstance(result, Ok):
        return raw_to_record(result.document, model)
    return result


def update_record(
    store: Store, instance: BaseModel, changes: Mapping[str, Any]
) -> Union[BaseModel, Conflict, Stale]:
    """Apply `changes` to a stored record and return the updated version."""
    model = type(instance)
    if instance.id is None:
        raise InvalidReferenceError(f"{model.__name__} instance has no key")
    result = update(
        store, model, to_wire_fields(model, changes), [("_key", instance.id)], return_new=True
    )
    if isinstance(result, Ok):
        return raw_to_record(result.document, model)
    return result


def delete_record(store: Store, instance: BaseModel) -> WriteResult:
    """Delete a stored record by its key."""
    if instance.id is None:
        raise InvalidReferenceError(f"{type(instance).__name__} instance has no key")
    return delete(store, type(instance), [("_key", instance.id)])
