"""
Record types and their classification.

Application records are pydantic models registered against a collection
(`source`). Registration computes a `RecordType` descriptor once: the ordered
wire field names, the `belongs_to` associations and the schema kind
(document or edge). Classification afterwards is a dictionary lookup and never
touches the network.

Links:
- Pydantic: https://docs.pydantic.dev/
- ArangoDB edges: https://docs.arangodb.com/stable/concepts/data-models/#graph-model

Sample input:
    @document("users")
    class User(Record):
        first_name: str = ""

    @edge("user_posts", from_=User, to=Post)
    class UserPosts(EdgeRecord):
        type: str = ""

    classify(UserPosts)

Expected output:
    SchemaKind.EDGE
"""

import threading
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from arangomap.core.errors import NotASchemaError, NotAnEdgeError

FROM_FIELD = "_from"
TO_FIELD = "_to"
EDGE_FIELDS = (FROM_FIELD, TO_FIELD)


class Record(BaseModel):
    """Base model for stored records. `id` holds the document `_key`."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None


class EdgeRecord(Record):
    """Base model for edge records, carrying the two reserved reference fields."""

    from_id: Optional[str] = Field(default=None, alias=FROM_FIELD)
    to_id: Optional[str] = Field(default=None, alias=TO_FIELD)


class SchemaKind(str, Enum):
    DOCUMENT = "document"
    EDGE = "edge"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class Association:
    """A belongs_to association: `owner_key` on this record points at `target`."""

    name: str
    owner_key: str
    target: Type[BaseModel]


@dataclass(frozen=True)
class RecordType:
    """Capability descriptor computed once when a model is registered."""

    model: Type[BaseModel]
    source: str
    fields: Tuple[str, ...]
    associations: Tuple[Association, ...]
    kind: SchemaKind

    @property
    def name(self) -> str:
        return self.model.__name__

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.model)

    def association_for(self, owner_key: str) -> Optional[Association]:
        for assoc in self.associations:
            if assoc.owner_key == owner_key:
                return assoc
        return None

    @property
    def from_type(self) -> Optional[Type[BaseModel]]:
        assoc = self.association_for(FROM_FIELD)
        return assoc.target if assoc else None

    @property
    def to_type(self) -> Optional[Type[BaseModel]]:
        assoc = self.association_for(TO_FIELD)
        return assoc.target if assoc else None

    @property
    def foreign_keys(self) -> List[str]:
        return [assoc.owner_key for assoc in self.associations]


def qualified_name(model: type) -> str:
    return f"{model.__module__}.{model.__name__}"


def model_wire_fields(model: Type[BaseModel]) -> Tuple[str, ...]:
    """Declared field names of a model, using the wire name (alias) where set."""
    names = []
    for name, info in model.model_fields.items():
        if name == "id":
            names.append("_key")
        else:
            names.append(info.alias or name)
    return tuple(names)


def _compute_kind(fields: Iterable[str], associations: Iterable[Association]) -> SchemaKind:
    fields = set(fields)
    owners = {assoc.owner_key for assoc in associations}
    if all(f in fields and f in owners for f in EDGE_FIELDS):
        return SchemaKind.EDGE
    return SchemaKind.DOCUMENT


# model -> registry that registered it
_MODEL_REGISTRIES: "weakref.WeakKeyDictionary[type, SchemaRegistry]" = weakref.WeakKeyDictionary()


class SchemaRegistry:
    """
    Registry of record types.

    Types are registered once at import time and never mutated. The only
    runtime registration is `register_if_absent`, used when an edge type is
    synthesized on demand; it is guarded by a lock so concurrent callers
    get the same type.
    """

    def __init__(self):
        self._types: Dict[type, RecordType] = {}
        self._by_name: Dict[str, RecordType] = {}
        self._lock = threading.RLock()

    def __contains__(self, model: Any) -> bool:
        return self.lookup(model) is not None

    def __len__(self) -> int:
        return len(self._types)

    def register(
        self,
        model: Type[BaseModel],
        source: str,
        belongs_to: Optional[Iterable[Association]] = None,
    ) -> RecordType:
        """Register `model` as stored in collection `source`."""
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise NotASchemaError(model)

        associations = tuple(belongs_to or ())
        fields = model_wire_fields(model)
        record_type = RecordType(
            model=model,
            source=source,
            fields=fields,
            associations=associations,
            kind=_compute_kind(fields, associations),
        )

        with self._lock:
            existing = self._types.get(model)
            if existing is not None:
                return existing
            self._types[model] = record_type
            self._by_name[record_type.qualified_name] = record_type
            _MODEL_REGISTRIES[model] = self

        logger.debug(
            f"Registered {record_type.kind.value} type {record_type.qualified_name} -> '{source}'"
        )
        return record_type

    def register_if_absent(
        self, name: str, factory: Callable[[], Tuple[Type[BaseModel], str, Iterable[Association]]]
    ) -> RecordType:
        """
        Return the type registered under qualified `name`, creating it with
        `factory` if there is none. `factory` runs at most once per name.
        """
        with self._lock:
            existing = self._by_name.get(name)
            if existing is not None:
                return existing
            model, source, belongs_to = factory()
            return self.register(model, source, belongs_to)

    def lookup(self, obj: Any) -> Optional[RecordType]:
        """Find the descriptor for a model class, an instance, or a descriptor."""
        if isinstance(obj, RecordType):
            return obj
        if isinstance(obj, str):
            return self._by_name.get(obj)
        if isinstance(obj, BaseModel):
            obj = type(obj)
        if isinstance(obj, type):
            return self._types.get(obj)
        return None

    def by_source(self, source: str) -> Optional[RecordType]:
        """First registered document type stored in collection `source`."""
        for record_type in self._types.values():
            if record_type.source == source and record_type.kind is SchemaKind.DOCUMENT:
                return record_type
        return None

    def require(self, obj: Any) -> RecordType:
        record_type = self.lookup(obj)
        if record_type is None:
            raise NotASchemaError(obj)
        return record_type

    def source(self, obj: Any) -> str:
        return self.require(obj).source

    def document(self, source: str, belongs_to: Optional[Iterable[Association]] = None):
        """Class decorator registering a document record type."""

        def decorator(model):
            self.register(model, source, belongs_to)
            return model

        return decorator

    def edge(
        self,
        source: str,
        from_: Type[BaseModel],
        to: Type[BaseModel],
        belongs_to: Optional[Iterable[Association]] = None,
    ):
        """Class decorator registering an edge record type between `from_` and `to`."""

        def decorator(model):
            if not all(f in model_wire_fields(model) for f in EDGE_FIELDS):
                raise NotAnEdgeError(model)
            associations = [
                Association("from", FROM_FIELD, from_),
                Association("to", TO_FIELD, to),
            ]
            associations.extend(belongs_to or ())
            self.register(model, source, associations)
            return model

        return decorator


registry = SchemaRegistry()


def registry_for(obj: Any) -> SchemaRegistry:
    """The registry a model was registered with, or the default registry."""
    if isinstance(obj, RecordType):
        obj = obj.model
    if isinstance(obj, BaseModel):
        obj = type(obj)
    if isinstance(obj, type):
        return _MODEL_REGISTRIES.get(obj, registry)
    return registry


def document(source: str, belongs_to: Optional[Iterable[Association]] = None):
    return registry.document(source, belongs_to)


def edge(
    source: str,
    from_: Type[BaseModel],
    to: Type[BaseModel],
    belongs_to: Optional[Iterable[Association]] = None,
):
    return registry.edge(source, from_, to, belongs_to)


def lookup(obj: Any) -> Optional[RecordType]:
    return registry_for(obj).lookup(obj)


def classify(obj: Any) -> SchemaKind:
    """Classify a record type. Unregistered values are UNCLASSIFIED."""
    record_type = lookup(obj)
    if record_type is None:
        return SchemaKind.UNCLASSIFIED
    return record_type.kind


def schema_type(obj: Any) -> Optional[str]:
    """'document', 'edge', or None when the value is not a record type."""
    kind = classify(obj)
    return None if kind is SchemaKind.UNCLASSIFIED else kind.value


def schema_type_or_raise(obj: Any) -> str:
    kind = schema_type(obj)
    if kind is None:
        raise NotASchemaError(obj)
    return kind


def is_edge(obj: Any) -> bool:
    return classify(obj) is SchemaKind.EDGE


def is_document(obj: Any) -> bool:
    return classify(obj) is SchemaKind.DOCUMENT


def require_kind(obj: Any, expected: SchemaKind) -> RecordType:
    """
    Guard used at the start of graph and write operations. Expecting
    DOCUMENT only requires `obj` to be registered, since edges are stored
    as documents too.

    Raises:
        NotASchemaError: If `obj` is not a registered record type.
        NotAnEdgeError: If an edge was expected and `obj` is a document.
    """
    record_type = lookup(obj)
    if record_type is None:
        raise NotASchemaError(obj)
    if expected is SchemaKind.EDGE and record_type.kind is not SchemaKind.EDGE:
        raise NotAnEdgeError(record_type.model)
    return record_type
