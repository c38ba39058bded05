"""
Convert raw query output into record instances.

Raw documents carry the wire identity keys `_id`, `_key` and `_rev`. The key
becomes the logical `id`, the other two are dropped, and remaining keys are
matched against the model's declared fields (by alias or name). Undeclared
keys are ignored.

Sample input:
    raw_to_record(
        {"_id": "users/12345", "_key": "12345", "_rev": "_bHZ8PAK---",
         "first_name": "John", "last_name": "Smith"},
        User,
    )

Expected output:
    User(id='12345', first_name='John', last_name='Smith')
"""

from typing import Any, Dict, List, Type, Union

from pydantic import BaseModel, ValidationError

from arangomap.core.errors import InvalidInputError
from arangomap.core.identifiers import IDENTITY_KEYS
from arangomap.core.schema import lookup


def _field_names_by_wire_name(model: Type[BaseModel]) -> Dict[str, str]:
    names = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


def raw_to_record(raw: Union[Dict[str, Any], List[Dict[str, Any]]], model: Any) -> Any:
    """
    Materialize one raw document, or a list of them in order, as `model` instances.

    Raises:
        InvalidInputError: If a document lacks the identity keys, is not a
            mapping, fails model validation, or `model` is not registered.
    """
    record_type = lookup(model)
    if record_type is None:
        raise InvalidInputError(f"{model!r} is not a registered record type")

    if isinstance(raw, list):
        return [raw_to_record(item, record_type.model) for item in raw]

    if not isinstance(raw, dict):
        raise InvalidInputError(f"Expected a document map, got {type(raw).__name__}")

    missing = [k for k in IDENTITY_KEYS if k not in raw]
    if missing:
        raise InvalidInputError(f"Document is missing identity keys: {', '.join(missing)}")

    names = _field_names_by_wire_name(record_type.model)
    values = {"id": raw["_key"]}
    for key, value in raw.items():
        if key in IDENTITY_KEYS:
            continue
        name = names.get(str(key))
        if name is not None and name != "id":
            values[name] = value

    try:
        return record_type.model.model_validate(values)
    except ValidationError as e:
        raise InvalidInputError(f"Cannot build {record_type.name} from document: {e}") from e
