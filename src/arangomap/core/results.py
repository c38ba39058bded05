"""
Outcomes of a single write call.

A write either succeeds (`Ok`), hits a unique constraint (`Conflict`) or
targets a document that is gone (`Stale`). Both of the latter are expected
outcomes that callers branch on; anything else is raised as an error.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Ok:
    """Successful write. `fields` holds the requested returning values in order."""

    fields: List[Tuple[str, Any]] = field(default_factory=list)
    document: Optional[Dict[str, Any]] = None

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.fields)


@dataclass(frozen=True)
class Conflict:
    """Store rejected the write. `errors` pairs a constraint with its message."""

    errors: List[Tuple[str, str]]

    @property
    def message(self) -> str:
        return "; ".join(f"{constraint}: {msg}" for constraint, msg in self.errors)


@dataclass(frozen=True)
class Stale:
    """The keyed document no longer exists on the server."""

    collection: str
    key: str


WriteResult = Union[Ok, Conflict, Stale]
