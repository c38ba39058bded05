"""
Exception taxonomy for arangomap.

Fatal conditions are raised as exceptions. Recoverable store outcomes
(unique conflicts, stale keys) are returned as values instead, see
`arangomap.core.results`.

Sample input:
    raise InvalidIdentifierError("users", "missing '/' separator")

Expected output:
    arangomap.core.errors.InvalidIdentifierError: Invalid document identifier 'users': missing '/' separator
"""

from typing import Any, Optional


class ArangoMapError(Exception):
    """Base class for all arangomap errors."""


class NotASchemaError(ArangoMapError, TypeError):
    """The supplied type is not a registered record type."""

    def __init__(self, obj: Any):
        self.obj = obj
        name = getattr(obj, "__name__", repr(obj))
        super().__init__(f"{name} is not a registered record type")


class NotAnEdgeError(ArangoMapError, TypeError):
    """The supplied type is a record type but not an edge."""

    def __init__(self, obj: Any):
        self.obj = obj
        name = getattr(obj, "__name__", repr(obj))
        super().__init__(f"{name} is not an edge record type")


class InvalidIdentifierError(ArangoMapError, ValueError):
    """A string could not be parsed as `collection/key`."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid document identifier {value!r}: {reason}")


class InvalidReferenceError(ArangoMapError, ValueError):
    """A record or value could not be turned into a document identifier."""


class InvalidInputError(ArangoMapError, ValueError):
    """Raw query output could not be materialized into a record."""


class UnsupportedOperationError(ArangoMapError):
    """Update or delete was requested with a filter other than the key."""


class MissingCollectionError(ArangoMapError):
    """A required collection does not exist and may not be created."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Collection ({name}) does not exist")


class StoreError(ArangoMapError):
    """Any store-side failure that is not downgraded to an outcome."""

    def __init__(
        self,
        message: str,
        http_code: Optional[int] = None,
        error_code: Optional[int] = None,
    ):
        self.message = message
        self.http_code = http_code
        self.error_code = error_code
        super().__init__(f"Store error (HTTP {http_code}, ERR {error_code}): {message}")

    @classmethod
    def from_arango(cls, error: Exception, context: str) -> "StoreError":
        """Build from a python-arango server exception."""
        message = getattr(error, "error_message", None) or str(error)
        return cls(
            f"{context}: {message}",
            http_code=getattr(error, "http_code", None),
            error_code=getattr(error, "error_code", None),
        )
