"""
Shared fixtures for the arangomap test suite.

The database handle is a MagicMock that keeps a small in-memory collection
list, so collection provisioning can be observed without a running server.
Every test gets its own SchemaRegistry.

Links:
- pytest fixtures: https://docs.pytest.org/en/stable/how-to/fixtures.html
- unittest.mock: https://docs.python.org/3/library/unittest.mock.html
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from arangomap.core.schema import Association, EdgeRecord, Record, SchemaRegistry
from arangomap.core.utils.connection import Store


def arango_error(error_cls, http_code: int, error_code: Optional[int], message: str = "error"):
    """Build a python-arango server exception without a server."""
    resp = MagicMock()
    resp.status_code = http_code
    resp.status_text = "Error"
    resp.error_code = error_code
    resp.error_message = message
    return error_cls(resp, MagicMock())


class FakeCollections:
    """Backs db.collections()/db.create_collection() with a plain list."""

    def __init__(self):
        self.items: List[Dict[str, Any]] = []

    def add(self, name: str, edge: bool = False, system: bool = False):
        self.items.append(
            {
                "id": str(len(self.items) + 1),
                "name": name,
                "system": system,
                "type": "edge" if edge else "document",
                "status": "loaded",
            }
        )

    def names(self) -> List[str]:
        return [c["name"] for c in self.items]

    def create(self, name: str, edge: bool = False, **kwargs):
        self.add(name, edge=edge)
        return MagicMock()


@pytest.fixture
def collections() -> FakeCollections:
    return FakeCollections()


@pytest.fixture
def db(collections) -> MagicMock:
    """Fixture for a mocked python-arango database handle."""
    db = MagicMock()
    db.collections.side_effect = lambda: list(collections.items)
    db.create_collection.side_effect = collections.create
    return db


@pytest.fixture
def registry() -> SchemaRegistry:
    return SchemaRegistry()


@pytest.fixture
def store(db, registry) -> Store:
    return Store(db=db, registry=registry)


@pytest.fixture
def models(registry):
    """
    User, Post and UserPosts record types registered in the test registry.

    UserPosts carries an extra `post_id` foreign key that must never reach
    the store.
    """

    @registry.document("users")
    class User(Record):
        first_name: str = ""
        last_name: str = ""
        age: Optional[int] = None

    @registry.document("posts")
    class Post(Record):
        title: str = ""

    @registry.edge("user_posts", from_=User, to=Post, belongs_to=[Association("post", "post_id", Post)])
    class UserPosts(EdgeRecord):
        type: str = ""
        post_id: Optional[str] = None

    return SimpleNamespace(User=User, Post=Post, UserPosts=UserPosts)


@pytest.fixture
def make_error():
    return arango_error
