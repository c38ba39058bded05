"""
Tests for edge creation, lookup and deletion between stored records.
"""

import pytest

from arango.exceptions import DocumentDeleteError, DocumentInsertError

from arangomap.core.db.relationships import create_edge, delete_all_edges, find_edges
from arangomap.core.edges import edge_type
from arangomap.core.errors import (
    InvalidInputError,
    InvalidReferenceError,
    MissingCollectionError,
    NotAnEdgeError,
)
from arangomap.core.results import Conflict
from arangomap.core.schema import SchemaKind, classify


def edge_doc(key, from_id, to_id, **fields):
    return {
        "_id": f"edges/{key}",
        "_key": key,
        "_rev": "_r",
        "_from": from_id,
        "_to": to_id,
        **fields,
    }


@pytest.fixture
def vertices(collections, models):
    collections.add("users")
    collections.add("posts")
    return models.User(id="12345", first_name="John"), models.Post(id="54321", title="Hi")


@pytest.fixture
def handle(db):
    return db.collection.return_value


def test_create_edge_synthesizes_type_and_collection(store, db, handle, collections, vertices):
    user, post = vertices
    new = edge_doc("789", "users/12345", "posts/54321")
    handle.insert.return_value = {"_id": "post_user/789", "_key": "789", "_rev": "_r", "new": new}

    result = create_edge(store, user, post)

    db.create_collection.assert_called_once_with("post_user", edge=True)
    assert "post_user" in collections.names()
    handle.insert.assert_called_once_with(
        {"_from": "users/12345", "_to": "posts/54321"}, return_new=True
    )
    assert type(result).__name__ == "PostUser"
    assert classify(type(result)) is SchemaKind.EDGE
    assert result.id == "789"
    assert result.from_id == "users/12345"
    assert result.to_id == "posts/54321"


def test_create_edge_reuses_synthesized_type(store, handle, vertices, registry, models):
    user, post = vertices
    handle.insert.return_value = {"new": edge_doc("1", "users/12345", "posts/54321")}

    first = create_edge(store, user, post)
    second = create_edge(store, post, user)

    assert type(first) is type(second)
    assert type(first) is edge_type(models.User, models.Post, create=False, registry=registry)


def test_create_edge_with_explicit_type(store, db, handle, vertices, models):
    user, post = vertices
    new = edge_doc("9", "users/12345", "posts/54321", type="wrote")
    handle.insert.return_value = {"new": new}

    result = create_edge(store, user, post, edge=models.UserPosts, fields={"type": "wrote"})

    db.create_collection.assert_called_once_with("user_posts", edge=True)
    handle.insert.assert_called_once_with(
        {"type": "wrote", "_from": "users/12345", "_to": "posts/54321"}, return_new=True
    )
    assert isinstance(result, models.UserPosts)
    assert result.type == "wrote"


def test_create_edge_drops_fields_for_synthesized_type(store, handle, vertices):
    user, post = vertices
    handle.insert.return_value = {"new": edge_doc("1", "users/12345", "posts/54321")}

    create_edge(store, user, post, fields={"type": "wrote"})

    assert "type" not in handle.insert.call_args.args[0]


def test_create_edge_from_identifiers(store, handle, vertices):
    handle.insert.return_value = {"new": edge_doc("1", "users/12345", "posts/54321")}
    result = create_edge(store, "users/12345", "posts/54321", collection_name="authored")
    assert type(result).__name__ == "Authored"


def test_create_edge_unique_conflict(store, handle, vertices, models, make_error):
    user, post = vertices
    handle.insert.side_effect = make_error(DocumentInsertError, 409, 1210, "unique constraint violated")
    assert isinstance(create_edge(store, user, post, edge=models.UserPosts), Conflict)


def test_create_edge_requires_vertex_collections(store, handle, collections, models):
    collections.add("users")
    with pytest.raises(MissingCollectionError):
        create_edge(store, models.User(id="1"), models.Post(id="2"))
    handle.insert.assert_not_called()


def test_create_edge_static_store_needs_edge_collection(store, db, handle, vertices):
    store.static = True
    user, post = vertices
    with pytest.raises(MissingCollectionError):
        create_edge(store, user, post)
    db.create_collection.assert_not_called()


def test_create_edge_rejects_document_types(store, vertices, models):
    user, post = vertices
    with pytest.raises(NotAnEdgeError):
        create_edge(store, user, post, edge=models.User)


def test_create_edge_rejects_unstored_records(store, vertices, models):
    _, post = vertices
    with pytest.raises(InvalidReferenceError):
        create_edge(store, models.User(first_name="New"), post)


def test_create_edge_invalid_fields(store, vertices, models):
    user, post = vertices
    with pytest.raises(InvalidInputError):
        create_edge(store, user, post, edge=models.UserPosts, fields={"type": ["not", "a", "string"]})


def test_find_edges_query(store, db, vertices, models):
    user, post = vertices
    db.aql.execute.return_value = iter([edge_doc("9", "users/12345", "posts/54321", type="wrote")])

    found = find_edges(store, user, post, edge=models.UserPosts, conditions={"type": "wrote"})

    query = db.aql.execute.call_args.args[0]
    bind_vars = db.aql.execute.call_args.kwargs["bind_vars"]
    assert query == (
        "FOR e IN @@collection FILTER e._from == @from_id AND e._to == @to_id"
        " FILTER e.@attr0 == @value0 RETURN e"
    )
    assert bind_vars == {
        "@collection": "user_posts",
        "from_id": "users/12345",
        "to_id": "posts/54321",
        "attr0": "type",
        "value0": "wrote",
    }
    assert [e.id for e in found] == ["9"]
    assert isinstance(found[0], models.UserPosts)


def test_delete_all_edges(store, db, handle, collections, vertices, models, make_error):
    collections.add("user_posts", edge=True)
    user, post = vertices
    db.aql.execute.return_value = iter(
        [
            edge_doc("1", "users/12345", "posts/54321"),
            edge_doc("2", "users/12345", "posts/54321"),
        ]
    )
    handle.delete.side_effect = [
        {"_key": "1"},
        make_error(DocumentDeleteError, 404, 1202, "document not found"),
    ]

    assert delete_all_edges(store, user, post, edge=models.UserPosts) == 1
    assert [c.args[0] for c in handle.delete.call_args_list] == ["1", "2"]


def test_delete_all_edges_missing_collection(store, db, vertices, models):
    user, post = vertices
    with pytest.raises(MissingCollectionError):
        delete_all_edges(store, user, post, edge=models.UserPosts)
    db.aql.execute.assert_not_called()
