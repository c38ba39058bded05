"""
Tests for turning raw query output into record instances.
"""

import pytest

from arangomap.core.db.crud import dump_fields
from arangomap.core.errors import InvalidInputError
from arangomap.core.identifiers import id_from_record
from arangomap.core.materialize import raw_to_record


def test_raw_to_record(models):
    raw = {
        "_id": "users/12345",
        "_key": "12345",
        "_rev": "_bHZ8PAK---",
        "first_name": "John",
        "last_name": "Smith",
        "nickname": "ignored",
    }

    user = raw_to_record(raw, models.User)

    assert user == models.User(id="12345", first_name="John", last_name="Smith")


def test_raw_to_record_list_keeps_order(models):
    rows = [
        {"_id": "posts/1", "_key": "1", "_rev": "a", "title": "First"},
        {"_id": "posts/2", "_key": "2", "_rev": "b", "title": "Second"},
    ]
    posts = raw_to_record(rows, models.Post)
    assert [p.id for p in posts] == ["1", "2"]
    assert [p.title for p in posts] == ["First", "Second"]


def test_raw_to_record_edge_aliases(models):
    raw = {
        "_id": "user_posts/9",
        "_key": "9",
        "_rev": "a",
        "_from": "users/1",
        "_to": "posts/2",
        "type": "wrote",
    }
    edge = raw_to_record(raw, models.UserPosts)
    assert edge.from_id == "users/1"
    assert edge.to_id == "posts/2"
    assert edge.type == "wrote"


@pytest.mark.parametrize(
    "raw",
    [
        {"_key": "1", "_rev": "a"},
        {"_id": "users/1", "_rev": "a"},
        {"_id": "users/1", "_key": "1"},
    ],
)
def test_raw_to_record_requires_identity_keys(models, raw):
    with pytest.raises(InvalidInputError):
        raw_to_record(raw, models.User)


def test_raw_to_record_rejects_non_documents(models):
    with pytest.raises(InvalidInputError):
        raw_to_record("users/1", models.User)


def test_raw_to_record_validation_failure(models):
    raw = {"_id": "users/1", "_key": "1", "_rev": "a", "age": "not a number"}
    with pytest.raises(InvalidInputError):
        raw_to_record(raw, models.User)


def test_raw_to_record_unregistered_model():
    with pytest.raises(InvalidInputError):
        raw_to_record({"_id": "x/1", "_key": "1", "_rev": "a"}, dict)


def test_stored_fields_come_back_unchanged(models):
    original = models.User(id="7", first_name="Jane", last_name="Doe", age=41)
    raw = {**dump_fields(original), "_id": "users/7", "_rev": "_x"}
    assert raw_to_record(raw, models.User) == original


def test_materialized_record_gives_back_its_identifier(models):
    raw = {"_id": "posts/54321", "_key": "54321", "_rev": "a", "title": "Hi"}
    assert id_from_record(raw_to_record(raw, models.Post)) == raw["_id"]
