"""Tests for UserStore against the in-memory collection."""

import pytest
from bson import ObjectId
from pymongo.errors import (
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    OperationFailure,
)

from app.api.schemas.user import UserIn
from app.core.exceptions import StoreRejected, StoreUnavailable


@pytest.mark.asyncio
async def test_insert_returns_store_assigned_id(store, collection):
    oid = await store.insert(UserIn(name="Ana", age=30))

    assert isinstance(oid, ObjectId)
    assert collection.docs[oid] == {"_id": oid, "name": "Ana", "age": 30}


@pytest.mark.asyncio
async def test_insert_does_not_store_absent_fields(store, collection):
    oid = await store.insert(UserIn(name="Ana"))
    assert set(collection.docs[oid]) == {"_id", "name"}


@pytest.mark.asyncio
async def test_find_by_id_absent_is_none(store):
    assert await store.find_by_id(ObjectId()) is None


@pytest.mark.asyncio
async def test_find_by_id_maps_document(store):
    oid = await store.insert(UserIn(name="Ana", title="CTO"))

    user = await store.find_by_id(oid)
    assert user is not None
    assert user.id == str(oid)
    assert user.title == "CTO"
    assert user.location is None


@pytest.mark.asyncio
async def test_find_all_restarts_per_call(store):
    for name in ("a", "b", "c"):
        await store.insert(UserIn(name=name))

    first = [u.name async for u in store.find_all()]
    second = [u.name async for u in store.find_all()]

    assert sorted(first) == ["a", "b", "c"]
    assert sorted(second) == sorted(first)


@pytest.mark.asyncio
async def test_replace_reports_match(store, collection):
    oid = await store.insert(UserIn(name="Ana", location="Lisbon"))

    assert await store.replace_by_id(oid, UserIn(name="Bea")) is True
    assert collection.docs[oid] == {"_id": oid, "name": "Bea"}
    assert await store.replace_by_id(ObjectId(), UserIn(name="x")) is False


@pytest.mark.asyncio
async def test_delete_reports_match(store):
    oid = await store.insert(UserIn(name="Ana"))

    assert await store.delete_by_id(oid) is True
    assert await store.delete_by_id(oid) is False
    assert await store.find_by_id(oid) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [NetworkTimeout("timed out"), ExecutionTimeout("maxTimeMS")])
async def test_connectivity_errors_become_store_unavailable(store, collection, error):
    collection.fail_with = error
    with pytest.raises(StoreUnavailable) as info:
        await store.find_by_id(ObjectId())
    assert info.value.__cause__ is error


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [DuplicateKeyError("E11000 duplicate key"), OperationFailure("not authorized", code=13)],
)
async def test_other_store_errors_become_store_rejected(store, collection, error):
    collection.fail_with = error
    with pytest.raises(StoreRejected):
        await store.insert(UserIn(name="Ana"))


@pytest.mark.asyncio
async def test_cursor_failure_is_translated(store, collection):
    collection.fail_with = NetworkTimeout("cursor died")
    with pytest.raises(StoreUnavailable):
        [u async for u in store.find_all()]
