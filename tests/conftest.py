"""
Pytest configuration and fixtures for the users API tests.

The store runs on an in-memory stand-in for a Motor collection so the API can
be exercised without a MongoDB server.
"""

from typing import Any, Dict, List, Optional

import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from app.main import app
from app.repositories.user_repo import UserStore


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]], fail_with: Optional[Exception] = None):
        self._docs = docs
        self._fail_with = fail_with

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        if self._fail_with is not None:
            raise self._fail_with
        for doc in self._docs:
            yield dict(doc)


class FakeDatabase:
    def __init__(self):
        self.fail_with: Optional[Exception] = None

    async def command(self, cmd, *args, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        return {"ok": 1.0}


class FakeCollection:
    """Subset of AsyncIOMotorCollection used by UserStore."""

    def __init__(self):
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}
        self.calls: List[str] = []
        self.fail_with: Optional[Exception] = None
        self.database = FakeDatabase()

    def _enter(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_with is not None:
            raise self.fail_with

    async def insert_one(self, doc):
        self._enter("insert_one")
        data = dict(doc)
        bson.encode(data)  # the driver encodes before sending
        oid = data.setdefault("_id", ObjectId())
        self.docs[oid] = data
        return InsertOneResult(oid, True)

    async def find_one(self, flt):
        self._enter("find_one")
        doc = self.docs.get(flt.get("_id"))
        return dict(doc) if doc is not None else None

    def find(self, flt=None):
        self.calls.append("find")
        return FakeCursor(list(self.docs.values()), self.fail_with)

    async def replace_one(self, flt, doc):
        self._enter("replace_one")
        bson.encode(doc)
        oid = flt.get("_id")
        if oid not in self.docs:
            return UpdateResult({"n": 0, "nModified": 0, "ok": 1.0}, True)
        self.docs[oid] = {"_id": oid, **doc}
        return UpdateResult({"n": 1, "nModified": 1, "ok": 1.0}, True)

    async def delete_one(self, flt):
        self._enter("delete_one")
        removed = self.docs.pop(flt.get("_id"), None)
        return DeleteResult({"n": 1 if removed is not None else 0, "ok": 1.0}, True)


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def store(collection: FakeCollection) -> UserStore:
    return UserStore(collection)


@pytest.fixture
def client(store: UserStore):
    """Test client with the shared store published as startup would; real Mongo is never contacted."""
    app.state.user_store = store
    try:
        yield TestClient(app)
    finally:
        del app.state.user_store
