"""
Shared fixtures.

MongoDB is replaced by an in-memory database supporting the subset of
the motor collection API the services use (equality filters, $set,
sort on find_one, ReturnDocument on find_one_and_update).
"""
import os

os.environ.setdefault("ENVIRONMENT", "development")

import copy
import itertools

import pytest
from bson import ObjectId
from pymongo import ReturnDocument

import app.db.mongo as mongo


class _InsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class _UpdateResult:
    def __init__(self, matched_count, modified_count):
        self.matched_count = matched_count
        self.modified_count = modified_count


class FakeCollection:
    def __init__(self):
        self.docs = []
        self._order = itertools.count()

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(key) == value for key, value in query.items())

    def _find(self, query, sort=None):
        found = [d for d in self.docs if self._matches(d, query)]
        for key, direction in reversed(sort or []):
            found.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return found

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return _InsertResult(doc["_id"])

    async def find_one(self, query, sort=None):
        found = self._find(query, sort)
        return copy.deepcopy(found[0]) if found else None

    async def update_one(self, query, update):
        found = self._find(query)
        if not found:
            return _UpdateResult(0, 0)
        found[0].update(copy.deepcopy(update.get("$set", {})))
        return _UpdateResult(1, 1)

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        found = self._find(query)
        if not found:
            return None
        before = copy.deepcopy(found[0])
        found[0].update(copy.deepcopy(update.get("$set", {})))
        return copy.deepcopy(found[0]) if return_document == ReturnDocument.AFTER else before

    async def create_index(self, *args, **kwargs):
        return kwargs.get("name", "idx")


class FakeDatabase(dict):
    def __missing__(self, name):
        collection = FakeCollection()
        self[name] = collection
        return collection


@pytest.fixture()
def fake_db(monkeypatch):
    db = FakeDatabase()
    monkeypatch.setattr(mongo, "_database", db)
    return db
