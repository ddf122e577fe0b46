"""
Test configuration and fixtures.

This module sets up test environment and provides shared fixtures for all tests.
"""

import asyncio
import copy
import os
from datetime import UTC, datetime
from typing import Any

import pytest
from faker import Faker

# Must be set BEFORE any imports of shared.config
os.environ["DB_CONNECTION"] = "mongodb://localhost:27017/event_vendor_seed_test"

from database.connection import ReferencedEntityNotFoundError  # noqa: E402


class InMemoryStore:
    """
    Dict-backed stand-in for DocumentStore.

    Supports the filters the seeder issues: {} / equality / {"_id": {"$in": [...]}}
    and inclusion projections. push() appends without yielding between read
    and write, like a server-side $push.
    """

    name = "in_memory"

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []

    async def drop_collection(self, name: str) -> bool:
        self.calls.append(("drop", name))
        return self.collections.pop(name, None) is not None

    async def insert_many(self, name, documents):
        self.calls.append(("insert_many", name))
        return self._insert(name, documents)

    def _insert(self, name, documents):
        if not documents:
            return []
        collection = self.collections.setdefault(name, [])
        existing = {d["_id"] for d in collection}
        ids = []
        for document in documents:
            if document["_id"] in existing:
                raise ValueError(f"duplicate _id {document['_id']} in {name}")
            collection.append(copy.deepcopy(dict(document)))
            existing.add(document["_id"])
            ids.append(document["_id"])
        return ids

    async def insert_one(self, name, document):
        self.calls.append(("insert_one", name))
        await asyncio.sleep(0)
        return self._insert(name, [document])[0]

    async def find(self, name, filter=None, projection=None):
        self.calls.append(("find", name))
        documents = [d for d in self.collections.get(name, []) if _matches(d, filter or {})]
        if projection:
            keep = {k for k, v in projection.items() if v} | {"_id"}
            documents = [{k: v for k, v in d.items() if k in keep} for d in documents]
        return copy.deepcopy(documents)

    async def count(self, name, filter=None):
        return len(await self.find(name, filter))

    async def push(self, name, owner_id, field, values):
        self.calls.append(("push", name))
        await asyncio.sleep(0)
        for document in self.collections.get(name, []):
            if document["_id"] == owner_id:
                document.setdefault(field, []).extend(values)
                return
        raise ReferencedEntityNotFoundError(name, [owner_id])


def _matches(document: dict[str, Any], filter: dict[str, Any]) -> bool:
    for key, condition in filter.items():
        value = document.get(key)
        if isinstance(condition, dict) and "$in" in condition:
            if value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory document store."""
    return InMemoryStore()


@pytest.fixture
def fake() -> Faker:
    """Seeded Faker so generated data is stable across runs."""
    faker = Faker()
    faker.seed_instance(1234)
    return faker


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
