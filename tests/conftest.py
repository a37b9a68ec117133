"""Shared fixtures for family directory tests."""

import json
import shutil
from pathlib import Path

import pytest

from family_directory.directory import FamilyDirectory
from family_directory.models import Member, Relation
from family_directory.store import InMemoryDocumentStore

_SAMPLE_FILE = Path(__file__).parent / "fixtures" / "sample_directory.json"


class FakeMCP:
    """Collects functions registered as tools/resources so tests can call them directly."""

    def __init__(self):
        self.tools = {}
        self.resources = {}

    def tool(self):
        def decorator(fn):
            self.tools[fn.__name__] = fn
            return fn

        return decorator

    def resource(self, uri):
        def decorator(fn):
            self.resources[uri] = fn
            return fn

        return decorator


class FailingStore(InMemoryDocumentStore):
    """Store whose chosen operations raise, as a network failure would."""

    def __init__(self, failing: set[str], path=None):
        super().__init__(path)
        self.failing = failing

    async def _maybe_fail(self, operation):
        if operation in self.failing:
            raise ConnectionError(f"{operation} unavailable")

    async def list_all(self, collection):
        await self._maybe_fail("list_all")
        return await super().list_all(collection)

    async def get(self, collection, record_id):
        await self._maybe_fail("get")
        return await super().get(collection, record_id)

    async def create(self, collection, data):
        await self._maybe_fail("create")
        return await super().create(collection, data)

    async def update(self, collection, record_id, partial):
        await self._maybe_fail("update")
        return await super().update(collection, record_id, partial)

    async def delete(self, collection, record_id):
        await self._maybe_fail("delete")
        return await super().delete(collection, record_id)

    async def query_where(self, collection, field, value):
        await self._maybe_fail("query_where")
        return await super().query_where(collection, field, value)


@pytest.fixture
def sample_data():
    """Raw member and relation records from the sample snapshot."""
    with open(_SAMPLE_FILE) as f:
        return json.load(f)


@pytest.fixture
def members(sample_data):
    return [Member.from_record(r) for r in sample_data["members"]]


@pytest.fixture
def relations(sample_data):
    return [Relation.from_record(r) for r in sample_data["relations"]]


@pytest.fixture
def store_file(tmp_path):
    """A writable copy of the sample snapshot."""
    path = tmp_path / "family.json"
    shutil.copy(_SAMPLE_FILE, path)
    return path


@pytest.fixture
def store(store_file):
    return InMemoryDocumentStore(store_file)


@pytest.fixture
def directory(store):
    return FamilyDirectory(store)


@pytest.fixture
def empty_directory():
    return FamilyDirectory(InMemoryDocumentStore())


@pytest.fixture
def tools(directory, tools_for):
    """Tool functions registered against the sample directory."""
    return tools_for(directory)


@pytest.fixture
def resources(directory):
    from family_directory.mcp_resources import register_resources

    mcp = FakeMCP()
    register_resources(mcp, directory)
    return mcp.resources


@pytest.fixture
def failing_directory(store_file):
    """Factory for a directory over the sample data whose given store operations fail."""

    def make(*failing: str) -> FamilyDirectory:
        return FamilyDirectory(FailingStore(set(failing), store_file))

    return make


@pytest.fixture
def tools_for():
    """Factory registering tools against any directory."""
    from family_directory.mcp_tools import register_tools

    def make(directory: FamilyDirectory) -> dict:
        mcp = FakeMCP()
        register_tools(mcp, directory)
        return mcp.tools

    return make


@pytest.fixture
def fake_mcp():
    return FakeMCP()
