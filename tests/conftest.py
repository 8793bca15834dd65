"""
Shared fixtures: an in-memory stand-in for the Supabase client.

Only the slice of the client surface the app uses is modelled:
``table(...)`` query chains, ``rpc(...)`` and ``storage``.
"""

import sys
import uuid
from pathlib import Path
from types import SimpleNamespace

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


class FakeAPIError(Exception):
    """Raised where PostgREST or the storage API would return an error."""


# ===================================================================
# Tables
# ===================================================================


class FakeQuery:
    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self._op = "select"
        self._columns = "*"
        self._payload = None
        self._on_conflict = None
        self._filters = []
        self._order = None
        self._limit = None

    # Operations

    def select(self, columns: str = "*"):
        self._op = "select"
        self._columns = columns
        return self

    def insert(self, data):
        self._op = "insert"
        self._payload = data
        return self

    def upsert(self, data, on_conflict: str | None = None):
        self._op = "upsert"
        self._payload = data
        self._on_conflict = on_conflict
        return self

    def update(self, data):
        self._op = "update"
        self._payload = data
        return self

    def delete(self):
        self._op = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self._filters.append(lambda r: r.get(column) == value)
        return self

    def gt(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and r[column] > value)
        return self

    def gte(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and r[column] >= value)
        return self

    def lt(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and r[column] < value)
        return self

    def like(self, column, pattern: str):
        prefix = pattern.rstrip("%")
        self._filters.append(lambda r: str(r.get(column) or "").startswith(prefix))
        return self

    def order(self, column, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    # Execution

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self):
        self.client.queries.append((self.table, self._op, self._columns))
        error = self.client.table_errors.get(self.table)
        if error:
            raise FakeAPIError(error)
        if self._op == "select" and self._columns in self.client.column_errors.get(self.table, {}):
            raise FakeAPIError(self.client.column_errors[self.table][self._columns])

        rows = self.client.tables.setdefault(self.table, [])
        handler = getattr(self, f"_execute_{self._op}")
        return SimpleNamespace(data=handler(rows))

    def _execute_select(self, rows):
        result = [dict(r) for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            present = [r for r in result if r.get(column) is not None]
            present.sort(key=lambda r: r[column], reverse=desc)
            # Nulls last, whichever the direction
            result = present + [r for r in result if r.get(column) is None]
        if self._limit is not None:
            result = result[: self._limit]
        return result

    def _execute_insert(self, rows):
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        inserted = []
        for item in payload:
            row = {"id": str(uuid.uuid4()), **item}
            rows.append(row)
            inserted.append(dict(row))
        return inserted

    def _execute_upsert(self, rows):
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        key = self._on_conflict or "id"
        written = []
        for item in payload:
            existing = next((r for r in rows if key in item and r.get(key) == item[key]), None)
            if existing is None:
                existing = {"id": str(uuid.uuid4())}
                rows.append(existing)
            existing.update(item)
            written.append(dict(existing))
        return written

    def _execute_update(self, rows):
        updated = []
        for row in rows:
            if self._matches(row):
                row.update(self._payload)
                updated.append(dict(row))
        return updated

    def _execute_delete(self, rows):
        removed = [r for r in rows if self._matches(r)]
        rows[:] = [r for r in rows if not self._matches(r)]
        return removed


# ===================================================================
# RPC
# ===================================================================


class FakeRPC:
    def __init__(self, client: "FakeSupabase", name: str, params: dict):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        self.client.rpc_calls.append((self.name, self.params))
        if self.name in self.client.rpc_errors:
            raise FakeAPIError(self.client.rpc_errors[self.name])
        sql = self.params.get("sql", "")
        for fragment in self.client.failing_sql:
            if fragment in sql:
                raise FakeAPIError(f'syntax error at or near "{fragment}"')
        return SimpleNamespace(data=None)


# ===================================================================
# Storage
# ===================================================================


class FakeBucketFiles:
    def __init__(self, storage: "FakeStorage", bucket: str):
        self.storage = storage
        self.bucket = bucket

    def upload(self, path, file, file_options=None):
        self.storage._check("upload")
        self.storage.objects.setdefault(self.bucket, {})[path] = file
        return SimpleNamespace(path=path)

    def remove(self, paths):
        self.storage._check("remove")
        files = self.storage.objects.setdefault(self.bucket, {})
        return [{"name": p} for p in paths if files.pop(p, None) is not None]

    def list(self, path=None):
        self.storage._check("list")
        return [{"name": name} for name in self.storage.objects.get(self.bucket, {})]


class FakeStorage:
    def __init__(self):
        self.buckets: dict[str, SimpleNamespace] = {}
        self.objects: dict[str, dict[str, bytes]] = {}
        self.denied: dict[str, str] = {}

    def _check(self, operation: str) -> None:
        if operation in self.denied:
            raise FakeAPIError(self.denied[operation])

    def add_bucket(self, name, public=False, file_size_limit=None, allowed_mime_types=None):
        self.buckets[name] = SimpleNamespace(
            id=name,
            name=name,
            public=public,
            file_size_limit=file_size_limit,
            allowed_mime_types=allowed_mime_types,
        )

    def list_buckets(self):
        self._check("list_buckets")
        return list(self.buckets.values())

    def create_bucket(self, name, options=None):
        self._check("create_bucket")
        if name in self.buckets:
            raise FakeAPIError("The resource already exists")
        self.add_bucket(name, **(options or {}))
        return {"name": name}

    def update_bucket(self, name, options):
        self._check("update_bucket")
        if name not in self.buckets:
            raise FakeAPIError("Bucket not found")
        for key, value in options.items():
            setattr(self.buckets[name], key, value)
        return {"message": "Successfully updated"}

    def from_(self, bucket):
        return FakeBucketFiles(self, bucket)


# ===================================================================
# Client
# ===================================================================


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.table_errors: dict[str, str] = {}
        self.column_errors: dict[str, dict[str, str]] = {}
        self.queries: list[tuple] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.rpc_errors: dict[str, str] = {}
        self.failing_sql: list[str] = []
        self.storage = FakeStorage()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict | None = None) -> FakeRPC:
        return FakeRPC(self, name, params or {})


@pytest.fixture
def fake_client() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def make_client():
    """Factory for tests that need several independent clients."""
    return FakeSupabase
