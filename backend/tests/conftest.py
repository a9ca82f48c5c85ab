"""
Shared fixtures: required settings, an in-memory Supabase stand-in,
and a FastAPI TestClient wired to it.
"""

import copy
import os
from datetime import datetime, timezone

# Settings are read at import time of notes_app.main
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("TRASH_RETENTION_DAYS", "30")

import pytest
from fastapi.testclient import TestClient

from notes_app.core.dependencies import get_db
from notes_app.core.security import create_access_token
from notes_app.main import app


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the PostgREST query builder for the services."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, payload: dict):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def lt(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None
            and _as_datetime(row[column]) < _as_datetime(value)
        )
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def _matching(self):
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table, self.op))
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = {"id": self.db.next_id(self.table), **self.payload}
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            return FakeResult([copy.deepcopy(row)])

        matched = self._matching()
        if self.op == "update":
            for row in matched:
                row.update(self.payload)
        elif self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]

        data = [copy.deepcopy(row) for row in matched]
        if self.order_by:
            column, desc = self.order_by
            data.sort(key=lambda row: _as_datetime(row[column]), reverse=desc)
        return FakeResult(data)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self._ids: dict[str, int] = {}

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(fake_db):
    """A stored user row (password hash is irrelevant for token-based tests)."""
    row = fake_db.table("users").insert({
        "username": "alice",
        "password_hash": "x",
    }).execute().data[0]
    return row


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user['id'])}"}
