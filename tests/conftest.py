"""
Pytest configuration and fixtures for lunchlog-backend tests.

The API is exercised through FastAPI's TestClient with the Supabase client,
completion client and object storage replaced via dependency overrides.
"""

import copy
import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

# Set test environment before importing lunchlog modules
os.environ["ENVIRONMENT"] = "test"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["RATE_LIMIT"] = "10000/minute"
os.environ["AI_RATE_LIMIT"] = "10000/minute"
os.environ["OWNER_OPEN_ID"] = "auth-alice"

from fastapi.testclient import TestClient  # noqa: E402

from lunchlog.core.dependencies import (  # noqa: E402
    get_completion_client, get_current_user, get_fallback_recommendations, get_object_storage
)
from lunchlog.database.supabase_client import get_supabase  # noqa: E402
from lunchlog.main import app  # noqa: E402
from lunchlog.modules.auth.service import clear_auth_cache  # noqa: E402

TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "users": {"role": "user", "notification_enabled": True, "lunch_reminder_time": "12:00"},
    "meal_records": {"is_favorite": False, "group_id": None, "note": None, "image_url": None},
    "favorite_meals": {"usage_count": 0, "last_used_at": None},
    "pantry_inventory": {"low_stock_alert": False, "group_id": None},
}


class FakeQuery:
    """Just enough of the PostgREST query builder for the services under test."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.filters: List = []
        self.orders: List = []
        self.limit_count: Optional[int] = None

    def select(self, *columns, **kwargs):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict: Optional[str] = None):
        self.op = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def update(self, values):
        self.op = "update"
        self.payload = values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    def execute(self):
        if (self.table_name, self.op) in self.db.failures:
            raise Exception(f"simulated {self.op} failure on {self.table_name}")
        self.db.calls.append((self.table_name, self.op))
        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "select":
            result = [row for row in rows if self._matches(row)]
            # Later order() calls are secondary keys
            for column, desc in reversed(self.orders):
                result.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
            if self.limit_count is not None:
                result = result[:self.limit_count]
            return SimpleNamespace(data=copy.deepcopy(result))

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            return SimpleNamespace(data=[self.db.add_row(self.table_name, values) for values in payload])

        if self.op == "upsert":
            existing = next(
                (row for row in rows if row.get(self.on_conflict) == self.payload.get(self.on_conflict)),
                None,
            )
            if existing is None:
                return SimpleNamespace(data=[self.db.add_row(self.table_name, self.payload)])
            existing.update(self.payload)
            return SimpleNamespace(data=[copy.deepcopy(existing)])

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        if self.op == "delete":
            deleted = [row for row in rows if self._matches(row)]
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(deleted))

        raise AssertionError(f"unsupported operation {self.op}")


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, SimpleNamespace] = {}
        self.signed_out = 0

    def add_token(self, token: str, open_id: str, name: str, email: str, provider: str = "google"):
        self.tokens[token] = SimpleNamespace(
            id=open_id,
            email=email,
            user_metadata={"full_name": name},
            app_metadata={"provider": provider},
        )

    def get_user(self, jwt: str):
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def sign_out(self):
        self.signed_out += 1


class FakeSupabase:
    """In-memory stand-in for supabase.Client."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.next_ids: Dict[str, int] = {}
        self.failures = set()
        self.calls: List = []
        self.auth = FakeAuth()
        self._clock = datetime(2025, 12, 1, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, op: str):
        self.failures.add((table, op))

    def add_row(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        row_id = self.next_ids.get(table, 1)
        self.next_ids[table] = row_id + 1
        self._clock += timedelta(seconds=1)
        row = dict(TABLE_DEFAULTS.get(table, {}))
        row.update({"created_at": self._clock.isoformat(), "updated_at": self._clock.isoformat()})
        row.update(values)
        row["id"] = row_id
        self.tables.setdefault(table, []).append(row)
        return copy.deepcopy(row)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])


class FakeCompletion:
    """Records prompts; returns `response` or raises it when it is an exception."""

    def __init__(self):
        self.response: Any = {}
        self.calls: List[Dict[str, Any]] = []

    def complete_json(self, messages, response_format, vision: bool = False):
        self.calls.append({"messages": messages, "response_format": response_format, "vision": vision})
        if isinstance(self.response, Exception):
            raise self.response
        return copy.deepcopy(self.response)


class FakeStorage:
    def __init__(self):
        self.uploads: List[Dict[str, Any]] = []
        self.error: Optional[Exception] = None

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        if self.error is not None:
            raise self.error
        self.uploads.append({"content": file_content, "key": key, "content_type": content_type})
        return f"https://cdn.example.test/{key}"


@pytest.fixture
def fake_db():
    db = FakeSupabase()
    db.auth.add_token("token-alice", "auth-alice", "Alice", "alice@example.com")
    db.auth.add_token("token-bob", "auth-bob", "Bob", "bob@example.com", provider="github")
    db.auth.add_token("token-carol", "auth-carol", "Carol", "carol@example.com")
    return db


@pytest.fixture
def fake_completion():
    return FakeCompletion()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def overrides(fake_db, fake_completion, fake_storage):
    """Dependency overrides; tests may replace entries before making requests."""
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_completion_client] = lambda: fake_completion
    app.dependency_overrides[get_object_storage] = lambda: fake_storage
    yield app.dependency_overrides
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def client(overrides):
    return TestClient(app)


@pytest.fixture
def alice_headers():
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob_headers():
    return {"Authorization": "Bearer token-bob"}


@pytest.fixture
def carol_headers():
    return {"Authorization": "Bearer token-carol"}


@pytest.fixture
def alice(client, alice_headers):
    """Alice's users row, created through the auth upsert."""
    return client.get("/api/v1/auth/me", headers=alice_headers).json()


@pytest.fixture
def bob(client, bob_headers):
    return client.get("/api/v1/auth/me", headers=bob_headers).json()


@pytest.fixture
def without_database(overrides):
    """No database; the caller is authenticated out of band since auth needs it too."""
    overrides[get_supabase] = lambda: None
    overrides[get_current_user] = lambda: {"id": 1, "open_id": "auth-alice", "name": "Alice"}
    return overrides


@pytest.fixture
def fallback_override(overrides):
    fallback = [
        {"name": "テスト定食A", "category": "japanese", "reason": "A"},
        {"name": "テスト定食B", "category": "chinese", "reason": "B"},
        {"name": "テスト定食C", "category": "other", "reason": "C"},
    ]
    overrides[get_fallback_recommendations] = lambda: fallback
    return fallback
