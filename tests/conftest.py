"""
Shared test fixtures.

Provides an in-memory Supabase mock that keeps table state between calls,
so inserts, updates and deletes made by one call are visible to the next.
"""

import os
import sys
from pathlib import Path

# Add project directory to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Settings are loaded at import time and require these
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import copy
import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Callable, Generator, Optional
from uuid import uuid4

from models.context import RequestContext


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else (len(self.data) if isinstance(self.data, list) else 1)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, table: "MockSupabaseTable", operation: str, payload=None, on_conflict: str = None):
        self._table = table
        self._operation = operation
        self._payload = payload
        self._on_conflict = on_conflict
        self._filters: list[Callable[[dict], bool]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._range: Optional[tuple[int, int]] = None
        self._limit: Optional[int] = None
        self._is_single = False

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def single(self):
        self._is_single = True
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self) -> MockSupabaseResponse:
        self._table.run_hooks(self._operation)
        failure = self._table.failures.get(self._operation)
        if failure is not None:
            raise failure

        handler = getattr(self, f"_execute_{self._operation}")
        return handler()

    def _execute_select(self) -> MockSupabaseResponse:
        rows = [copy.deepcopy(r) for r in self._table.rows if self._matches(r)]
        total = len(rows)

        if self._order:
            column, desc = self._order
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        if self._range:
            start, end = self._range
            rows = rows[start:end + 1]
        if self._limit is not None:
            rows = rows[:self._limit]

        if self._is_single:
            return MockSupabaseResponse(data=rows[0] if rows else None, count=1 if rows else 0)
        return MockSupabaseResponse(data=rows, count=total)

    def _new_row(self, item: dict) -> dict:
        now = datetime.now(timezone.utc).isoformat()
        row = copy.deepcopy(item)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        return row

    def _execute_insert(self) -> MockSupabaseResponse:
        items = self._payload if isinstance(self._payload, list) else [self._payload]
        inserted = []
        for item in items:
            row = self._new_row(item)
            self._table.rows.append(row)
            inserted.append(copy.deepcopy(row))
        return MockSupabaseResponse(data=inserted)

    def _execute_upsert(self) -> MockSupabaseResponse:
        items = self._payload if isinstance(self._payload, list) else [self._payload]
        keys = [k.strip() for k in (self._on_conflict or "id").split(",")]
        written = []
        for item in items:
            existing = next(
                (r for r in self._table.rows if all(r.get(k) == item.get(k) for k in keys)),
                None
            )
            if existing is not None:
                existing.update(copy.deepcopy(item))
                written.append(copy.deepcopy(existing))
            else:
                row = self._new_row(item)
                self._table.rows.append(row)
                written.append(copy.deepcopy(row))
        return MockSupabaseResponse(data=written)

    def _execute_update(self) -> MockSupabaseResponse:
        updated = []
        for row in self._table.rows:
            if self._matches(row):
                row.update(copy.deepcopy(self._payload))
                updated.append(copy.deepcopy(row))
        return MockSupabaseResponse(data=updated)

    def _execute_delete(self) -> MockSupabaseResponse:
        deleted = [copy.deepcopy(r) for r in self._table.rows if self._matches(r)]
        self._table.rows[:] = [r for r in self._table.rows if not self._matches(r)]
        return MockSupabaseResponse(data=deleted)


class MockSupabaseTable:
    """Mock Supabase table holding rows in memory."""

    def __init__(self, rows: list = None):
        self.rows: list[dict] = rows or []
        self.failures: dict[str, Exception] = {}
        self.hooks: dict[str, list[Callable[[list], None]]] = {}

    def run_hooks(self, operation: str):
        for hook in self.hooks.pop(operation, []):
            hook(self.rows)

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self, "select")

    def insert(self, data):
        return MockSupabaseQuery(self, "insert", payload=data)

    def upsert(self, data, on_conflict: str = None, **kwargs):
        return MockSupabaseQuery(self, "upsert", payload=data, on_conflict=on_conflict)

    def update(self, data):
        return MockSupabaseQuery(self, "update", payload=data)

    def delete(self):
        return MockSupabaseQuery(self, "delete")


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables: dict[str, MockSupabaseTable] = {}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table (created empty on first use)."""
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable()
        return self._tables[name]

    def set_table_data(self, table_name: str, data: list):
        """Configure rows for a table."""
        self.table(table_name).rows = copy.deepcopy(data)

    def get_table_data(self, table_name: str) -> list:
        """Current rows of a table."""
        return self.table(table_name).rows

    def fail_on(self, table_name: str, operation: str, error: Exception):
        """Make every `operation` on the table raise `error`."""
        self.table(table_name).failures[operation] = error

    def before_next(self, table_name: str, operation: str, hook: Callable[[list], None]):
        """Run `hook(rows)` once, right before the next `operation` executes."""
        self.table(table_name).hooks.setdefault(operation, []).append(hook)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("job_items", [
                JobItemFactory.create(status="pending")
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Any repository created without an explicit client gets the mock.
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("repositories.job_item_repository.get_supabase_client", return_value=mock_supabase):
            with patch("repositories.mapping_repository.get_supabase_client", return_value=mock_supabase):
                with patch("repositories.connector_settings_repository.get_supabase_client", return_value=mock_supabase):
                    yield mock_supabase


@pytest.fixture
def tenant_context() -> RequestContext:
    """Regular user of tenant shop-1."""
    return RequestContext(tenant_id="shop-1", user_id="user-1", permissions=[])


@pytest.fixture
def admin_context() -> RequestContext:
    """User of tenant shop-1 allowed to configure connectors."""
    return RequestContext(tenant_id="shop-1", user_id="admin-1", permissions=["core"])


@pytest.fixture
def job_item_service(mock_supabase):
    """JobItemService backed by the mock client."""
    from repositories.job_item_repository import JobItemRepository
    from repositories.mapping_repository import MappingRepository
    from services.job_item_service import JobItemService

    return JobItemService(JobItemRepository(mock_supabase), MappingRepository(mock_supabase))


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_supabase, job_item_service):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("job_items", [...])
            response = test_client_with_mock_db.get("/api/job-items", headers=...)
    """
    from fastapi.testclient import TestClient
    from main import app
    from repositories.connector_settings_repository import ConnectorSettingsRepository
    from services.connector_service import ConnectorService
    from services.permission_service import PermissionService

    connector_service = ConnectorService(ConnectorSettingsRepository(mock_supabase), PermissionService())

    with patch("routes.job_items.get_job_item_service", return_value=job_item_service):
        with patch("routes.mappings.get_job_item_service", return_value=job_item_service):
            with patch("routes.connectors.get_connector_service", return_value=connector_service):
                yield TestClient(app)
