from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest

from agroalert.errors import StoreError
from agroalert.seed import seed_demo
from agroalert.store import DataStore, Query, SQLiteStore

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


class BrokenStore(DataStore):
    """Every query fails, like an unreachable backend."""

    def __init__(self):
        self.queries: List[Query] = []

    def execute(self, query: Query) -> List[Dict[str, Any]]:
        self.queries.append(query)
        raise StoreError(query.table, "connection refused")


class RowsStore(DataStore):
    """Returns canned rows per table."""

    def __init__(self, rows: Dict[str, List[Dict[str, Any]]]):
        self.rows = rows

    def execute(self, query: Query) -> List[Dict[str, Any]]:
        return list(self.rows.get(query.table, []))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def empty_store(tmp_path):
    return SQLiteStore(str(tmp_path / "agroalert-test.db"))


@pytest.fixture
def store(empty_store, now):
    seed_demo(empty_store, now=now)
    return empty_store


@pytest.fixture
def broken_store():
    return BrokenStore()
