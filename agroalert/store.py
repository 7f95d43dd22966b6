"""Read access to the farmers / crops / farmer_crops / alerts / weather_data collections.

Two backends share the same tiny query vocabulary (select, embed, eq,
order, limit, single):

- ``SupabaseStore`` talks to a hosted Supabase project through the
  ``supabase`` client.
- ``SQLiteStore`` keeps the same tables in a local file for development
  and tests.
"""
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx
from supabase import Client, PostgrestAPIError, create_client
from supabase.client import ClientOptions

from .errors import StoreError

log = logging.getLogger(__name__)

FARMERS = "farmers"
CROPS = "crops"
FARMER_CROPS = "farmer_crops"
ALERTS = "alerts"
WEATHER_DATA = "weather_data"
OFFICERS = "extension_officers"
OFFICER_SESSIONS = "officer_sessions"

# table -> columns; anything not listed here is rejected before it reaches SQL
SCHEMA: Dict[str, Tuple[str, ...]] = {
    FARMERS: ("id", "name", "phone", "location_name", "latitude", "longitude", "created_at"),
    CROPS: ("id", "name", "planting_season", "growth_days", "water_requirements"),
    FARMER_CROPS: ("id", "farmer_id", "crop_id", "planting_date", "area_hectares", "status"),
    ALERTS: ("id", "farmer_id", "alert_type", "message", "sent_at", "is_read", "dashboard_link"),
    WEATHER_DATA: ("id", "location_name", "latitude", "longitude", "temperature", "humidity",
                   "rainfall", "forecast", "recorded_at"),
    OFFICERS: ("id", "name", "email", "region", "created_at", "password_hash"),
}

# (table, embedded table) -> foreign key column on the outer table
EMBEDS: Dict[Tuple[str, str], str] = {
    (FARMER_CROPS, CROPS): "crop_id",
}


@dataclass
class Query:
    table: str
    embed: Optional[str] = None
    filters: List[Tuple[str, Any]] = field(default_factory=list)
    order_by: Optional[str] = None
    descending: bool = False
    limit_to: Optional[int] = None
    single: bool = False

    def with_embed(self, table: str) -> "Query":
        self.embed = table
        return self

    def eq(self, column: str, value: Any) -> "Query":
        self.filters.append((column, value))
        return self

    def order(self, column: str, descending: bool = False) -> "Query":
        self.order_by = column
        self.descending = descending
        return self

    def limit(self, n: int) -> "Query":
        self.limit_to = n
        return self

    def maybe_single(self) -> "Query":
        """At most one row is wanted; missing rows are not an error."""
        self.single = True
        self.limit_to = 1
        return self

    def validate(self) -> "Query":
        columns = SCHEMA.get(self.table)
        if columns is None:
            raise StoreError(self.table, "unknown table")
        for col, _ in self.filters:
            if col not in columns:
                raise StoreError(self.table, f"unknown column '{col}'")
        if self.order_by and self.order_by not in columns:
            raise StoreError(self.table, f"unknown column '{self.order_by}'")
        if self.embed and (self.table, self.embed) not in EMBEDS:
            raise StoreError(self.table, f"cannot embed '{self.embed}'")
        if self.limit_to is not None and self.limit_to <= 0:
            raise StoreError(self.table, "limit must be positive")
        return self


def table(name: str) -> Query:
    return Query(table=name)


class DataStore:
    """Read side shared by both backends."""

    def execute(self, query: Query) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def for_session(self, session) -> "DataStore":
        return self

    def fetch_one(self, query: Query) -> Optional[Dict[str, Any]]:
        rows = self.execute(query.maybe_single())
        return rows[0] if rows else None


# ------------------------------
# Hosted backend (Supabase)
# ------------------------------

def connect(url: str, anon_key: str, timeout: float = 15.0) -> Client:
    # token refresh is driven by AuthClient.get_session, not a background timer
    options = ClientOptions(auto_refresh_token=False, persist_session=False,
                            postgrest_client_timeout=timeout)
    return create_client(url, anon_key, options=options)


def _literal(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class SupabaseStore(DataStore):
    def __init__(self, url: str, anon_key: str, timeout: float = 15.0,
                 client: Optional[Client] = None, access_token: Optional[str] = None):
        self.url = url
        self.anon_key = anon_key
        self.timeout = timeout
        self.access_token = access_token
        self.client = client or connect(url, anon_key, timeout)
        if access_token:
            self.client.postgrest.auth(access_token)

    def for_session(self, session) -> "SupabaseStore":
        """Store whose requests carry the officer's token, so row-level security applies to them.

        The instance cached for all browser sessions is never mutated.
        """
        if session is None:
            return self
        return SupabaseStore(self.url, self.anon_key, timeout=self.timeout,
                             access_token=session.access_token)

    def execute(self, query: Query) -> List[Dict[str, Any]]:
        query.validate()
        request = self.client.table(query.table).select(
            f"*, {query.embed}(*)" if query.embed else "*")
        for col, value in query.filters:
            request = request.eq(col, _literal(value))
        if query.order_by:
            request = request.order(query.order_by, desc=query.descending)
        if query.limit_to is not None:
            request = request.limit(query.limit_to)
        log.debug("GET %s filters=%s order=%s limit=%s",
                  query.table, query.filters, query.order_by, query.limit_to)
        try:
            response = request.execute()
        except PostgrestAPIError as e:
            raise StoreError(query.table, e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise StoreError(query.table, str(e)) from e
        if not isinstance(response.data, list):
            raise StoreError(query.table, "expected a list of rows")
        return response.data


# ------------------------------
# Local backend (SQLite)
# ------------------------------

CREATE_TABLES = [
    """
    CREATE TABLE IF NOT EXISTS farmers (
        id            TEXT PRIMARY KEY,
        name          TEXT NOT NULL,
        phone         TEXT,
        location_name TEXT,
        latitude      REAL,
        longitude     REAL,
        created_at    TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS crops (
        id                 TEXT PRIMARY KEY,
        name               TEXT NOT NULL,
        planting_season    TEXT,
        growth_days        INTEGER NOT NULL CHECK (growth_days > 0),
        water_requirements TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS farmer_crops (
        id            TEXT PRIMARY KEY,
        farmer_id     TEXT NOT NULL,
        crop_id       TEXT NOT NULL,
        planting_date TEXT,
        area_hectares REAL,
        status        TEXT,
        FOREIGN KEY(farmer_id) REFERENCES farmers(id),
        FOREIGN KEY(crop_id) REFERENCES crops(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS alerts (
        id             TEXT PRIMARY KEY,
        farmer_id      TEXT NOT NULL,
        alert_type     TEXT,
        message        TEXT,
        sent_at        TEXT,
        is_read        INTEGER DEFAULT 0,
        dashboard_link TEXT,
        FOREIGN KEY(farmer_id) REFERENCES farmers(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS weather_data (
        id            TEXT PRIMARY KEY,
        location_name TEXT,
        latitude      REAL,
        longitude     REAL,
        temperature   REAL,
        humidity      REAL,
        rainfall      REAL,
        forecast      TEXT,
        recorded_at   TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS extension_officers (
        id            TEXT PRIMARY KEY,
        name          TEXT,
        email         TEXT UNIQUE NOT NULL,
        region        TEXT,
        created_at    TEXT,
        password_hash TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS officer_sessions (
        refresh_token TEXT PRIMARY KEY,
        officer_id    TEXT NOT NULL,
        expires_at    TEXT NOT NULL,
        FOREIGN KEY(officer_id) REFERENCES extension_officers(id)
    )
    """,
]


class SQLiteStore(DataStore):
    def __init__(self, db_file: str):
        self.db_file = db_file
        self.init_db()

    def _db(self):
        # Streamlit runs multi-threaded; set check_same_thread=False
        conn = sqlite3.connect(self.db_file, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self):
        try:
            with self._db() as conn:
                for ddl in CREATE_TABLES:
                    conn.execute(ddl)
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError("schema", str(e)) from e

    def _select(self, conn, query: Query) -> List[Dict[str, Any]]:
        sql = f"SELECT * FROM {query.table}"
        args: List[Any] = []
        if query.filters:
            sql += " WHERE " + " AND ".join(f"{col} = ?" for col, _ in query.filters)
            args.extend(value for _, value in query.filters)
        if query.order_by:
            sql += f" ORDER BY {query.order_by} {'DESC' if query.descending else 'ASC'}"
        if query.limit_to is not None:
            sql += " LIMIT ?"
            args.append(query.limit_to)
        rows = [dict(r) for r in conn.execute(sql, args).fetchall()]
        if query.table == ALERTS:
            for r in rows:
                r["is_read"] = bool(r.get("is_read"))
        return rows

    def _attach(self, conn, query: Query, rows: List[Dict[str, Any]]):
        fk = EMBEDS[(query.table, query.embed)]
        ids = sorted({r[fk] for r in rows if r.get(fk) is not None})
        related: Dict[Any, Dict[str, Any]] = {}
        if ids:
            marks = ",".join("?" for _ in ids)
            for r in conn.execute(f"SELECT * FROM {query.embed} WHERE id IN ({marks})", ids):
                related[r["id"]] = dict(r)
        for r in rows:
            r[query.embed] = related.get(r.get(fk))

    def execute(self, query: Query) -> List[Dict[str, Any]]:
        query.validate()
        log.debug("SELECT %s filters=%s order=%s limit=%s",
                  query.table, query.filters, query.order_by, query.limit_to)
        try:
            with self._db() as conn:
                rows = self._select(conn, query)
                if query.embed:
                    self._attach(conn, query, rows)
        except sqlite3.Error as e:
            raise StoreError(query.table, str(e)) from e
        return rows

    def count(self, table_name: str) -> int:
        if table_name not in SCHEMA:
            raise StoreError(table_name, "unknown table")
        with self._db() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]

    def insert_many(self, table_name: str, rows: Iterable[Dict[str, Any]]):
        columns = SCHEMA.get(table_name)
        if columns is None:
            raise StoreError(table_name, "unknown table")
        rows = list(rows)
        if not rows:
            return
        marks = ",".join("?" for _ in columns)
        try:
            with self._db() as conn:
                conn.executemany(
                    f"INSERT OR REPLACE INTO {table_name} ({','.join(columns)}) VALUES ({marks})",
                    [tuple(r.get(c) for c in columns) for r in rows],
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(table_name, str(e)) from e

    def delete(self, table_name: str, column: str, value: Any):
        columns = SCHEMA.get(table_name)
        if columns is None or column not in columns:
            raise StoreError(table_name, f"cannot delete by '{column}'")
        try:
            with self._db() as conn:
                conn.execute(f"DELETE FROM {table_name} WHERE {column} = ?", (value,))
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(table_name, str(e)) from e
