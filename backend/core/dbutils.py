# core/dbutils.py
from __future__ import annotations
import logging, sqlite3
from typing import Any, Dict, Iterator, List, Sequence

import psycopg2
import psycopg2.errors
import psycopg2.extras

from core import config
from core.errors import DuplicateKeyError, StorageError

log = logging.getLogger("uvicorn.error")

_SQLITE_UNIQUE_CODES = {"SQLITE_CONSTRAINT_PRIMARYKEY", "SQLITE_CONSTRAINT_UNIQUE"}

# ------------------------------ Connection -------------------------------
def get_conn():
    """Opens an autocommit connection for the configured engine."""
    if config.DB_ENGINE == "postgres":
        try:
            conn = psycopg2.connect(
                dbname=config.PG_DBNAME, user=config.PG_USER, password=config.PG_PASS,
                host=config.PG_HOST, port=config.PG_PORT, options="-c client_encoding=UTF8",
            )
            conn.autocommit = True
            return conn
        except Exception:
            log.exception("PostgreSQL connection failed")
            raise

    try:
        conn = sqlite3.connect(config.SQLITE_PATH, isolation_level=None,
                               check_same_thread=False, timeout=10)
    except sqlite3.Error:
        log.exception("SQLite connection failed (%s)", config.SQLITE_PATH)
        raise
    conn.row_factory = sqlite3.Row
    return conn

def get_db() -> Iterator[Any]:
    """FastAPI dependency: one connection per request, always closed."""
    conn = get_conn()
    try:
        yield conn
    finally:
        conn.close()

def _is_sqlite(conn) -> bool:
    return isinstance(conn, sqlite3.Connection)

def _prepare(conn, sql: str) -> str:
    # queries are written with psycopg2's %s placeholders
    return sql.replace("%s", "?") if _is_sqlite(conn) else sql

def _is_unique_violation(exc: Exception) -> bool:
    if isinstance(exc, psycopg2.errors.UniqueViolation):
        return True
    if isinstance(exc, sqlite3.IntegrityError):
        code = getattr(exc, "sqlite_errorname", "")
        return code in _SQLITE_UNIQUE_CODES or "UNIQUE constraint failed" in str(exc)
    return False

# ---------------------------- ensure_* helpers ---------------------------
def ensure_expenses_table(conn):
    statements = (
        """
        CREATE TABLE IF NOT EXISTS expenses (
            id TEXT PRIMARY KEY,
            amount INTEGER NOT NULL,
            category TEXT NOT NULL,
            description TEXT NOT NULL,
            date TEXT NOT NULL,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        );
        """,
        "CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);",
        "CREATE INDEX IF NOT EXISTS idx_expenses_category ON expenses(category);",
    )
    if _is_sqlite(conn):
        for stmt in statements:
            conn.execute(stmt)
    else:
        with conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)
    log.info("Expenses table ready")

# ------------------------------- Queries ---------------------------------
def run_query(conn, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    try:
        if _is_sqlite(conn):
            rows = conn.execute(_prepare(conn, sql), tuple(params)).fetchall()
        else:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(sql, tuple(params))
                rows = cur.fetchall()
    except (sqlite3.Error, psycopg2.Error, OverflowError) as e:
        raise StorageError(f"Query failed: {e}") from e
    return [dict(r) for r in rows]

def run_insert(conn, sql: str, params: Sequence[Any] = ()) -> None:
    """Executes a write; unique violations surface as DuplicateKeyError."""
    try:
        if _is_sqlite(conn):
            conn.execute(_prepare(conn, sql), tuple(params))
        else:
            with conn.cursor() as cur:
                cur.execute(sql, tuple(params))
    except (sqlite3.Error, psycopg2.Error, OverflowError) as e:
        if _is_unique_violation(e):
            raise DuplicateKeyError(str(e)) from e
        raise StorageError(f"Insert failed: {e}") from e
