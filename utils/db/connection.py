"""
Database Connection and Schema Management.

This module handles SQLite connection creation and schema initialization
for the spots table.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

DB_FILENAME = "spots.db"
DEFAULT_TIMEOUT = 30.0

# Module-level cache: initialize schema once per database path.
# Tests use a fresh tmp_path per case, so the cache is keyed by db path.
_schema_initialized_paths: set[Path] = set()

SPOT_COLUMNS = (
    "id",
    "name",
    "description",
    "ticket",
    "transport",
    "recommend_count",
    "image_url",
)


def _resolve_db_path(db_path) -> Path:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path.resolve()


def get_connection(db_path, timeout: float = DEFAULT_TIMEOUT) -> sqlite3.Connection:
    global _schema_initialized_paths
    path = _resolve_db_path(db_path)
    conn = sqlite3.connect(path, timeout=timeout, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    if path not in _schema_initialized_paths:
        _init_schema(conn)
        _schema_initialized_paths.add(path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def closing_connection(db_path, timeout: float = DEFAULT_TIMEOUT):
    """Context manager that creates a DB connection and guarantees it is closed.

    `with sqlite3.Connection as conn:` only manages transactions
    (commit/rollback), it does NOT call conn.close().

    Usage:
        with closing_connection(db_path) as conn:
            conn.execute("SELECT ...")
    """
    conn = get_connection(db_path, timeout=timeout)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def reset_schema_cache() -> None:
    """Forget which database files have had their schema initialized."""
    _schema_initialized_paths.clear()


def _init_schema(conn: sqlite3.Connection) -> None:
    # AUTOINCREMENT keeps ids from being reused after the highest row is deleted.
    conn.execute("""
        CREATE TABLE IF NOT EXISTS spots (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL DEFAULT '',
            description TEXT NOT NULL DEFAULT ''
        );
        """)

    # Columns added after the first release are migrated in place.
    _ensure_column_on_table(conn, "spots", "ticket", "TEXT NOT NULL DEFAULT ''")
    _ensure_column_on_table(conn, "spots", "transport", "TEXT NOT NULL DEFAULT ''")
    _ensure_column_on_table(
        conn, "spots", "recommend_count", "INTEGER NOT NULL DEFAULT 0"
    )
    _ensure_column_on_table(conn, "spots", "image_url", "TEXT NOT NULL DEFAULT ''")

    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_spots_ranking ON spots(recommend_count DESC, id ASC);"
    )

    conn.commit()


def _ensure_column_on_table(
    conn: sqlite3.Connection, table: str, column: str, coltype: str
) -> None:
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = {row[1] for row in cur.fetchall()}
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {coltype};")
        conn.commit()
