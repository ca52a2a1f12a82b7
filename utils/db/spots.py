"""
Spot Table Operations.

Raw SQL over the spots table. Every function takes an open connection;
transaction handling is left to the caller.
"""

import sqlite3
from typing import Any, Iterable

from utils.db.connection import SPOT_COLUMNS

_SELECT_COLUMNS = ", ".join(SPOT_COLUMNS)

# Ranking order shared by every listing and search.
RANKING_ORDER = "recommend_count DESC, id ASC"

TEXT_COLUMNS = ("name", "description", "ticket", "transport", "image_url")

# Older SQLite builds allow at most 999 bound parameters per statement.
DELETE_CHUNK_SIZE = 500


def fetch_spots(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    """Returns every spot in ranking order."""
    return conn.execute(
        f"SELECT {_SELECT_COLUMNS} FROM spots ORDER BY {RANKING_ORDER}"
    ).fetchall()


def search_spots(conn: sqlite3.Connection, query: str) -> list[sqlite3.Row]:
    """
    Returns spots whose name or description contains `query`.

    instr() is a case-sensitive, literal substring test, so '%' and '_'
    in the query carry no wildcard meaning.
    """
    return conn.execute(
        f"""
        SELECT {_SELECT_COLUMNS}
        FROM spots
        WHERE instr(name, ?) > 0 OR instr(description, ?) > 0
        ORDER BY {RANKING_ORDER}
        """,
        (query, query),
    ).fetchall()


def fetch_spot(conn: sqlite3.Connection, spot_id: int) -> sqlite3.Row | None:
    return conn.execute(
        f"SELECT {_SELECT_COLUMNS} FROM spots WHERE id = ?", (spot_id,)
    ).fetchone()


def fetch_spot_count(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) FROM spots").fetchone()
    return row[0] if row else 0


def insert_spot(conn: sqlite3.Connection, values: dict[str, Any]) -> int:
    """Inserts a spot with recommend_count = 0 and returns its new id."""
    cur = conn.execute(
        """
        INSERT INTO spots (name, description, ticket, transport, image_url, recommend_count)
        VALUES (?, ?, ?, ?, ?, 0)
        """,
        tuple(values.get(column, "") for column in TEXT_COLUMNS),
    )
    return cur.lastrowid


def increment_recommend_count(conn: sqlite3.Connection, spot_id: int) -> int:
    """
    Atomically adds one to a spot's recommend_count.

    Returns the number of rows changed (0 when the id is unknown).
    """
    cur = conn.execute(
        "UPDATE spots SET recommend_count = recommend_count + 1 WHERE id = ?",
        (spot_id,),
    )
    return cur.rowcount


def update_spot_fields(
    conn: sqlite3.Connection, spot_id: int, changes: dict[str, str]
) -> int:
    """Writes the given text columns for one spot. Returns rows changed."""
    if not changes:
        return 0
    unknown = set(changes) - set(TEXT_COLUMNS)
    if unknown:
        raise ValueError(f"Not an updatable spot column: {sorted(unknown)}")

    assignments = ", ".join(f"{column} = ?" for column in changes)
    params = list(changes.values()) + [spot_id]
    cur = conn.execute(f"UPDATE spots SET {assignments} WHERE id = ?", params)
    return cur.rowcount


def delete_spot(conn: sqlite3.Connection, spot_id: int) -> int:
    cur = conn.execute("DELETE FROM spots WHERE id = ?", (spot_id,))
    return cur.rowcount


def delete_spots(conn: sqlite3.Connection, spot_ids: Iterable[int]) -> int:
    """
    Deletes all spots in `spot_ids`; unknown ids are ignored.

    Ids are bound in chunks to stay under SQLite's host-parameter limit.
    All chunks run on the caller's connection, inside one transaction.
    """
    ids = list(spot_ids)
    removed = 0
    for start in range(0, len(ids), DELETE_CHUNK_SIZE):
        chunk = ids[start : start + DELETE_CHUNK_SIZE]
        placeholders = ",".join("?" for _ in chunk)
        cur = conn.execute(f"DELETE FROM spots WHERE id IN ({placeholders})", chunk)
        removed += cur.rowcount
    return removed


def delete_all_spots(conn: sqlite3.Connection) -> int:
    cur = conn.execute("DELETE FROM spots")
    return cur.rowcount
