"""
SpotCatalog Database Module.

This package provides SQLite access for the spots table.

Usage:
    from utils.db import closing_connection, fetch_spots
    # or
    from utils.db.spots import fetch_spots
"""

# Connection and Schema
from utils.db.connection import (
    DB_FILENAME,
    SPOT_COLUMNS,
    _ensure_column_on_table,
    _init_schema,
    closing_connection,
    get_connection,
    reset_schema_cache,
)

# Spot Operations
from utils.db.spots import (
    RANKING_ORDER,
    TEXT_COLUMNS,
    delete_all_spots,
    delete_spot,
    delete_spots,
    fetch_spot,
    fetch_spot_count,
    fetch_spots,
    increment_recommend_count,
    insert_spot,
    search_spots,
    update_spot_fields,
)

__all__ = [
    # Connection
    "DB_FILENAME",
    "SPOT_COLUMNS",
    "closing_connection",
    "get_connection",
    "reset_schema_cache",
    "_init_schema",
    "_ensure_column_on_table",
    # Spots
    "RANKING_ORDER",
    "TEXT_COLUMNS",
    "fetch_spots",
    "search_spots",
    "fetch_spot",
    "fetch_spot_count",
    "insert_spot",
    "increment_recommend_count",
    "update_spot_fields",
    "delete_spot",
    "delete_spots",
    "delete_all_spots",
]
