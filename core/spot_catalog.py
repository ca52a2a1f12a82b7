"""
Spot Catalog - Spot Record Lifecycle and Queries.

Owns the spots table and every read/write operation over it: listing,
search, creation, partial update, recommendation counting and deletion.

The storage handle (a SQLite file path) is injected through the
constructor; each operation runs on its own short-lived connection.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Iterable, Optional

from utils.db import (
    _init_schema,
    closing_connection,
    delete_all_spots,
    fetch_spot,
    fetch_spot_count,
    fetch_spots,
    increment_recommend_count,
    insert_spot,
    update_spot_fields,
)
from utils.db import (
    delete_spot as db_delete_spot,
)
from utils.db import (
    delete_spots as db_delete_spots,
)
from utils.db import (
    search_spots as db_search_spots,
)
from utils.db.connection import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# SQLite stores integers as signed 64-bit values.
MIN_SPOT_ID = -(2**63)
MAX_SPOT_ID = 2**63 - 1


def is_storable_id(spot_id) -> bool:
    """True when `spot_id` is an int SQLite can bind. Anything else names no spot."""
    return (
        isinstance(spot_id, int)
        and not isinstance(spot_id, bool)
        and MIN_SPOT_ID <= spot_id <= MAX_SPOT_ID
    )


class SpotCatalogError(Exception):
    """Base class for catalog errors."""


class StorageFailure(SpotCatalogError):
    """The backing table is unreachable or corrupt."""


class Outcome(Enum):
    """Result of a write operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    NOOP = "noop"


@dataclass
class Spot:
    """
    One tourist attraction.

    Attributes:
        id: Storage-assigned key, never reused.
        name: Display name.
        description: Free text description.
        ticket: Price / admission info.
        transport: Access info.
        recommend_count: Popularity counter, only ever incremented.
        image_url: URL or path of an image, may be empty.
    """

    id: int
    name: str = ""
    description: str = ""
    ticket: str = ""
    transport: str = ""
    recommend_count: int = 0
    image_url: str = ""

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Spot":
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            ticket=row["ticket"],
            transport=row["transport"],
            recommend_count=row["recommend_count"],
            image_url=row["image_url"],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SpotFields:
    """Text fields of a new spot. Missing values are stored as empty strings."""

    name: str = ""
    description: str = ""
    ticket: str = ""
    transport: str = ""
    image_url: str = ""

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) is None:
                setattr(self, f.name, "")


@dataclass
class SpotPatch:
    """
    Partial update of a spot's text fields.

    A field set to None is left unchanged. Empty strings are treated the
    same way, so a patch can never blank a stored value.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    ticket: Optional[str] = None
    transport: Optional[str] = None
    image_url: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) == "":
                setattr(self, f.name, None)

    def changes(self) -> dict[str, str]:
        """Returns the present fields keyed by column name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


SEED_SPOTS = (
    SpotFields(
        name="West Lake",
        description="Famous scenic area in Hangzhou",
        ticket="Free",
        transport="Reachable by bus",
    ),
    SpotFields(
        name="Huangshan",
        description="Famous mountain in China",
        ticket="Ticket 230 CNY",
        transport="High-speed rail + coach",
    ),
)


class SpotCatalog:
    """CRUD and query operations over the spots table."""

    def __init__(self, db_path, timeout: float = DEFAULT_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"SpotCatalog(db_path={str(self.db_path)!r})"

    @contextmanager
    def _connection(self):
        try:
            with closing_connection(self.db_path, timeout=self.timeout) as conn:
                yield conn
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Storage error on {self.db_path}: {e}")
            raise StorageFailure(f"Spot storage failed: {e}") from e

    # --- Setup ---

    def initialize(self, seed_if_empty: bool = True) -> int:
        """
        Ensures the spots table exists and optionally seeds it.

        Args:
            seed_if_empty: Insert the demo spots when the table has no rows.

        Returns:
            Number of seed rows inserted (0 when already populated).
        """
        with self._connection() as conn:
            _init_schema(conn)
            if not seed_if_empty or fetch_spot_count(conn) > 0:
                return 0
            for seed in SEED_SPOTS:
                insert_spot(conn, asdict(seed))
        logger.info(f"Seeded {len(SEED_SPOTS)} spots into {self.db_path}")
        return len(SEED_SPOTS)

    def reset(self, seed: bool = True) -> int:
        """Deletes every spot and, if requested, inserts the seed spots again."""
        with self._connection() as conn:
            removed = delete_all_spots(conn)
        logger.info(f"Removed {removed} spots from {self.db_path}")
        return self.initialize(seed_if_empty=seed)

    # --- Queries ---

    def list(self) -> list[Spot]:
        """Returns all spots, most recommended first, ties by ascending id."""
        with self._connection() as conn:
            rows = fetch_spots(conn)
        return [Spot.from_row(row) for row in rows]

    def search(self, query: str | None) -> list[Spot]:
        """
        Returns spots whose name or description contains `query`.

        An empty query returns the full listing. Matching is a literal,
        case-sensitive substring test; ordering is the same as list().
        """
        if not query:
            return self.list()
        with self._connection() as conn:
            rows = db_search_spots(conn, query)
        logger.debug(f"Search {query!r} matched {len(rows)} spots")
        return [Spot.from_row(row) for row in rows]

    def get(self, spot_id: int) -> Spot | None:
        if not is_storable_id(spot_id):
            return None
        with self._connection() as conn:
            row = fetch_spot(conn, spot_id)
        return Spot.from_row(row) if row is not None else None

    def count(self) -> int:
        with self._connection() as conn:
            return fetch_spot_count(conn)

    # --- Writes ---

    def create(self, spot_fields: SpotFields | None = None, **kwargs) -> Spot:
        """
        Inserts a new spot with a recommend count of zero.

        Accepts either a SpotFields instance or the same fields as keyword
        arguments. No uniqueness checks are made.
        """
        if spot_fields is None:
            spot_fields = SpotFields(**kwargs)
        values = asdict(spot_fields)
        with self._connection() as conn:
            spot_id = insert_spot(conn, values)
        logger.info(f"Created spot {spot_id} ({spot_fields.name!r})")
        return Spot(id=spot_id, recommend_count=0, **values)

    def recommend(self, spot_id: int) -> Outcome:
        """
        Adds one to a spot's recommend count.

        Runs as a single UPDATE so concurrent calls never lose increments.
        An unknown id is a no-op.
        """
        if not is_storable_id(spot_id):
            logger.debug(f"Recommend ignored, {spot_id!r} is not a valid spot id")
            return Outcome.NOOP
        with self._connection() as conn:
            changed = increment_recommend_count(conn, spot_id)
        if not changed:
            logger.debug(f"Recommend ignored, spot {spot_id} does not exist")
            return Outcome.NOOP
        logger.info(f"Recommended spot {spot_id}")
        return Outcome.OK

    def update(self, spot_id: int, patch: SpotPatch | None = None, **kwargs) -> Outcome:
        """
        Applies a partial update to a spot.

        Args:
            spot_id: ID of the spot to edit.
            patch: Fields to change; None or empty fields are left as stored.

        Returns:
            Outcome.NOT_FOUND if the spot does not exist, else Outcome.OK.
        """
        if patch is None:
            patch = SpotPatch(**kwargs)
        changes = patch.changes()
        if not is_storable_id(spot_id):
            logger.info(f"Update rejected, {spot_id!r} is not a valid spot id")
            return Outcome.NOT_FOUND
        with self._connection() as conn:
            # The UPDATE's own row count decides existence; an empty patch
            # has no statement to run, so it looks the row up instead.
            if changes:
                found = update_spot_fields(conn, spot_id, changes) > 0
            else:
                found = fetch_spot(conn, spot_id) is not None
        if not found:
            logger.info(f"Update rejected, spot {spot_id} not found")
            return Outcome.NOT_FOUND
        logger.info(f"Updated spot {spot_id}: {sorted(changes)}")
        return Outcome.OK

    def delete(self, spot_id: int) -> Outcome:
        if not is_storable_id(spot_id):
            return Outcome.NOOP
        with self._connection() as conn:
            removed = db_delete_spot(conn, spot_id)
        if not removed:
            logger.debug(f"Delete ignored, spot {spot_id} does not exist")
            return Outcome.NOOP
        logger.info(f"Deleted spot {spot_id}")
        return Outcome.OK

    def batch_delete(self, spot_ids: Iterable[int] | None) -> Outcome:
        """
        Deletes every spot whose id is in `spot_ids` in one transaction.

        Unknown ids are ignored. Returns Outcome.NOOP when nothing was removed.
        """
        ids = sorted({i for i in spot_ids or () if is_storable_id(i)})
        if not ids:
            return Outcome.NOOP
        with self._connection() as conn:
            removed = db_delete_spots(conn, ids)
        logger.info(f"Batch delete removed {removed} of {len(ids)} requested spots")
        return Outcome.OK if removed else Outcome.NOOP
