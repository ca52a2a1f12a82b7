#!/usr/bin/env python3
"""
Seed Script for the Spot Catalog

Prepares a spots database for demos and UI testing:
- Creates the spots table if it does not exist
- Inserts the two seed spots when the table is empty
- Optionally wipes all spots first and reseeds

Usage:
    python scripts/seed_spots.py                   # Seed if empty
    python scripts/seed_spots.py --reset           # Delete all spots, then seed
    python scripts/seed_spots.py --list            # Print the ranked listing
    python scripts/seed_spots.py --dry-run         # Show what would happen

Run from the project root directory.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_config  # noqa: E402
from core.spot_catalog import SEED_SPOTS, SpotCatalog, StorageFailure  # noqa: E402


def print_listing(catalog: SpotCatalog) -> None:
    spots = catalog.list()
    print(f"{'ID':>4}  {'Recs':>4}  Name")
    for spot in spots:
        print(f"{spot.id:>4}  {spot.recommend_count:>4}  {spot.name}")
    print(f"\n{len(spots)} spots")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create or reseed the Spot Catalog database"
    )
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite database path (default: DB_PATH from config)"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete every spot before seeding"
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="Print the ranked listing afterwards"
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Show what would be done without touching the database"
    )

    args = parser.parse_args(argv)
    db_path = args.db or get_config()["DB_PATH"]

    print("=" * 60)
    print("Spot Catalog Seed Script")
    print("=" * 60)
    print(f"Database: {Path(db_path).absolute()}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'LIVE'}")
    print("=" * 60)

    if args.dry_run:
        action = "delete all spots, then insert" if args.reset else "insert (if empty)"
        print(f"\nWould {action} {len(SEED_SPOTS)} seed spots:")
        for seed in SEED_SPOTS:
            print(f"  - {seed.name}")
        return 0

    catalog = SpotCatalog(db_path)
    try:
        if args.reset:
            seeded = catalog.reset(seed=True)
        else:
            seeded = catalog.initialize(seed_if_empty=True)
    except StorageFailure as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"\nSeeded {seeded} spots ({catalog.count()} total).")

    if args.list:
        print()
        print_listing(catalog)

    return 0


if __name__ == "__main__":
    sys.exit(main())
