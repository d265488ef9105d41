#!/usr/bin/env python3
"""
Seed script for the cities collection.

Reads a CSV with `cityName,count` columns and creates each city through
CitiesService, so case-insensitive duplicates are skipped the same way the
API rejects them.

Usage:
    python -m scripts.seed_cities data/cities.csv
    python -m scripts.seed_cities data/cities.csv --replace
"""

import argparse
import asyncio
import csv
import logging
import os
import sys
from pathlib import Path

# Make the package importable when run from scripts/ or repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from city_manager.cities.service import CitiesService
from city_manager.core.database import Database
from city_manager.core.exceptions import ConflictException

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("seed_cities")


def read_rows(csv_path: Path):
    """Yield (name, count) pairs; rows with a blank name or bad count are skipped."""
    with csv_path.open(newline="") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            name = (row.get("cityName") or "").strip()
            try:
                count = int(row.get("count") or 0)
            except ValueError:
                logger.warning(f"Line {line_no}: invalid count {row.get('count')!r}, skipped")
                continue
            if not name or count < 0:
                logger.warning(f"Line {line_no}: invalid row, skipped")
                continue
            yield name, count


async def seed_cities(csv_path: Path, replace: bool = False) -> dict:
    stats = {"created": 0, "duplicates": 0}

    await Database.connect()
    try:
        if replace:
            await CitiesService.get_store().collection.delete_many({})
        await CitiesService.ensure_indexes()

        for name, count in read_rows(csv_path):
            try:
                await CitiesService.create(name, count)
                stats["created"] += 1
            except ConflictException:
                stats["duplicates"] += 1
    finally:
        await Database.disconnect()

    return stats


def main():
    parser = argparse.ArgumentParser(description="Seed the cities collection from a CSV file")
    parser.add_argument("csv_path", type=Path, help="CSV with cityName,count columns")
    parser.add_argument("--replace", action="store_true", help="Delete existing cities first")
    args = parser.parse_args()

    if not args.csv_path.exists():
        parser.error(f"CSV not found at {args.csv_path}")

    stats = asyncio.run(seed_cities(args.csv_path, replace=args.replace))
    logger.info(f"Seeded {stats['created']} cities ({stats['duplicates']} duplicates skipped)")


if __name__ == "__main__":
    main()
