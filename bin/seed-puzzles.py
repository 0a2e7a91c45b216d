"""Shuffle every burger in the database and schedule one per day.

Usage:
    uv run python bin/seed-puzzles.py [start-date]
    uv run python bin/seed-puzzles.py 2026-01-20 --seed 42

The start date defaults to today (UTC). Existing assignments for the
covered dates are replaced. Reads DAYDLE_DATABASE_PATH.
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from shared.db import Database, SqliteEpisodeRepository, SqlitePuzzleRepository
from shared.logging import setup_logging
from shared.validators import parse_iso_date
from web.server.settings import WebServerSettings
from wiki.schedule import build_schedule

PREVIEW_COUNT = 5


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("start_date", nargs="?", default=None, help="first puzzle date, YYYY-MM-DD")
    parser.add_argument("--seed", type=int, default=None, help="shuffle seed for a reproducible schedule")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = WebServerSettings()
    if settings.database_path is None:
        print("Error: DAYDLE_DATABASE_PATH is not set")
        return 1

    try:
        start = parse_iso_date(args.start_date) if args.start_date else datetime.now(tz=UTC).date()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    db = Database(settings.database_path)
    db.connect()
    try:
        episodes_repo = SqliteEpisodeRepository(db)
        burgers = await episodes_repo.list_burgers()
        if not burgers:
            print("Error: no burgers found. Run bin/scrape-wiki.py first.")
            return 1
        print(f"Found {len(burgers)} burgers, scheduling from {start.isoformat()}")

        schedule = build_schedule(burgers, start, random.Random(args.seed))  # noqa: S311
        names = {b.id: b.name for b in burgers}
        for puzzle in schedule[:PREVIEW_COUNT]:
            print(f"  {puzzle.date.isoformat()}: {names[puzzle.burger_id]}")

        try:
            count = await SqlitePuzzleRepository(db).schedule_many(schedule)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
    finally:
        db.close()

    print(f"Scheduled {count} burger puzzles")
    print(f"  From: {schedule[0].date.isoformat()}")
    print(f"  To:   {schedule[-1].date.isoformat()}")
    return 0


if __name__ == "__main__":
    load_dotenv()
    setup_logging()
    sys.exit(asyncio.run(main()))
