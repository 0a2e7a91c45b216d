"""SQLite-backed global stats counters."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from shared.dal.models import GlobalStats, stats_column
from shared.dal.stats_repository import StatsRepository

if TYPE_CHECKING:
    from datetime import date

    from shared.db.connection import Database

_COUNTER_COLUMNS = ", ".join(stats_column(n) for n in range(1, 7)) + ", losses"


class SqliteStatsRepository(StatsRepository):
    """SQLite implementation of StatsRepository.

    Each report is one INSERT ... ON CONFLICT DO UPDATE statement, so the
    increment is atomic at the database level, not read-modify-write.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def record_outcome(self, puzzle_date: date, guess_number: int) -> None:
        column = stats_column(guess_number)
        async with self._lock:
            self._db.connection.execute(
                f"INSERT INTO game_stats (date, {column}) VALUES (?, 1) "  # noqa: S608
                f"ON CONFLICT (date) DO UPDATE SET {column} = {column} + 1",
                (puzzle_date.isoformat(),),
            )
            self._db.connection.commit()

    async def get_stats(self, puzzle_date: date) -> GlobalStats:
        row = self._db.connection.execute(
            f"SELECT {_COUNTER_COLUMNS} FROM game_stats WHERE date = ?",  # noqa: S608
            (puzzle_date.isoformat(),),
        ).fetchone()
        if row is None:
            return GlobalStats(date=puzzle_date)
        return GlobalStats(date=puzzle_date, **dict(row))
