"""SQLite-backed daily puzzle schedule."""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import date
from typing import TYPE_CHECKING

import structlog

from shared.dal.models import Burger, Episode, PuzzleRecord, PuzzleScheduleEntry, ScheduledPuzzle
from shared.dal.puzzle_repository import PuzzleRepository

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()

_EPISODE_SELECT = ", ".join(f"e.{col} AS episode_{col}" for col in Episode.model_fields)

_UPSERT_SQL = "INSERT INTO daily_puzzles (date, burger_id) VALUES (?, ?) ON CONFLICT (date) DO UPDATE SET burger_id = excluded.burger_id"


class SqlitePuzzleRepository(PuzzleRepository):
    """SQLite implementation of PuzzleRepository.

    Dates are stored as ISO strings so range queries compare lexically.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def get_puzzle(self, puzzle_date: date) -> PuzzleRecord | None:
        row = self._db.connection.execute(
            f"SELECT p.date, b.id AS burger_id, b.name AS burger_name, b.description AS burger_description, {_EPISODE_SELECT} "  # noqa: S608
            "FROM daily_puzzles p "
            "JOIN burgers b ON b.id = p.burger_id "
            "JOIN episodes e ON e.id = b.episode_id "
            "WHERE p.date = ?",
            (puzzle_date.isoformat(),),
        ).fetchone()
        if row is None:
            return None
        episode = Episode.model_validate({col: row[f"episode_{col}"] for col in Episode.model_fields})
        burger = Burger(
            id=row["burger_id"],
            episode_id=episode.id,
            name=row["burger_name"],
            description=row["burger_description"],
        )
        return PuzzleRecord(date=date.fromisoformat(row["date"]), burger=burger, episode=episode)

    async def list_schedule(self, start: date | None = None, end: date | None = None) -> list[PuzzleScheduleEntry]:
        clauses: list[str] = []
        params: list[str] = []
        if start is not None:
            clauses.append("p.date >= ?")
            params.append(start.isoformat())
        if end is not None:
            clauses.append("p.date <= ?")
            params.append(end.isoformat())
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._db.connection.execute(
            "SELECT p.date, p.burger_id, b.name AS burger_name, e.title AS episode_title, "  # noqa: S608
            "e.season, e.episode_number "
            "FROM daily_puzzles p "
            "LEFT JOIN burgers b ON b.id = p.burger_id "
            "LEFT JOIN episodes e ON e.id = b.episode_id "
            f"{where} ORDER BY p.date",
            tuple(params),
        ).fetchall()
        return [PuzzleScheduleEntry.model_validate(dict(row)) for row in rows]

    async def schedule_puzzle(self, puzzle: ScheduledPuzzle) -> None:
        """Upsert a date assignment. Raises ValueError if the burger does not exist."""
        async with self._lock:
            try:
                self._db.connection.execute(_UPSERT_SQL, (puzzle.date.isoformat(), puzzle.burger_id))
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Unknown burger '{puzzle.burger_id}'") from exc

    async def schedule_many(self, puzzles: list[ScheduledPuzzle]) -> int:
        """Upsert all assignments in a single transaction; any failure rolls back the batch."""
        conn = self._db.connection
        async with self._lock:
            try:
                conn.executemany(_UPSERT_SQL, [(p.date.isoformat(), p.burger_id) for p in puzzles])
                conn.commit()
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise ValueError(f"Could not schedule puzzles: {exc}") from exc
        logger.info("scheduled puzzles", count=len(puzzles))
        return len(puzzles)

    async def delete_puzzle(self, puzzle_date: date) -> bool:
        async with self._lock:
            cursor = self._db.connection.execute(
                "DELETE FROM daily_puzzles WHERE date = ?",
                (puzzle_date.isoformat(),),
            )
            self._db.connection.commit()
        return cursor.rowcount > 0
