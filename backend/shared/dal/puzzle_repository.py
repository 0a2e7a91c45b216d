"""Abstract interface for the daily puzzle schedule."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from shared.dal.models import PuzzleRecord, PuzzleScheduleEntry, ScheduledPuzzle


class PuzzleRepository(ABC):
    """Maps each calendar date to at most one burger."""

    @abstractmethod
    async def get_puzzle(self, puzzle_date: date) -> PuzzleRecord | None:
        """Return the puzzle scheduled for puzzle_date joined with its burger and episode."""

    @abstractmethod
    async def list_schedule(self, start: date | None = None, end: date | None = None) -> list[PuzzleScheduleEntry]:
        """Return schedule rows in date order, bounded inclusively when start/end are given."""

    @abstractmethod
    async def schedule_puzzle(self, puzzle: ScheduledPuzzle) -> None:
        """Assign a burger to a date, replacing any existing assignment.

        Raises:
            ValueError: If the burger does not exist

        """

    @abstractmethod
    async def schedule_many(self, puzzles: list[ScheduledPuzzle]) -> int:
        """Upsert several assignments in one transaction. Returns the number written."""

    @abstractmethod
    async def delete_puzzle(self, puzzle_date: date) -> bool: ...
