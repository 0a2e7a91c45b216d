"""Abstract interface for the global per-date outcome counters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from shared.dal.models import GlobalStats


class StatsRepository(ABC):
    """Anonymized aggregate of daily outcomes.

    Increments must be atomic: concurrent reports for the same date and
    bucket may not lose updates.
    """

    @abstractmethod
    async def record_outcome(self, puzzle_date: date, guess_number: int) -> None:
        """Add one to the counter for guess_number (0 = loss, 1..6 = win on that guess).

        Raises:
            ValueError: If guess_number is outside 0..6

        """

    @abstractmethod
    async def get_stats(self, puzzle_date: date) -> GlobalStats:
        """Return the counters for puzzle_date, all zero when nothing was recorded."""
