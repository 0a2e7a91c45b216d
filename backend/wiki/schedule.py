"""Assigns burgers to consecutive puzzle dates."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from shared.dal.models import ScheduledPuzzle

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence
    from datetime import date

    from shared.dal.models import Burger


def build_schedule(burgers: Sequence[Burger], start_date: date, rng: random.Random) -> list[ScheduledPuzzle]:
    """Shuffle burgers and give each one the next date from start_date onward."""
    shuffled = list(burgers)
    rng.shuffle(shuffled)
    return [
        ScheduledPuzzle(date=start_date + timedelta(days=offset), burger_id=burger.id)
        for offset, burger in enumerate(shuffled)
    ]
