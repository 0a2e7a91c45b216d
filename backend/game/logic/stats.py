"""
Local statistics bookkeeping.

A puzzle date contributes to the aggregates at most once: once a game for a
date has been recorded as WON or LOST, further outcomes for that date are
ignored, so reloading the page after a finished game never double counts.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

from game.logic.enums import GameStatus
from game.logic.types import MAX_GUESSES, LocalStats

if TYPE_CHECKING:
    from datetime import date

logger = structlog.get_logger()


def is_consecutive_day(previous: date | None, current: date) -> bool:
    """Return True when current is exactly one calendar day after previous."""
    if previous is None:
        return False
    return current - previous == timedelta(days=1)


def win_percentage(games_won: int, games_played: int) -> int:
    """Percentage of games won, rounded half up."""
    if games_played == 0:
        return 0
    return math.floor(games_won / games_played * 100 + 0.5)


def mark_in_progress(stats: LocalStats, puzzle_date: date) -> LocalStats:
    """Record that a game for puzzle_date has started but not finished."""
    if stats.last_played_date == puzzle_date:
        return stats
    return stats.model_copy(
        update={"last_played_date": puzzle_date, "last_game_status": GameStatus.IN_PROGRESS},
    )


def record_outcome(
    stats: LocalStats,
    *,
    won: bool,
    guess_count: int,
    puzzle_date: date,
) -> LocalStats:
    """
    Fold a finished game into the statistics.

    Args:
        stats: Current statistics
        won: Whether the game was won
        guess_count: Number of guesses used (1..6)
        puzzle_date: Date of the puzzle that was played

    Returns:
        Updated statistics, or the input unchanged when an outcome for
        puzzle_date was already recorded

    Raises:
        ValueError: If a win is reported with a guess count outside 1..6

    """
    if (
        stats.last_played_date == puzzle_date
        and stats.last_game_status is not None
        and stats.last_game_status.is_terminal
    ):
        logger.debug("outcome already recorded", puzzle_date=puzzle_date, status=stats.last_game_status)
        return stats

    games_played = stats.games_played + 1
    games_won = stats.games_won
    distribution = dict(stats.guess_distribution)

    if won:
        if not (1 <= guess_count <= MAX_GUESSES):
            raise ValueError(f"Invalid guess count {guess_count}, expected 1-{MAX_GUESSES}")
        games_won += 1
        distribution[guess_count] = distribution.get(guess_count, 0) + 1
        if is_consecutive_day(stats.last_completed_date, puzzle_date):
            current_streak = stats.current_streak + 1
        else:
            current_streak = 1
        status = GameStatus.WON
    else:
        current_streak = 0
        status = GameStatus.LOST

    return stats.model_copy(
        update={
            "games_played": games_played,
            "games_won": games_won,
            "win_percentage": win_percentage(games_won, games_played),
            "current_streak": current_streak,
            "max_streak": max(stats.max_streak, current_streak),
            "guess_distribution": distribution,
            "last_played_date": puzzle_date,
            "last_completed_date": puzzle_date,
            "last_game_status": status,
        },
    )
