"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.episode_repository import EpisodeRepository
from shared.dal.models import (
    Burger,
    BurgerEdit,
    Episode,
    EpisodeHintUpdate,
    EpisodeQuery,
    GlobalStats,
    PuzzleRecord,
    PuzzleScheduleEntry,
    ScheduledPuzzle,
    ScrapedEpisode,
)
from shared.dal.puzzle_repository import PuzzleRepository
from shared.dal.stats_repository import StatsRepository

__all__ = [
    "Burger",
    "BurgerEdit",
    "Episode",
    "EpisodeHintUpdate",
    "EpisodeQuery",
    "EpisodeRepository",
    "GlobalStats",
    "PuzzleRecord",
    "PuzzleRepository",
    "PuzzleScheduleEntry",
    "ScheduledPuzzle",
    "ScrapedEpisode",
    "StatsRepository",
]
