"""SQLite database layer: connection management and repository implementations."""

from shared.db.connection import Database
from shared.db.episode_repository import SqliteEpisodeRepository
from shared.db.puzzle_repository import SqlitePuzzleRepository
from shared.db.stats_repository import SqliteStatsRepository

__all__ = [
    "Database",
    "SqliteEpisodeRepository",
    "SqlitePuzzleRepository",
    "SqliteStatsRepository",
]
