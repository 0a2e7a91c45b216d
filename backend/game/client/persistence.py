"""Game state and statistics persistence on top of a KeyValueStore.

One game state and one statistics record live under fixed keys. The stored
game state carries its puzzle id; a state for another date is stale and is
discarded on load rather than migrated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from game.logic.types import GameState, LocalStats

if TYPE_CHECKING:
    from datetime import date

    from game.client.storage import KeyValueStore

logger = structlog.get_logger()

GAME_STATE_KEY = "burger-daydle-game"
STATS_KEY = "burger-daydle-stats"


class GameStore:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load_game_state(self, puzzle_id: date) -> GameState | None:
        """Return the saved state for puzzle_id, or None when absent, stale or unreadable."""
        raw = self._store.get(GAME_STATE_KEY)
        if raw is None:
            return None
        try:
            state = GameState.model_validate_json(raw)
        except ValidationError:
            logger.warning("discarding unreadable game state")
            self._store.delete(GAME_STATE_KEY)
            return None
        if state.puzzle_id != puzzle_id:
            logger.info("discarding stale game state", stored=state.puzzle_id, current=puzzle_id)
            self._store.delete(GAME_STATE_KEY)
            return None
        return state

    def save_game_state(self, state: GameState) -> None:
        """Overwrite the saved game state (any previous puzzle's state is replaced)."""
        self._store.set(GAME_STATE_KEY, state.model_dump_json())

    def load_stats(self) -> LocalStats:
        raw = self._store.get(STATS_KEY)
        if raw is None:
            return LocalStats()
        try:
            return LocalStats.model_validate_json(raw)
        except ValidationError:
            logger.warning("unreadable stats, starting fresh")
            return LocalStats()

    def save_stats(self, stats: LocalStats) -> None:
        self._store.set(STATS_KEY, stats.model_dump_json())
