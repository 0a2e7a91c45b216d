"""
Player-side daily game session.

Ties the guessing engine to the puzzle API and device-local persistence:
loads today's puzzle, restores or starts the game, applies guesses, and on a
finished game records local statistics and reports the anonymized outcome
to the global stats endpoint. The global report is fire-and-forget: it never
blocks a guess and its failures never touch local state.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import httpx
import structlog

from game.client.api import DaydleApiClient
from game.client.persistence import GameStore
from game.client.storage import JsonFileKeyValueStore
from game.logic.engine import initialize_game, outcome_guess_number, submit_guess
from game.logic.enums import GameStatus
from game.logic.reveal import reveal_state_for_step
from game.logic.share import build_share_text
from game.logic.stats import mark_in_progress, record_outcome
from game.logic.view import build_puzzle_view

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date, datetime

    from game.client.settings import ClientSettings
    from game.logic.engine import GuessResult
    from game.logic.reveal import RevealState
    from game.logic.types import EpisodeCandidate, GameState, LocalStats, Puzzle
    from game.logic.view import PuzzleView

logger = structlog.get_logger()


class SessionNotLoadedError(RuntimeError):
    pass


class DailyGameSession:
    def __init__(
        self,
        api: DaydleApiClient,
        store: GameStore,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._api = api
        self._store = store
        self._clock = clock
        self._puzzle: Puzzle | None = None
        self._state: GameState | None = None
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def puzzle(self) -> Puzzle:
        if self._puzzle is None:
            raise SessionNotLoadedError("Session has no puzzle loaded")
        return self._puzzle

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise SessionNotLoadedError("Session has no game state loaded")
        return self._state

    @property
    def stats(self) -> LocalStats:
        return self._store.load_stats()

    @property
    def reveal(self) -> RevealState:
        return reveal_state_for_step(self.state.reveal_step)

    @property
    def pending_submissions(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._pending)

    async def load(self) -> GameState:
        """
        Fetch today's puzzle and restore or initialize the game.

        Raises:
            PuzzleUnavailableError: If the puzzle cannot be loaded (including
                PuzzleNotFoundError when none is scheduled)

        """
        puzzle = await self._api.get_daily_puzzle()
        saved = self._store.load_game_state(puzzle.puzzle_id)
        state = initialize_game(puzzle, saved)
        if saved is None:
            self._store.save_game_state(state)
            self._store.save_stats(mark_in_progress(self._store.load_stats(), puzzle.puzzle_id))
            logger.info("started daily game", puzzle_id=puzzle.puzzle_id, demo_mode=puzzle.demo_mode)
        else:
            logger.info("restored daily game", puzzle_id=puzzle.puzzle_id, guesses=state.guess_count)
        self._puzzle = puzzle
        self._state = state
        return state

    def visible_hints(self) -> PuzzleView:
        """The puzzle as the player may currently see it."""
        return build_puzzle_view(self.puzzle, self.state)

    async def search(self, query: str) -> list[EpisodeCandidate]:
        """Search episodes, leaving out ones already guessed."""
        guessed = set(self.state.guessed_ids)
        candidates = await self._api.search_episodes(query)
        return [c for c in candidates if c.id not in guessed]

    async def guess(self, episode: EpisodeCandidate) -> GuessResult:
        """Apply a guess, persist the result, and handle the end of the game."""
        result = submit_guess(self.state, episode, now=self._clock() if self._clock else None)
        if not result.accepted:
            return result

        self._state = result.state
        self._store.save_game_state(result.state)

        if result.ended_game:
            self._finish(result.state)
        return result

    def _finish(self, state: GameState) -> None:
        won = state.status == GameStatus.WON
        stats = record_outcome(
            self._store.load_stats(),
            won=won,
            guess_count=state.guess_count,
            puzzle_date=state.puzzle_id,
        )
        self._store.save_stats(stats)
        logger.info(
            "daily game finished",
            puzzle_id=state.puzzle_id,
            status=state.status,
            guesses=state.guess_count,
            streak=stats.current_streak,
        )
        self._schedule_submission(state.puzzle_id, outcome_guess_number(state))

    def _schedule_submission(self, puzzle_date: date, guess_number: int) -> None:
        task = asyncio.create_task(self._submit_outcome(puzzle_date, guess_number))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _submit_outcome(self, puzzle_date: date, guess_number: int) -> None:
        try:
            await self._api.submit_outcome(puzzle_date, guess_number)
        except httpx.HTTPError as e:
            logger.warning("failed to submit global stats", puzzle_date=puzzle_date, error=str(e))

    async def drain(self) -> None:
        """Wait for outstanding global stats submissions."""
        if self._pending:
            await asyncio.gather(*self._pending)

    def share_text(self) -> str | None:
        """Share text for a finished game, None while in progress."""
        state = self.state
        if not state.is_over:
            return None
        return build_share_text(
            state.puzzle_id,
            won=state.status == GameStatus.WON,
            guess_count=state.guess_count,
        )


def create_session(settings: ClientSettings, *, api: DaydleApiClient | None = None) -> DailyGameSession:
    """Session backed by the JSON state file at settings.state_path."""
    store = JsonFileKeyValueStore(Path(settings.state_path).expanduser())
    if api is None:
        api = DaydleApiClient(settings.api_url, timeout=settings.timeout_seconds)
    return DailyGameSession(api, GameStore(store))
