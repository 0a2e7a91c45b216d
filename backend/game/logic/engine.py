"""
Guessing state machine for the daily puzzle.

States are IN_PROGRESS, WON and LOST (the last two terminal). The reveal step
is an orthogonal counter 0..6: each wrong guess that does not end the game
unlocks one more hint (capped at 5), a loss forces the full reveal (6), and a
win leaves the step where it was.

Every function here is pure. Expected conditions (duplicate guesses,
guesses after the game ended) return the input state unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from game.logic.answer import validate_guess
from game.logic.enums import GameStatus
from game.logic.types import MAX_GUESSES, MAX_REVEAL_STEP, GameState, GuessAttempt

if TYPE_CHECKING:
    from game.logic.types import EpisodeCandidate, Puzzle

logger = structlog.get_logger()

# Highest step reachable by wrong guesses; MAX_REVEAL_STEP is reserved for the end of a lost game.
LAST_PLAYABLE_REVEAL_STEP = MAX_REVEAL_STEP - 1

# Guess number reported to global stats for a lost game.
LOSS_GUESS_NUMBER = 0


class GuessResult(BaseModel, frozen=True):
    """Outcome of one guess submission."""

    state: GameState
    accepted: bool  # False when the guess was ignored (duplicate or game over)
    is_correct: bool = False

    @property
    def ended_game(self) -> bool:
        return self.accepted and self.state.status.is_terminal


def initialize_game(puzzle: Puzzle, saved: GameState | None = None) -> GameState:
    """
    Return the game state for a puzzle.

    A saved state for the same puzzle date is restored verbatim. A saved
    state for any other date is stale and ignored; a fresh game starts at
    step 0 with no guesses.
    """
    if saved is not None and saved.puzzle_id == puzzle.puzzle_id:
        return saved
    return GameState(puzzle_id=puzzle.puzzle_id, answer_hash=puzzle.answer_hash)


def submit_guess(
    state: GameState,
    episode: EpisodeCandidate,
    *,
    now: datetime | None = None,
) -> GuessResult:
    """
    Apply one guess to the game state.

    Args:
        state: Current game state
        episode: The guessed episode
        now: Timestamp recorded on the attempt (defaults to current UTC time)

    Returns:
        GuessResult carrying the new state. ``accepted`` is False and the
        state is returned unchanged when the game is already over or the
        episode was guessed before.

    """
    if state.status.is_terminal:
        logger.debug("guess ignored, game over", puzzle_id=state.puzzle_id, status=state.status)
        return GuessResult(state=state, accepted=False)
    if state.has_guessed(episode.id):
        logger.debug("guess ignored, duplicate episode", puzzle_id=state.puzzle_id, episode_id=episode.id)
        return GuessResult(state=state, accepted=False)

    is_correct = validate_guess(episode.id, state.answer_hash)
    attempt = GuessAttempt(episode=episode, is_correct=is_correct, timestamp=now or datetime.now(tz=UTC))
    guesses = (*state.guesses, attempt)

    if is_correct:
        status = GameStatus.WON
        reveal_step = state.reveal_step
    elif len(guesses) >= MAX_GUESSES:
        status = GameStatus.LOST
        reveal_step = MAX_REVEAL_STEP
    else:
        status = GameStatus.IN_PROGRESS
        reveal_step = min(state.reveal_step + 1, LAST_PLAYABLE_REVEAL_STEP)

    new_state = state.model_copy(update={"guesses": guesses, "status": status, "reveal_step": reveal_step})
    return GuessResult(state=new_state, accepted=True, is_correct=is_correct)


def outcome_guess_number(state: GameState) -> int:
    """
    Return the guess number reported to global stats for a finished game.

    The winning attempt index (1..6) for a win, 0 for a loss.

    Raises:
        ValueError: If the game is still in progress

    """
    if state.status == GameStatus.WON:
        return state.guess_count
    if state.status == GameStatus.LOST:
        return LOSS_GUESS_NUMBER
    raise ValueError(f"Game for {state.puzzle_id} is still in progress")
