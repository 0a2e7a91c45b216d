"""
Player-facing view of a puzzle.

Combines a puzzle with the current game state and masks every hint the
reveal step has not unlocked yet. Once the game is over the whole source
episode is shown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from game.logic.reveal import reveal_state_for_step

if TYPE_CHECKING:
    from game.logic.types import GameState, Puzzle

NOT_SHOWN = "Not shown"


class PuzzleView(BaseModel, frozen=True):
    """What the player can see right now. None means locked."""

    puzzle_id: str
    burger_name: str
    burger_description: str | None = None
    quote_text: str | None = None
    quote_speaker: str | None = None
    still_url: str | None = None
    still_blurred: bool = True
    store_next_door: str | None = None
    pest_control: str | None = None
    season: int | None = None
    episode_number: int | None = None
    episode_title: str | None = None
    guesses_used: int = 0
    is_over: bool = False


def build_puzzle_view(puzzle: Puzzle, state: GameState) -> PuzzleView:
    """Return the masked view of puzzle for the given game state."""
    reveal = reveal_state_for_step(state.reveal_step)
    is_over = state.is_over
    quote = puzzle.quote

    return PuzzleView(
        puzzle_id=puzzle.puzzle_id.isoformat(),
        burger_name=puzzle.burger.name,
        burger_description=puzzle.burger.description,
        quote_text=quote.text if quote else None,
        quote_speaker=quote.speaker if quote and (reveal.quote_attribution_visible or is_over) else None,
        still_url=puzzle.still_url if reveal.still_visible or is_over else None,
        still_blurred=reveal.still_blurred and not is_over,
        store_next_door=(puzzle.hints.store_next_door or NOT_SHOWN) if reveal.store_visible or is_over else None,
        pest_control=(puzzle.hints.pest_control or NOT_SHOWN) if reveal.pest_control_visible or is_over else None,
        season=puzzle.episode.season if reveal.season_visible or is_over else None,
        episode_number=puzzle.episode.episode_number if reveal.episode_number_visible or is_over else None,
        episode_title=puzzle.episode.title if is_over else None,
        guesses_used=state.guess_count,
        is_over=is_over,
    )
