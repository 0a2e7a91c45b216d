"""
Progressive hint reveal table.

Hints unlock in a fixed, curated order independent of the player:
quote attribution, then the still (blurred), then the store next door,
then the pest control truck, then the unblurred still together with the
season number. Step 6 is the full reveal forced when a game is lost.
The episode number is never revealed by the table; it is shown once the
game is over.
"""

from pydantic import BaseModel

from game.logic.types import MAX_REVEAL_STEP


class RevealState(BaseModel, frozen=True):
    """Visibility flags for each hint category at one reveal step."""

    quote_attribution_visible: bool = False
    still_visible: bool = False
    still_blurred: bool = True
    store_visible: bool = False
    pest_control_visible: bool = False
    season_visible: bool = False
    episode_number_visible: bool = False


_REVEAL_TABLE: tuple[RevealState, ...] = (
    # 0: burger name and quote text only
    RevealState(),
    # 1: who said it
    RevealState(quote_attribution_visible=True),
    # 2: blurred still
    RevealState(quote_attribution_visible=True, still_visible=True),
    # 3: store next door
    RevealState(quote_attribution_visible=True, still_visible=True, store_visible=True),
    # 4: pest control truck
    RevealState(
        quote_attribution_visible=True,
        still_visible=True,
        store_visible=True,
        pest_control_visible=True,
    ),
    # 5: clear still and season
    RevealState(
        quote_attribution_visible=True,
        still_visible=True,
        still_blurred=False,
        store_visible=True,
        pest_control_visible=True,
        season_visible=True,
    ),
    # 6: full reveal (game lost)
    RevealState(
        quote_attribution_visible=True,
        still_visible=True,
        still_blurred=False,
        store_visible=True,
        pest_control_visible=True,
        season_visible=True,
    ),
)


def reveal_state_for_step(step: int) -> RevealState:
    """Return the visibility flags for a reveal step in 0..6.

    Raises:
        ValueError: If step is outside 0..6

    """
    if not (0 <= step <= MAX_REVEAL_STEP):
        raise ValueError(f"Invalid reveal step {step}, expected 0-{MAX_REVEAL_STEP}")
    return _REVEAL_TABLE[step]
