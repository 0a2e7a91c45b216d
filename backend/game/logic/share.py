"""Spoiler-free share text for a finished game."""

from __future__ import annotations

from typing import TYPE_CHECKING

from game.logic.types import MAX_GUESSES

if TYPE_CHECKING:
    from datetime import date

SHARE_TITLE = "🍔 Burger of the Daydle"
SHARE_URL = "burgeroftheday.dle"
_WIN_ROW = "🟩🟩🟩🟩🟩"
_MISS_ROW = "🟥🟥🟥🟥🟥"


def build_share_text(
    puzzle_date: date,
    *,
    won: bool,
    guess_count: int,
    max_guesses: int = MAX_GUESSES,
) -> str:
    """Build the share text: title line, score line and one emoji row per guess."""
    result = f"{guess_count}/{max_guesses}" if won else f"X/{max_guesses}"
    rows = [_MISS_ROW] * ((guess_count - 1) if won else max_guesses)
    if won:
        rows.append(_WIN_ROW)
    grid = "\n".join(rows)
    return f"{SHARE_TITLE} {puzzle_date.isoformat()}\n{result}\n\n{grid}\n\nPlay at: {SHARE_URL}"
