"""GET /api/daily: today's puzzle."""

from __future__ import annotations

import sqlite3
from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse

from game.logic.answer import hash_identifier
from game.logic.types import BurgerInfo, EpisodeInfo, Puzzle, PuzzleHints, Quote
from web.views.common import error_response

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.dal.models import PuzzleRecord
    from shared.dal.puzzle_repository import PuzzleRepository

logger = structlog.get_logger()


def puzzle_from_record(record: PuzzleRecord, *, demo_mode: bool = False) -> Puzzle:
    """Build the player-facing puzzle. The answer episode id only leaves as its hash."""
    episode = record.episode
    quote = Quote(text=episode.quote_text, speaker=episode.quote_speaker) if episode.quote_text else None
    return Puzzle(
        puzzle_id=record.date,
        answer_hash=hash_identifier(episode.id),
        burger=BurgerInfo(name=record.burger.name, description=record.burger.description),
        quote=quote,
        still_url=episode.still_url,
        hints=PuzzleHints(
            store_next_door=episode.store_next_door,
            pest_control=episode.pest_control_truck,
            original_air_date=episode.original_air_date,
            guest_stars=episode.guest_stars,
        ),
        episode=EpisodeInfo(season=episode.season, episode_number=episode.episode_number, title=episode.title),
        demo_mode=demo_mode,
    )


async def daily_puzzle(request: Request) -> JSONResponse:
    puzzles: PuzzleRepository = request.app.state.puzzles
    today = request.app.state.today()
    try:
        record = await puzzles.get_puzzle(today)
    except sqlite3.Error:
        logger.exception("failed to fetch daily puzzle", date=today)
        return error_response("Failed to fetch puzzle", HTTPStatus.INTERNAL_SERVER_ERROR)

    if record is None:
        logger.info("no puzzle scheduled", date=today)
        return error_response("No puzzle available for today", HTTPStatus.NOT_FOUND)

    puzzle = puzzle_from_record(record, demo_mode=request.app.state.settings.demo_mode)
    return JSONResponse(puzzle.model_dump(mode="json"))
