"""GET/POST /api/stats: anonymized global outcome counters."""

from __future__ import annotations

import sqlite3
from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse

from shared.dal.models import MAX_GUESS_NUMBER
from shared.validators import parse_iso_date
from web.views.common import BadRequestError, error_response, read_json_object

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.dal.stats_repository import StatsRepository

logger = structlog.get_logger()


async def get_global_stats(request: Request) -> JSONResponse:
    stats_repo: StatsRepository = request.app.state.stats
    raw_date = request.query_params.get("date")
    if not raw_date:
        return error_response("Date parameter is required")
    try:
        puzzle_date = parse_iso_date(raw_date)
    except ValueError as e:
        return error_response(str(e))

    try:
        stats = await stats_repo.get_stats(puzzle_date)
    except sqlite3.Error:
        logger.exception("failed to fetch global stats", date=puzzle_date)
        return error_response("Failed to fetch stats", HTTPStatus.INTERNAL_SERVER_ERROR)
    return JSONResponse(stats.model_dump(mode="json"))


async def submit_outcome(request: Request) -> JSONResponse:
    """Record one finished game: guess_number 1..6 for a win on that guess, 0 for a loss."""
    stats_repo: StatsRepository = request.app.state.stats
    try:
        body = await read_json_object(request)
    except BadRequestError as e:
        return error_response(str(e))

    raw_date = body.get("date")
    guess_number = body.get("guess_number")
    if not raw_date or guess_number is None:
        return error_response("Date and guess_number are required")
    if (
        isinstance(guess_number, bool)
        or not isinstance(guess_number, int)
        or not 0 <= guess_number <= MAX_GUESS_NUMBER
    ):
        return error_response(f"guess_number must be between 0 and {MAX_GUESS_NUMBER}")
    try:
        puzzle_date = parse_iso_date(raw_date)
    except ValueError as e:
        return error_response(str(e))

    try:
        await stats_repo.record_outcome(puzzle_date, guess_number)
    except sqlite3.Error:
        logger.exception("failed to update global stats", date=puzzle_date, guess_number=guess_number)
        return error_response("Failed to update stats", HTTPStatus.INTERNAL_SERVER_ERROR)
    return JSONResponse({"success": True})
