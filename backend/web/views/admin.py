"""Admin API: episode hint editing, puzzle scheduling and still uploads."""

from __future__ import annotations

import functools
import sqlite3
from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from anyio import to_thread
from pydantic import BaseModel, Field, ValidationError
from starlette.datastructures import UploadFile
from starlette.responses import JSONResponse

from shared.dal.models import BurgerEdit, EpisodeHintUpdate, ScheduledPuzzle
from shared.storage import StillRejectedError
from shared.validators import parse_iso_date
from web.views.common import BadRequestError, error_response, read_json_object

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.dal.episode_repository import EpisodeRepository
    from shared.dal.puzzle_repository import PuzzleRepository
    from shared.storage import LocalStillStorage

logger = structlog.get_logger()


class EpisodeEditRequest(BaseModel):
    episode_id: str = Field(min_length=1)
    episode: EpisodeHintUpdate = Field(default_factory=EpisodeHintUpdate)
    burgers: list[BurgerEdit] = []


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


async def list_episodes(request: Request) -> JSONResponse:
    """GET /api/admin/episodes?search=&season= - episodes with all burgers."""
    episodes_repo: EpisodeRepository = request.app.state.episodes
    search = request.query_params.get("search") or None
    raw_season = request.query_params.get("season")
    season = None
    if raw_season:
        if not raw_season.isdigit():
            return error_response("season must be a number")
        season = int(raw_season)

    try:
        episodes = await episodes_repo.list_episodes(search=search, season=season)
        burgers = await episodes_repo.list_burgers()
    except sqlite3.Error:
        logger.exception("failed to list episodes")
        return error_response("Failed to fetch episodes", HTTPStatus.INTERNAL_SERVER_ERROR)

    return JSONResponse(
        {
            "episodes": [ep.model_dump() for ep in episodes],
            "burgers": [b.model_dump() for b in burgers],
        },
    )


async def update_episode(request: Request) -> JSONResponse:
    """PUT /api/admin/episodes - overwrite hint fields, then update or insert burgers."""
    episodes_repo: EpisodeRepository = request.app.state.episodes
    try:
        body = await read_json_object(request)
    except BadRequestError as e:
        return error_response(str(e))
    if not body.get("episode_id"):
        return error_response("Episode ID required")
    try:
        edit = EpisodeEditRequest.model_validate(body)
    except ValidationError as e:
        return error_response(_validation_message(e))

    try:
        found = await episodes_repo.update_episode_hints(edit.episode_id, edit.episode)
        if not found:
            return error_response("Episode not found", HTTPStatus.NOT_FOUND)
        burgers = await episodes_repo.save_burgers(edit.episode_id, edit.burgers)
    except ValueError as e:
        return error_response(str(e))
    except sqlite3.Error:
        logger.exception("failed to update episode", episode_id=edit.episode_id)
        return error_response("Failed to update episode", HTTPStatus.INTERNAL_SERVER_ERROR)

    logger.info("episode updated", episode_id=edit.episode_id, burgers=len(burgers))
    return JSONResponse({"success": True, "burgers": [b.model_dump() for b in burgers]})


async def list_puzzles(request: Request) -> JSONResponse:
    """GET /api/admin/puzzles?start=&end= - flattened schedule, both bounds inclusive."""
    puzzles_repo: PuzzleRepository = request.app.state.puzzles
    raw_start = request.query_params.get("start")
    raw_end = request.query_params.get("end")
    if not raw_start or not raw_end:
        return error_response("Start and end dates required")
    try:
        start = parse_iso_date(raw_start)
        end = parse_iso_date(raw_end)
    except ValueError as e:
        return error_response(str(e))

    try:
        entries = await puzzles_repo.list_schedule(start, end)
    except sqlite3.Error:
        logger.exception("failed to list puzzles", start=start, end=end)
        return error_response("Failed to fetch puzzles", HTTPStatus.INTERNAL_SERVER_ERROR)
    return JSONResponse({"puzzles": [e.model_dump(mode="json") for e in entries]})


async def schedule_puzzle(request: Request) -> JSONResponse:
    """POST /api/admin/puzzles - assign a burger to a date, replacing any previous one."""
    puzzles_repo: PuzzleRepository = request.app.state.puzzles
    try:
        body = await read_json_object(request)
    except BadRequestError as e:
        return error_response(str(e))
    raw_date = body.get("date")
    burger_id = body.get("burger_id")
    if not raw_date or not burger_id or not isinstance(burger_id, str):
        return error_response("Date and burger_id required")
    try:
        puzzle = ScheduledPuzzle(date=parse_iso_date(raw_date), burger_id=burger_id)
    except ValueError as e:
        return error_response(str(e))

    try:
        await puzzles_repo.schedule_puzzle(puzzle)
    except ValueError as e:
        return error_response(str(e))
    except sqlite3.Error:
        logger.exception("failed to schedule puzzle", date=puzzle.date)
        return error_response("Failed to schedule puzzle", HTTPStatus.INTERNAL_SERVER_ERROR)

    logger.info("puzzle scheduled", date=puzzle.date, burger_id=burger_id)
    return JSONResponse({"success": True})


async def delete_puzzle(request: Request) -> JSONResponse:
    """DELETE /api/admin/puzzles - clear a date's assignment."""
    puzzles_repo: PuzzleRepository = request.app.state.puzzles
    try:
        body = await read_json_object(request)
    except BadRequestError as e:
        return error_response(str(e))
    raw_date = body.get("date")
    if not raw_date:
        return error_response("Date required")
    try:
        puzzle_date = parse_iso_date(raw_date)
    except ValueError as e:
        return error_response(str(e))

    try:
        deleted = await puzzles_repo.delete_puzzle(puzzle_date)
    except sqlite3.Error:
        logger.exception("failed to delete puzzle", date=puzzle_date)
        return error_response("Failed to delete puzzle", HTTPStatus.INTERNAL_SERVER_ERROR)

    logger.info("puzzle deleted", date=puzzle_date, existed=deleted)
    return JSONResponse({"success": True, "deleted": deleted})


async def upload_still(request: Request) -> JSONResponse:
    """POST /api/admin/upload - multipart ``file``; stored under a random name."""
    storage: LocalStillStorage = request.app.state.still_storage
    async with request.form(max_files=1, max_fields=10) as form:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            return error_response("No file provided")
        try:
            if upload.size is not None:
                storage.validate(upload.content_type, upload.size)
            content = await upload.read()
            stored = await to_thread.run_sync(
                functools.partial(
                    storage.save_still,
                    content,
                    content_type=upload.content_type,
                    filename=upload.filename,
                ),
            )
        except StillRejectedError as e:
            return error_response(str(e))
        except OSError:
            logger.exception("failed to store still", filename=upload.filename)
            return error_response("Failed to upload file", HTTPStatus.INTERNAL_SERVER_ERROR)

    return JSONResponse({"success": True, "url": stored.url, "path": stored.path})
