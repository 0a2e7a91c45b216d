"""GET /api/episodes: guess autocomplete."""

from __future__ import annotations

import sqlite3
from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse

from game.logic.answer import hash_identifier
from game.logic.types import EpisodeCandidate
from web.search import parse_episode_query
from web.views.common import error_response

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.dal.episode_repository import EpisodeRepository

logger = structlog.get_logger()


async def search_episodes(request: Request) -> JSONResponse:
    """Up to 20 candidates, each carrying the hash of its id."""
    episodes: EpisodeRepository = request.app.state.episodes
    query = parse_episode_query(request.query_params.get("q", ""))
    try:
        found = await episodes.search_episodes(query)
    except sqlite3.Error:
        logger.exception("episode search failed", query=query.model_dump(exclude_none=True))
        return error_response("Failed to search episodes", HTTPStatus.INTERNAL_SERVER_ERROR)

    candidates = [
        EpisodeCandidate(
            id=ep.id,
            season=ep.season,
            episode_number=ep.episode_number,
            title=ep.title,
            synopsis=ep.plot_summary,
            hash=hash_identifier(ep.id),
        )
        for ep in found
    ]
    return JSONResponse({"episodes": [c.model_dump() for c in candidates]})
