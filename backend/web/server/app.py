from __future__ import annotations

import contextlib
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from shared.build_info import APP_VERSION, git_commit
from shared.dal.demo import DemoRepository
from shared.db import Database, SqliteEpisodeRepository, SqlitePuzzleRepository, SqliteStatsRepository
from shared.logging import setup_logging
from shared.storage import LocalStillStorage
from web.auth.policy import ADMIN_KEY_HEADER, admin_only, public_route, validate_route_auth_policy
from web.server.settings import WebServerSettings
from web.views.admin import (
    delete_puzzle,
    list_episodes,
    list_puzzles,
    schedule_puzzle,
    update_episode,
    upload_still,
)
from web.views.daily import daily_puzzle
from web.views.episodes import search_episodes
from web.views.stats import get_global_stats, submit_outcome

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from starlette.requests import Request

    from shared.dal import EpisodeRepository, PuzzleRepository, StatsRepository


def utc_today() -> date:
    return datetime.now(tz=UTC).date()


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": git_commit()})


def _build_routes() -> list[Route | Mount]:
    return [
        Route("/health", public_route(health), methods=["GET"], name="health"),
        # Player API
        Route("/api/daily", public_route(daily_puzzle), methods=["GET"], name="daily_puzzle"),
        Route("/api/episodes", public_route(search_episodes), methods=["GET"], name="search_episodes"),
        Route("/api/stats", public_route(get_global_stats), methods=["GET"], name="get_global_stats"),
        Route("/api/stats", public_route(submit_outcome), methods=["POST"], name="submit_outcome"),
        # Admin API (X-Admin-Key)
        Route("/api/admin/episodes", admin_only(list_episodes), methods=["GET"], name="admin_list_episodes"),
        Route("/api/admin/episodes", admin_only(update_episode), methods=["PUT"], name="admin_update_episode"),
        Route("/api/admin/puzzles", admin_only(list_puzzles), methods=["GET"], name="admin_list_puzzles"),
        Route("/api/admin/puzzles", admin_only(schedule_puzzle), methods=["POST"], name="admin_schedule_puzzle"),
        Route("/api/admin/puzzles", admin_only(delete_puzzle), methods=["DELETE"], name="admin_delete_puzzle"),
        Route("/api/admin/upload", admin_only(upload_still), methods=["POST"], name="admin_upload_still"),
    ]


def create_app(
    settings: WebServerSettings | None = None,
    *,
    today: Callable[[], date] = utc_today,
) -> Starlette:
    """Build the API app.

    With ``settings.database_path`` unset the in-memory demo dataset backs
    every repository and puzzles are flagged ``demo_mode``.
    """
    if settings is None:  # pragma: no cover
        settings = WebServerSettings()

    routes = _build_routes()
    validate_route_auth_policy(routes)

    still_storage = LocalStillStorage(settings.stills_dir, settings.stills_url_prefix, settings.max_upload_bytes)
    still_storage.stills_dir.mkdir(parents=True, exist_ok=True)
    routes.append(
        Mount(settings.stills_url_prefix, app=StaticFiles(directory=str(still_storage.stills_dir)), name="stills"),
    )

    db: Database | None = None
    episodes: EpisodeRepository
    puzzles: PuzzleRepository
    stats: StatsRepository
    if settings.database_path is None:
        logger.warning("no database configured, serving demo dataset")
        demo = DemoRepository()
        episodes, puzzles, stats = demo, demo, demo
    else:
        db = Database(settings.database_path)
        db.connect()
        episodes = SqliteEpisodeRepository(db)
        puzzles = SqlitePuzzleRepository(db)
        stats = SqliteStatsRepository(db)

    if not settings.admin_api_key:
        logger.warning("no admin API key configured, admin routes are disabled")

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        yield
        if db is not None:
            db.close()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", ADMIN_KEY_HEADER],
    )

    app.state.settings = settings
    app.state.today = today
    app.state.db = db
    app.state.episodes = episodes
    app.state.puzzles = puzzles
    app.state.stats = stats
    app.state.still_storage = still_storage

    logger.info("web server ready", demo_mode=settings.demo_mode)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory web.server.app:get_app."""
    settings = WebServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
