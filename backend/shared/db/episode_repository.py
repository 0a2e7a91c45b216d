"""SQLite-backed episode and burger repository."""

from __future__ import annotations

import asyncio
import sqlite3
import uuid
from typing import TYPE_CHECKING

import structlog

from shared.dal.episode_repository import SEARCH_RESULT_LIMIT, EpisodeRepository
from shared.dal.models import (
    Burger,
    BurgerEdit,
    Episode,
    EpisodeHintUpdate,
    EpisodeQuery,
    ScrapedEpisode,
)

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()

_EPISODE_COLUMNS = ", ".join(Episode.model_fields)
_HINT_COLUMNS = tuple(EpisodeHintUpdate.model_fields)
_SCRAPED_COLUMNS = tuple(ScrapedEpisode.model_fields)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _episode(row: sqlite3.Row) -> Episode:
    return Episode.model_validate(dict(row))


def _burger(row: sqlite3.Row) -> Burger:
    return Burger.model_validate(dict(row))


class SqliteEpisodeRepository(EpisodeRepository):
    """SQLite implementation of EpisodeRepository.

    Writes are serialized with an asyncio lock; each public write method
    commits or rolls back as a unit.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def search_episodes(self, query: EpisodeQuery, limit: int = SEARCH_RESULT_LIMIT) -> list[Episode]:
        clauses: list[str] = []
        params: list[object] = []
        if query.season is not None:
            clauses.append("season = ?")
            params.append(query.season)
        if query.episode_number is not None:
            clauses.append("episode_number = ?")
            params.append(query.episode_number)
        if query.title:
            clauses.append("title LIKE ? ESCAPE '\\'")
            params.append(_like_pattern(query.title))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._db.connection.execute(
            f"SELECT {_EPISODE_COLUMNS} FROM episodes {where} ORDER BY season, episode_number LIMIT ?",  # noqa: S608
            (*params, limit),
        ).fetchall()
        return [_episode(row) for row in rows]

    async def list_episodes(self, search: str | None = None, season: int | None = None) -> list[Episode]:
        return await self.search_episodes(EpisodeQuery(season=season, title=search or None), limit=-1)

    async def get_episode(self, episode_id: str) -> Episode | None:
        row = self._db.connection.execute(
            f"SELECT {_EPISODE_COLUMNS} FROM episodes WHERE id = ?",  # noqa: S608
            (episode_id,),
        ).fetchone()
        return _episode(row) if row is not None else None

    async def list_burgers(self, episode_ids: list[str] | None = None) -> list[Burger]:
        if episode_ids is None:
            rows = self._db.connection.execute(
                "SELECT id, episode_id, name, description FROM burgers ORDER BY episode_id, name",
            ).fetchall()
        elif not episode_ids:
            return []
        else:
            placeholders = ", ".join("?" for _ in episode_ids)
            rows = self._db.connection.execute(
                "SELECT id, episode_id, name, description FROM burgers "  # noqa: S608
                f"WHERE episode_id IN ({placeholders}) ORDER BY episode_id, name",
                tuple(episode_ids),
            ).fetchall()
        return [_burger(row) for row in rows]

    async def update_episode_hints(self, episode_id: str, update: EpisodeHintUpdate) -> bool:
        assignments = ", ".join(f"{col} = ?" for col in _HINT_COLUMNS)
        values = update.model_dump()
        async with self._lock:
            cursor = self._db.connection.execute(
                f"UPDATE episodes SET {assignments} WHERE id = ?",  # noqa: S608
                (*(values[col] for col in _HINT_COLUMNS), episode_id),
            )
            self._db.connection.commit()
        if cursor.rowcount == 0:
            logger.warning("episode hint update had no effect", episode_id=episode_id)
            return False
        return True

    async def save_burgers(self, episode_id: str, edits: list[BurgerEdit]) -> list[Burger]:
        """Update this episode's burgers that carry an id and insert the rest.

        An id belonging to another episode is treated as a new burger.

        Raises:
            ValueError: On a duplicate burger name for the episode or an unknown episode

        """
        conn = self._db.connection
        saved: list[Burger] = []
        async with self._lock:
            try:
                for edit in edits:
                    if edit.id is not None:
                        conn.execute(
                            "UPDATE burgers SET name = ?, description = ? WHERE id = ? AND episode_id = ?",
                            (edit.name, edit.description, edit.id, episode_id),
                        )
                        row = conn.execute(
                            "SELECT id, episode_id, name, description FROM burgers WHERE id = ? AND episode_id = ?",
                            (edit.id, episode_id),
                        ).fetchone()
                        if row is not None:
                            saved.append(_burger(row))
                            continue
                    burger = Burger(
                        id=str(uuid.uuid4()),
                        episode_id=episode_id,
                        name=edit.name,
                        description=edit.description,
                    )
                    conn.execute(
                        "INSERT INTO burgers (id, episode_id, name, description) VALUES (?, ?, ?, ?)",
                        (burger.id, burger.episode_id, burger.name, burger.description),
                    )
                    saved.append(burger)
                conn.commit()
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise ValueError(f"Could not save burgers for episode '{episode_id}': {exc}") from exc
        return saved

    async def upsert_episode(self, episode: ScrapedEpisode) -> Episode:
        values = episode.model_dump()
        columns = ", ".join(("id", *_SCRAPED_COLUMNS))
        placeholders = ", ".join("?" for _ in range(len(_SCRAPED_COLUMNS) + 1))
        # Scraped values only overwrite when present; hint fields are never touched.
        updates = ", ".join(
            f"{col} = COALESCE(excluded.{col}, episodes.{col})"
            for col in _SCRAPED_COLUMNS
            if col not in ("season", "episode_number")
        )
        async with self._lock:
            self._db.connection.execute(
                f"INSERT INTO episodes ({columns}) VALUES ({placeholders}) "  # noqa: S608
                f"ON CONFLICT (season, episode_number) DO UPDATE SET {updates}",
                (str(uuid.uuid4()), *(values[col] for col in _SCRAPED_COLUMNS)),
            )
            self._db.connection.commit()
            row = self._db.connection.execute(
                f"SELECT {_EPISODE_COLUMNS} FROM episodes WHERE season = ? AND episode_number = ?",  # noqa: S608
                (episode.season, episode.episode_number),
            ).fetchone()
        return _episode(row)

    async def upsert_burger(self, episode_id: str, name: str, description: str | None = None) -> Burger:
        """Insert or update a burger by (episode_id, name).

        Raises:
            ValueError: If the episode does not exist

        """
        conn = self._db.connection
        async with self._lock:
            try:
                conn.execute(
                    "INSERT INTO burgers (id, episode_id, name, description) VALUES (?, ?, ?, ?) "
                    "ON CONFLICT (episode_id, name) DO UPDATE SET description = excluded.description",
                    (str(uuid.uuid4()), episode_id, name, description),
                )
                conn.commit()
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise ValueError(f"Unknown episode '{episode_id}'") from exc
            row = conn.execute(
                "SELECT id, episode_id, name, description FROM burgers WHERE episode_id = ? AND name = ?",
                (episode_id, name),
            ).fetchone()
        return _burger(row)
