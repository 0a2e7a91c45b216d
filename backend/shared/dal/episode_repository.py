"""Abstract interface for episode and burger persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import (
        Burger,
        BurgerEdit,
        Episode,
        EpisodeHintUpdate,
        EpisodeQuery,
        ScrapedEpisode,
    )

SEARCH_RESULT_LIMIT = 20


class EpisodeRepository(ABC):
    """Episode catalogue: guess autocomplete, admin editing and wiki import.

    Listings are ordered by (season, episode_number).
    """

    @abstractmethod
    async def search_episodes(self, query: EpisodeQuery, limit: int = SEARCH_RESULT_LIMIT) -> list[Episode]: ...

    @abstractmethod
    async def list_episodes(self, search: str | None = None, season: int | None = None) -> list[Episode]: ...

    @abstractmethod
    async def get_episode(self, episode_id: str) -> Episode | None: ...

    @abstractmethod
    async def list_burgers(self, episode_ids: list[str] | None = None) -> list[Burger]: ...

    @abstractmethod
    async def update_episode_hints(self, episode_id: str, update: EpisodeHintUpdate) -> bool:
        """Overwrite the hint fields of an episode. Returns False if it does not exist."""

    @abstractmethod
    async def save_burgers(self, episode_id: str, edits: list[BurgerEdit]) -> list[Burger]:
        """Update burgers of episode_id that carry an id and insert the rest under episode_id."""

    @abstractmethod
    async def upsert_episode(self, episode: ScrapedEpisode) -> Episode:
        """Insert or update by (season, episode_number). Hand-edited hint fields are kept."""

    @abstractmethod
    async def upsert_burger(self, episode_id: str, name: str, description: str | None = None) -> Burger:
        """Insert or update by (episode_id, name)."""
