"""Writes scraped wiki data into the episode repository."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from shared.dal.models import ScrapedEpisode

if TYPE_CHECKING:
    from shared.dal.episode_repository import EpisodeRepository
    from wiki.scraper import ScrapedEpisodeData

logger = structlog.get_logger()


class ImportSummary(BaseModel, frozen=True):
    episodes: int = 0
    burgers: int = 0


def to_scraped_episode(data: ScrapedEpisodeData) -> ScrapedEpisode:
    return ScrapedEpisode(
        season=data.episode.season,
        episode_number=data.episode.episode_number,
        title=data.episode.title,
        wiki_url=data.episode.url,
        plot_summary=data.details.plot_summary,
        image_url=data.details.image_url,
        store_next_door=data.gags.store_next_door,
        pest_control_truck=data.gags.pest_control_truck,
    )


async def import_episodes(results: list[ScrapedEpisodeData], repository: EpisodeRepository) -> ImportSummary:
    """
    Upsert each episode by (season, episode_number), then its burgers by name.

    A failing episode skips its burgers; a failing burger is logged and the
    rest continue. Returns how many episodes and burgers were written.
    """
    episode_count = 0
    burger_count = 0
    for data in results:
        code = data.episode.code
        try:
            episode = await repository.upsert_episode(to_scraped_episode(data))
        except (ValueError, sqlite3.Error) as e:
            logger.error("failed to upsert episode", episode=code, error=str(e))
            continue
        episode_count += 1

        if not data.gags.burgers:
            logger.info("no burgers found", episode=code)
        for burger in data.gags.burgers:
            try:
                await repository.upsert_burger(episode.id, burger.name, burger.description)
            except (ValueError, sqlite3.Error) as e:
                logger.error("failed to upsert burger", episode=code, burger=burger.name, error=str(e))
                continue
            burger_count += 1

    logger.info("import finished", episodes=episode_count, burgers=burger_count)
    return ImportSummary(episodes=episode_count, burgers=burger_count)
