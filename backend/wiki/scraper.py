"""
Sequential wiki scraper.

Pages are fetched one at a time with a fixed pause between requests to
stay within the wiki's rate limits. Only the Episode Guide is required:
its failure raises, while a missing Gags subpage or episode page just
yields empty data for that episode.
"""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from typing import TYPE_CHECKING, Self

import httpx
import structlog
from pydantic import BaseModel

from wiki.episode_guide import EpisodePageDetails, GuideEpisode, parse_episode_guide, parse_episode_page
from wiki.gags import ExtractedGagsData, extract_gags

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from wiki.settings import WikiScraperSettings

logger = structlog.get_logger()


class WikiFetchError(Exception):
    pass


class ScrapedEpisodeData(BaseModel, frozen=True):
    episode: GuideEpisode
    gags: ExtractedGagsData
    details: EpisodePageDetails


class WikiScraper:
    def __init__(
        self,
        settings: WikiScraperSettings,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.timeout_seconds,
            follow_redirects=True,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_page(self, url: str) -> str:
        """GET a page. Raises WikiFetchError on a network error or non-200 response."""
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise WikiFetchError(f"Failed to fetch {url}: {e}") from e
        if response.status_code != HTTPStatus.OK:
            raise WikiFetchError(f"Failed to fetch {url}: {response.status_code}")
        return response.text

    async def scrape_episode_list(self) -> list[GuideEpisode]:
        """Fetch and parse the Episode Guide. Raises WikiFetchError if it cannot be fetched."""
        html = await self.fetch_page(self._settings.episode_guide_url)
        episodes = parse_episode_guide(html, self._settings.base_url)
        logger.info("parsed episode guide", episodes=len(episodes))
        return episodes

    async def scrape_gags(self, episode: GuideEpisode) -> ExtractedGagsData:
        try:
            html = await self.fetch_page(f"{episode.url}/Gags")
        except WikiFetchError as e:
            logger.info("no gags page", episode=episode.code, error=str(e))
            return ExtractedGagsData()
        return extract_gags(html, episode.title)

    async def scrape_episode_page(self, episode: GuideEpisode) -> EpisodePageDetails:
        try:
            html = await self.fetch_page(episode.url)
        except WikiFetchError as e:
            logger.warning("failed to scrape episode page", episode=episode.code, error=str(e))
            return EpisodePageDetails()
        return parse_episode_page(html)

    async def scrape_episodes(self, episodes: list[GuideEpisode]) -> list[ScrapedEpisodeData]:
        """Scrape each episode's Gags subpage and main page, strictly one request at a time."""
        results: list[ScrapedEpisodeData] = []
        for index, episode in enumerate(episodes, start=1):
            logger.info("scraping episode", progress=f"{index}/{len(episodes)}", episode=episode.code, title=episode.title)
            gags = await self.scrape_gags(episode)
            await self._sleep(self._settings.rate_limit_seconds)
            details = await self.scrape_episode_page(episode)
            await self._sleep(self._settings.rate_limit_seconds)
            results.append(ScrapedEpisodeData(episode=episode, gags=gags, details=details))
        return results
