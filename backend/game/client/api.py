"""HTTP client for the daily puzzle API."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Self

import httpx
import structlog
from pydantic import ValidationError

from game.logic.types import EpisodeCandidate, Puzzle
from shared.dal.models import GlobalStats

if TYPE_CHECKING:
    from datetime import date
    from types import TracebackType

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 10.0


class PuzzleUnavailableError(Exception):
    """The daily puzzle could not be loaded. The message is safe to display."""


class PuzzleNotFoundError(PuzzleUnavailableError):
    """No puzzle is scheduled for today."""


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return fallback


class DaydleApiClient:
    """Async client for /api/daily, /api/episodes and /api/stats.

    Owns its httpx.AsyncClient unless one is passed in.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

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

    async def get_daily_puzzle(self) -> Puzzle:
        """Fetch today's puzzle.

        Raises:
            PuzzleNotFoundError: If no puzzle is scheduled for today
            PuzzleUnavailableError: On network failure or any other error response

        """
        try:
            response = await self._client.get("/api/daily")
        except httpx.RequestError as e:
            logger.warning("daily puzzle request failed", error=str(e))
            raise PuzzleUnavailableError("Failed to fetch puzzle") from e

        if response.status_code == HTTPStatus.NOT_FOUND:
            raise PuzzleNotFoundError(_error_message(response, "No puzzle available for today"))
        if response.status_code != HTTPStatus.OK:
            raise PuzzleUnavailableError(_error_message(response, "Failed to fetch puzzle"))

        try:
            return Puzzle.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("malformed daily puzzle response", error=str(e))
            raise PuzzleUnavailableError("Failed to fetch puzzle") from e

    async def search_episodes(self, query: str) -> list[EpisodeCandidate]:
        """Return autocomplete candidates. Failures yield an empty list."""
        try:
            response = await self._client.get("/api/episodes", params={"q": query})
            response.raise_for_status()
            episodes = response.json().get("episodes", [])
            return [EpisodeCandidate.model_validate(ep) for ep in episodes]
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning("episode search failed", query=query, error=str(e))
            return []

    async def submit_outcome(self, puzzle_date: date, guess_number: int) -> None:
        """POST an anonymized outcome. Raises httpx.HTTPError on failure."""
        response = await self._client.post(
            "/api/stats",
            json={"date": puzzle_date.isoformat(), "guess_number": guess_number},
        )
        response.raise_for_status()

    async def get_global_stats(self, puzzle_date: date) -> GlobalStats:
        response = await self._client.get("/api/stats", params={"date": puzzle_date.isoformat()})
        response.raise_for_status()
        return GlobalStats.model_validate(response.json())
