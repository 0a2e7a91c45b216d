"""Persistence models for the data access layer."""

from datetime import date

from pydantic import BaseModel, Field, computed_field, field_validator

MAX_GUESS_NUMBER = 6


class Episode(BaseModel, frozen=True):
    """An episode row, including the hand-edited hint fields."""

    id: str
    season: int
    episode_number: int
    title: str
    wiki_url: str | None = None
    plot_summary: str | None = None
    image_url: str | None = None
    still_url: str | None = None
    quote_text: str | None = None
    quote_speaker: str | None = None
    quote_location: str | None = None
    store_next_door: str | None = None
    pest_control_truck: str | None = None
    original_air_date: str | None = None
    guest_stars: str | None = None


class ScrapedEpisode(BaseModel, frozen=True):
    """Episode fields produced by the wiki import; upserted by (season, episode_number)."""

    season: int
    episode_number: int
    title: str
    wiki_url: str | None = None
    plot_summary: str | None = None
    image_url: str | None = None
    store_next_door: str | None = None
    pest_control_truck: str | None = None


class EpisodeHintUpdate(BaseModel, frozen=True):
    """Admin edit of an episode's hint fields. Blank strings are stored as NULL."""

    quote_text: str | None = None
    quote_speaker: str | None = None
    quote_location: str | None = None
    still_url: str | None = None
    store_next_door: str | None = None
    pest_control_truck: str | None = None
    original_air_date: str | None = None
    guest_stars: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Burger(BaseModel, frozen=True):
    id: str
    episode_id: str
    name: str
    description: str | None = None


class BurgerEdit(BaseModel, frozen=True):
    """Admin edit of a burger: rows with an id are updated, the rest inserted."""

    id: str | None = None
    name: str = Field(min_length=1)
    description: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ScheduledPuzzle(BaseModel, frozen=True):
    date: date
    burger_id: str


class PuzzleRecord(BaseModel, frozen=True):
    """A scheduled puzzle joined with its burger and source episode."""

    date: date
    burger: Burger
    episode: Episode


class PuzzleScheduleEntry(BaseModel, frozen=True):
    """Flattened schedule row for the admin calendar."""

    date: date
    burger_id: str
    burger_name: str | None = None
    episode_title: str | None = None
    season: int | None = None
    episode_number: int | None = None


class EpisodeQuery(BaseModel, frozen=True):
    """Structured episode search: by season and/or episode number, or by title substring."""

    season: int | None = None
    episode_number: int | None = None
    title: str | None = None


class GlobalStats(BaseModel):
    """Anonymized outcome counters for one puzzle date."""

    date: date
    win_on_guess_1: int = 0
    win_on_guess_2: int = 0
    win_on_guess_3: int = 0
    win_on_guess_4: int = 0
    win_on_guess_5: int = 0
    win_on_guess_6: int = 0
    losses: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_plays(self) -> int:
        return (
            self.win_on_guess_1
            + self.win_on_guess_2
            + self.win_on_guess_3
            + self.win_on_guess_4
            + self.win_on_guess_5
            + self.win_on_guess_6
            + self.losses
        )


def stats_column(guess_number: int) -> str:
    """Map a reported guess number (0 = loss, 1..6 = win on that guess) to its counter column.

    Raises:
        ValueError: If guess_number is outside 0..6

    """
    if guess_number == 0:
        return "losses"
    if 1 <= guess_number <= MAX_GUESS_NUMBER:
        return f"win_on_guess_{guess_number}"
    raise ValueError(f"guess_number must be between 0 and {MAX_GUESS_NUMBER}")
