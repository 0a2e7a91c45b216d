"""
Pydantic models for the daily game.

Contains the puzzle served to the player, episode search candidates, the
per-puzzle game state and the per-device statistics record. All models are
frozen; transitions produce new instances via ``model_copy``.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from game.logic.enums import GameStatus

MAX_GUESSES = 6
MAX_REVEAL_STEP = 6


class EpisodeInfo(BaseModel, frozen=True):
    """Season/episode/title of the puzzle's source episode."""

    season: int
    episode_number: int
    title: str


class EpisodeCandidate(BaseModel, frozen=True):
    """An episode offered by search as a possible guess."""

    id: str
    season: int
    episode_number: int
    title: str
    synopsis: str | None = None
    hash: str = ""  # sha256 of id, informational only


class BurgerInfo(BaseModel, frozen=True):
    name: str
    description: str | None = None


class Quote(BaseModel, frozen=True):
    """Episode quote. Text is always shown, the speaker only once revealed."""

    text: str
    speaker: str | None = None


class PuzzleHints(BaseModel, frozen=True):
    store_next_door: str | None = None
    pest_control: str | None = None
    original_air_date: str | None = None
    guest_stars: str | None = None


class Puzzle(BaseModel, frozen=True):
    """The daily puzzle as served by GET /api/daily.

    ``answer_hash`` is the sha256 of the answer episode id. The id itself is
    never part of this model.
    """

    puzzle_id: date
    answer_hash: str
    burger: BurgerInfo
    quote: Quote | None = None
    still_url: str | None = None
    hints: PuzzleHints = Field(default_factory=PuzzleHints)
    episode: EpisodeInfo
    demo_mode: bool = False


class GuessAttempt(BaseModel, frozen=True):
    episode: EpisodeCandidate
    is_correct: bool
    timestamp: datetime


class GameState(BaseModel, frozen=True):
    """State of one game on one device for one puzzle date."""

    puzzle_id: date
    guesses: tuple[GuessAttempt, ...] = ()
    status: GameStatus = GameStatus.IN_PROGRESS
    reveal_step: int = Field(default=0, ge=0, le=MAX_REVEAL_STEP)
    answer_hash: str

    @property
    def guess_count(self) -> int:
        return len(self.guesses)

    @property
    def guessed_ids(self) -> list[str]:
        return [g.episode.id for g in self.guesses]

    def has_guessed(self, episode_id: str) -> bool:
        return any(g.episode.id == episode_id for g in self.guesses)

    @property
    def is_over(self) -> bool:
        return self.status.is_terminal


def _empty_distribution() -> dict[int, int]:
    return dict.fromkeys(range(1, MAX_GUESSES + 1), 0)


class LocalStats(BaseModel, frozen=True):
    """Cumulative per-device statistics.

    ``last_played_date`` moves forward as soon as a game is started
    (see ``mark_in_progress``); ``last_completed_date`` only moves when a game
    reaches a terminal state and is what the streak is measured against.
    """

    games_played: int = 0
    games_won: int = 0
    win_percentage: int = 0
    current_streak: int = 0
    max_streak: int = 0
    guess_distribution: dict[int, int] = Field(default_factory=_empty_distribution)
    last_played_date: date | None = None
    last_completed_date: date | None = None
    last_game_status: GameStatus | None = None
