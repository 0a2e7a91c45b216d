"""In-memory demo dataset.

Served when no database is configured so the game can be played and
previewed without any setup. Implements every repository interface over
plain dicts; changes last for the life of the process.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from shared.dal.episode_repository import SEARCH_RESULT_LIMIT, EpisodeRepository
from shared.dal.models import (
    Burger,
    Episode,
    GlobalStats,
    PuzzleRecord,
    PuzzleScheduleEntry,
    stats_column,
)
from shared.dal.puzzle_repository import PuzzleRepository
from shared.dal.stats_repository import StatsRepository

if TYPE_CHECKING:
    from datetime import date

    from shared.dal.models import (
        BurgerEdit,
        EpisodeHintUpdate,
        EpisodeQuery,
        ScheduledPuzzle,
        ScrapedEpisode,
    )

_DEMO_EPISODES = (
    Episode(
        id="demo-001",
        season=3,
        episode_number=12,
        title="Broadcast Wagstaff School News",
        plot_summary="Tina takes over the school news show.",
        store_next_door="Hot Dog Haus",
        pest_control_truck="Pest Control: Roach Coach",
    ),
    Episode(
        id="demo-002",
        season=4,
        episode_number=3,
        title="Seaplane!",
        plot_summary="Linda starts an affair with a pilot.",
        store_next_door="Pick-Up Sticks Chopsticks",
    ),
    Episode(
        id="demo-003",
        season=5,
        episode_number=2,
        title="Tina and the Real Ghost",
        plot_summary="Tina falls for a ghost named Jeff.",
        pest_control_truck="Ghost Busters Pest Control",
    ),
    Episode(
        id="demo-004",
        season=1,
        episode_number=1,
        title="Human Flesh",
        plot_summary="Bob faces rumors that his burgers are made of human flesh.",
        quote_text="We're not cannibals! We're just a family restaurant!",
        quote_speaker="Bob",
        store_next_door="Amazing Bargains",
    ),
    Episode(
        id="demo-005",
        season=2,
        episode_number=8,
        title="Bad Tina",
        plot_summary="Tina is blackmailed by a bad girl at school.",
    ),
    Episode(
        id="demo-006",
        season=6,
        episode_number=19,
        title="Glued, Where's My Bob?",
        plot_summary="Bob gets glued to the toilet before a magazine interview.",
        store_next_door="Glue Two Ways",
    ),
    Episode(
        id="demo-007",
        season=9,
        episode_number=1,
        title="Just One of the Boyz 4 Now for Now",
        plot_summary="Tina joins a boy band tribute group.",
    ),
    Episode(
        id="demo-008",
        season=7,
        episode_number=7,
        title="The Last Gingerbread House on the Left",
        plot_summary="The Belchers compete in a gingerbread house contest.",
        pest_control_truck="Merry Pestmas",
    ),
)

_DEMO_BURGERS = (
    Burger(id="demo-burger-001", episode_id="demo-001", name="Breaking News Burger", description="(comes with extra cheese)"),
    Burger(id="demo-burger-002", episode_id="demo-002", name="Plane Jane Burger", description="(comes with nothing)"),
    Burger(id="demo-burger-003", episode_id="demo-003", name="Ghost of Christmas Pasta Burger"),
    Burger(id="demo-burger-004", episode_id="demo-004", name="New Bacon-ings", description="(comes with bacon)"),
    Burger(id="demo-burger-005", episode_id="demo-005", name="Bad to the Bone-In Burger"),
    Burger(id="demo-burger-006", episode_id="demo-006", name="Stuck On You Burger", description="(comes with sticky glaze)"),
    Burger(id="demo-burger-007", episode_id="demo-007", name="Boyz 4 Meat Burger"),
    Burger(id="demo-burger-008", episode_id="demo-008", name="Gingerbread Men Without Hats Burger"),
)

DEMO_EPISODE_COUNT = len(_DEMO_EPISODES)


def _matches(episode: Episode, query: EpisodeQuery) -> bool:
    if query.season is not None and episode.season != query.season:
        return False
    if query.episode_number is not None and episode.episode_number != query.episode_number:
        return False
    return not (query.title and query.title.lower() not in episode.title.lower())


def _sort_key(episode: Episode) -> tuple[int, int]:
    return episode.season, episode.episode_number


class DemoRepository(EpisodeRepository, PuzzleRepository, StatsRepository):
    """Demo dataset: eight episodes with one burger each.

    Dates without an explicit assignment fall back to a rotation over the
    demo burgers keyed by the date ordinal, so every day has a puzzle.
    """

    def __init__(self) -> None:
        self._episodes: dict[str, Episode] = {ep.id: ep for ep in _DEMO_EPISODES}
        self._burgers: dict[str, Burger] = {b.id: b for b in _DEMO_BURGERS}
        self._rotation: tuple[str, ...] = tuple(b.id for b in _DEMO_BURGERS)
        self._schedule: dict[date, str] = {}
        self._stats: dict[date, dict[str, int]] = defaultdict(dict)
        self._next_id = 1

    def _new_id(self, prefix: str) -> str:
        new_id = f"{prefix}-{self._next_id:04d}"
        self._next_id += 1
        return new_id

    # Episodes

    async def search_episodes(self, query: EpisodeQuery, limit: int = SEARCH_RESULT_LIMIT) -> list[Episode]:
        found = sorted((ep for ep in self._episodes.values() if _matches(ep, query)), key=_sort_key)
        return found[:limit]

    async def list_episodes(self, search: str | None = None, season: int | None = None) -> list[Episode]:
        episodes = sorted(self._episodes.values(), key=_sort_key)
        if search:
            episodes = [ep for ep in episodes if search.lower() in ep.title.lower()]
        if season is not None:
            episodes = [ep for ep in episodes if ep.season == season]
        return episodes

    async def get_episode(self, episode_id: str) -> Episode | None:
        return self._episodes.get(episode_id)

    async def list_burgers(self, episode_ids: list[str] | None = None) -> list[Burger]:
        burgers = sorted(self._burgers.values(), key=lambda b: (b.episode_id, b.name))
        if episode_ids is None:
            return burgers
        wanted = set(episode_ids)
        return [b for b in burgers if b.episode_id in wanted]

    async def update_episode_hints(self, episode_id: str, update: EpisodeHintUpdate) -> bool:
        episode = self._episodes.get(episode_id)
        if episode is None:
            return False
        self._episodes[episode_id] = episode.model_copy(update=update.model_dump())
        return True

    async def save_burgers(self, episode_id: str, edits: list[BurgerEdit]) -> list[Burger]:
        saved = []
        for edit in edits:
            existing = self._burgers.get(edit.id) if edit.id is not None else None
            if existing is not None and existing.episode_id == episode_id:
                burger = existing.model_copy(update={"name": edit.name, "description": edit.description})
            else:
                burger = Burger(
                    id=self._new_id("burger"),
                    episode_id=episode_id,
                    name=edit.name,
                    description=edit.description,
                )
            self._burgers[burger.id] = burger
            saved.append(burger)
        return saved

    async def upsert_episode(self, episode: ScrapedEpisode) -> Episode:
        for existing in self._episodes.values():
            if (existing.season, existing.episode_number) == (episode.season, episode.episode_number):
                updated = existing.model_copy(update=episode.model_dump(exclude={"season", "episode_number"}, exclude_none=True))
                break
        else:
            updated = Episode(id=self._new_id("episode"), **episode.model_dump())
        self._episodes[updated.id] = updated
        return updated

    async def upsert_burger(self, episode_id: str, name: str, description: str | None = None) -> Burger:
        for existing in self._burgers.values():
            if existing.episode_id == episode_id and existing.name == name:
                burger = existing.model_copy(update={"description": description})
                break
        else:
            burger = Burger(id=self._new_id("burger"), episode_id=episode_id, name=name, description=description)
        self._burgers[burger.id] = burger
        return burger

    # Puzzles

    def _burger_for(self, puzzle_date: date) -> Burger | None:
        burger_id = self._schedule.get(puzzle_date)
        if burger_id is None:
            burger_id = self._rotation[puzzle_date.toordinal() % len(self._rotation)]
        return self._burgers.get(burger_id)

    async def get_puzzle(self, puzzle_date: date) -> PuzzleRecord | None:
        burger = self._burger_for(puzzle_date)
        if burger is None:
            return None
        episode = self._episodes.get(burger.episode_id)
        if episode is None:
            return None
        return PuzzleRecord(date=puzzle_date, burger=burger, episode=episode)

    async def list_schedule(self, start: date | None = None, end: date | None = None) -> list[PuzzleScheduleEntry]:
        entries = []
        for puzzle_date in sorted(self._schedule):
            if (start is not None and puzzle_date < start) or (end is not None and puzzle_date > end):
                continue
            burger = self._burgers.get(self._schedule[puzzle_date])
            episode = self._episodes.get(burger.episode_id) if burger else None
            entries.append(
                PuzzleScheduleEntry(
                    date=puzzle_date,
                    burger_id=self._schedule[puzzle_date],
                    burger_name=burger.name if burger else None,
                    episode_title=episode.title if episode else None,
                    season=episode.season if episode else None,
                    episode_number=episode.episode_number if episode else None,
                )
            )
        return entries

    async def schedule_puzzle(self, puzzle: ScheduledPuzzle) -> None:
        if puzzle.burger_id not in self._burgers:
            raise ValueError(f"Unknown burger '{puzzle.burger_id}'")
        self._schedule[puzzle.date] = puzzle.burger_id

    async def schedule_many(self, puzzles: list[ScheduledPuzzle]) -> int:
        unknown = [p.burger_id for p in puzzles if p.burger_id not in self._burgers]
        if unknown:
            raise ValueError(f"Unknown burger '{unknown[0]}'")
        for puzzle in puzzles:
            self._schedule[puzzle.date] = puzzle.burger_id
        return len(puzzles)

    async def delete_puzzle(self, puzzle_date: date) -> bool:
        return self._schedule.pop(puzzle_date, None) is not None

    # Stats

    async def record_outcome(self, puzzle_date: date, guess_number: int) -> None:
        column = stats_column(guess_number)
        counters = self._stats[puzzle_date]
        counters[column] = counters.get(column, 0) + 1

    async def get_stats(self, puzzle_date: date) -> GlobalStats:
        return GlobalStats(date=puzzle_date, **self._stats.get(puzzle_date, {}))
