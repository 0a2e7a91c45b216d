"""Tests for writing scraped data into the episode repository."""

from shared.dal.demo import DemoRepository
from shared.dal.models import EpisodeQuery
from wiki.episode_guide import EpisodePageDetails, GuideEpisode
from wiki.gags import BurgerEntry, ExtractedGagsData
from wiki.importer import import_episodes, to_scraped_episode
from wiki.scraper import ScrapedEpisodeData


def _data(season, number, title, *burgers, store=None):
    return ScrapedEpisodeData(
        episode=GuideEpisode(title=title, url=f"https://wiki.test/wiki/{number}", season=season, episode_number=number),
        gags=ExtractedGagsData(store_next_door=store, burgers=tuple(BurgerEntry(name=b) for b in burgers)),
        details=EpisodePageDetails(plot_summary="A plot."),
    )


class FailingBurgerRepository(DemoRepository):
    async def upsert_burger(self, episode_id, name, description=None):
        if name == "Bad Burger":
            raise ValueError("Unknown episode")
        return await super().upsert_burger(episode_id, name, description)


class TestToScrapedEpisode:
    def test_maps_fields(self):
        scraped = to_scraped_episode(_data(14, 3, "New One", store="Shop"))
        assert (scraped.season, scraped.episode_number, scraped.title) == (14, 3, "New One")
        assert scraped.wiki_url == "https://wiki.test/wiki/3"
        assert scraped.plot_summary == "A plot."
        assert scraped.store_next_door == "Shop"


class TestImportEpisodes:
    async def test_counts_written_rows(self):
        repo = DemoRepository()
        summary = await import_episodes(
            [_data(14, 1, "First", "Burger A", "Burger B"), _data(14, 2, "Second")],
            repo,
        )
        assert summary.episodes == 2
        assert summary.burgers == 2
        found = await repo.search_episodes(EpisodeQuery(season=14))
        assert [ep.title for ep in found] == ["First", "Second"]

    async def test_reimport_updates_existing_episode(self):
        repo = DemoRepository()
        await import_episodes([_data(1, 1, "Human Flesh", "New Bacon-ings", store="Amazing Bargains")], repo)
        episode = (await repo.search_episodes(EpisodeQuery(season=1, episode_number=1)))[0]
        assert episode.id == "demo-004"
        assert len(await repo.list_burgers([episode.id])) == 1

    async def test_failing_burger_does_not_stop_import(self):
        repo = FailingBurgerRepository()
        summary = await import_episodes([_data(14, 1, "First", "Bad Burger", "Good Burger")], repo)
        assert summary.episodes == 1
        assert summary.burgers == 1
