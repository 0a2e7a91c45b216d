import pytest

from shared.dal.models import EpisodeQuery
from web.search import parse_episode_query


class TestParseEpisodeQuery:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("S3E12", EpisodeQuery(season=3, episode_number=12)),
            ("s03e12", EpisodeQuery(season=3, episode_number=12)),
            ("  S1E1  ", EpisodeQuery(season=1, episode_number=1)),
            ("watch s2e8 again", EpisodeQuery(season=2, episode_number=8)),
            ("S5", EpisodeQuery(season=5)),
            ("e7", EpisodeQuery(episode_number=7)),
            ("Tina", EpisodeQuery(title="Tina")),
            ("Season 5", EpisodeQuery(title="Season 5")),
            ("", EpisodeQuery()),
            ("   ", EpisodeQuery()),
        ],
    )
    def test_parses(self, raw, expected):
        assert parse_episode_query(raw) == expected

    def test_title_keeps_original_case(self):
        assert parse_episode_query(" Bad Tina ").title == "Bad Tina"
