"""Modules whose signatures name type-checking-only imports must keep annotations unevaluated."""

import inspect

import pytest

from shared.db.episode_repository import SqliteEpisodeRepository
from shared.db.puzzle_repository import SqlitePuzzleRepository
from shared.db.stats_repository import SqliteStatsRepository
from shared.validators import StringListEnvSettingsSource


class TestDeferredAnnotations:
    @pytest.mark.parametrize(
        "repository_cls",
        [SqliteEpisodeRepository, SqlitePuzzleRepository, SqliteStatsRepository],
    )
    def test_repository_database_parameter(self, repository_cls):
        assert inspect.get_annotations(repository_cls.__init__)["db"] == "Database"

    def test_env_source_field_parameter(self):
        annotations = inspect.get_annotations(StringListEnvSettingsSource.prepare_field_value)
        assert annotations["field"] == "FieldInfo"
