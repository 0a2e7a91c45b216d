"""Tests for game state and statistics persistence."""

from datetime import date

from game.client.persistence import GAME_STATE_KEY, STATS_KEY, GameStore
from game.client.storage import MemoryKeyValueStore
from game.logic.engine import submit_guess
from game.logic.stats import record_outcome
from game.logic.types import LocalStats
from game.tests.helpers.builders import FIXED_NOW, PUZZLE_DATE, create_state, wrong_candidates


class TestGameState:
    def test_missing_state(self):
        assert GameStore(MemoryKeyValueStore()).load_game_state(PUZZLE_DATE) is None

    def test_save_and_load_same_date(self):
        kv = MemoryKeyValueStore()
        store = GameStore(kv)
        state = submit_guess(create_state(), wrong_candidates(1)[0], now=FIXED_NOW).state
        store.save_game_state(state)

        loaded = store.load_game_state(PUZZLE_DATE)
        assert loaded == state
        assert kv.get(GAME_STATE_KEY) is not None

    def test_stale_state_is_discarded(self):
        kv = MemoryKeyValueStore()
        store = GameStore(kv)
        store.save_game_state(create_state(date(2026, 1, 19)))

        assert store.load_game_state(PUZZLE_DATE) is None
        assert kv.get(GAME_STATE_KEY) is None

    def test_unreadable_state_is_discarded(self):
        kv = MemoryKeyValueStore({GAME_STATE_KEY: "{broken"})
        assert GameStore(kv).load_game_state(PUZZLE_DATE) is None
        assert kv.get(GAME_STATE_KEY) is None

    def test_saving_new_date_replaces_previous(self):
        store = GameStore(MemoryKeyValueStore())
        store.save_game_state(create_state(date(2026, 1, 19)))
        store.save_game_state(create_state())
        assert store.load_game_state(date(2026, 1, 19)) is None


class TestStats:
    def test_defaults_when_missing(self):
        stats = GameStore(MemoryKeyValueStore()).load_stats()
        assert stats == LocalStats()
        assert stats.guess_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0, 6: 0}

    def test_round_trip_keeps_integer_distribution_keys(self):
        store = GameStore(MemoryKeyValueStore())
        stats = record_outcome(LocalStats(), won=True, guess_count=4, puzzle_date=PUZZLE_DATE)
        store.save_stats(stats)
        loaded = store.load_stats()
        assert loaded == stats
        assert loaded.guess_distribution[4] == 1

    def test_unreadable_stats_start_fresh(self):
        store = GameStore(MemoryKeyValueStore({STATS_KEY: "nope"}))
        assert store.load_stats() == LocalStats()
