import random
from datetime import date

from shared.dal.models import Burger
from wiki.schedule import build_schedule


def _burgers(count):
    return [Burger(id=f"b{i}", episode_id="e", name=f"Burger {i}") for i in range(count)]


class TestBuildSchedule:
    def test_consecutive_dates_from_start(self):
        schedule = build_schedule(_burgers(3), date(2026, 1, 30), random.Random(1))
        assert [p.date for p in schedule] == [date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 1)]

    def test_each_burger_used_once(self):
        burgers = _burgers(10)
        schedule = build_schedule(burgers, date(2026, 1, 1), random.Random(7))
        assert sorted(p.burger_id for p in schedule) == sorted(b.id for b in burgers)

    def test_same_seed_same_order(self):
        first = build_schedule(_burgers(10), date(2026, 1, 1), random.Random(42))
        second = build_schedule(_burgers(10), date(2026, 1, 1), random.Random(42))
        assert first == second

    def test_input_not_reordered(self):
        burgers = _burgers(5)
        build_schedule(burgers, date(2026, 1, 1), random.Random(3))
        assert [b.id for b in burgers] == ["b0", "b1", "b2", "b3", "b4"]

    def test_empty(self):
        assert build_schedule([], date(2026, 1, 1), random.Random(0)) == []
