"""
Unit tests for list-view filtering.

All criteria are ANDed; filtering twice equals filtering once with the
combined criteria; output order does not depend on input order.
"""

import random
import unittest

from trainingcal.caldate import Period, month_range
from trainingcal.expand import expand_all
from trainingcal.filters import FilterCriteria, filter_occurrences
from trainingcal.model import Occurrence

from tests.helpers import d, group, weekly


def _fixture() -> list[Occurrence]:
    groups = [
        group("7", name="Evening Workshop Crew", trainer_id="3", trainer_name="Alice", formation_id="2", formation_title="Python"),
        group("8", name="Morning", trainer_id="4", trainer_name="Bob", formation_id="2", formation_title="Python"),
        group("9", name="Weekend", trainer_id="3", trainer_name="Alice", formation_id="5", formation_title="Excel"),
    ]
    sessions = [
        weekly("a", {1, 3}, group_id="7", title="Basics", location="Room A1"),
        weekly("b", {2}, group_id="7", title="Lab", location="Workshop hall", start_time="14:00", end_time="16:00"),
        weekly("c", {1, 4}, group_id="8", title="Hands-on WORKSHOP"),
        weekly("d", {6}, group_id="9", title="Review", status="cancelled"),
    ]
    return expand_all(groups, sessions, month_range(2025, 1))


class TestFilters(unittest.TestCase):
    def setUp(self) -> None:
        self.occurrences = _fixture()

    def test_fixture_size(self) -> None:
        # a: 4 Mon + 5 Wed, b: 4 Tue, c: 4 Mon + 5 Thu, d: 4 Sat
        self.assertEqual(len(self.occurrences), 26)

    def test_no_criteria_returns_all(self) -> None:
        self.assertEqual(filter_occurrences(self.occurrences), self.occurrences)
        self.assertEqual(filter_occurrences(self.occurrences, FilterCriteria()), self.occurrences)

    def test_group_and_text(self) -> None:
        out = filter_occurrences(self.occurrences, FilterCriteria(group_id=7, text="workshop"))
        self.assertTrue(out)
        for o in out:
            self.assertEqual(o.group_id, "7")
            hay = " ".join(x for x in (o.title, o.group_name, o.trainer_name, o.location) if x).lower()
            self.assertIn("workshop", hay)
        # group 7's name contains "Workshop", so all of its sessions match
        self.assertEqual({o.session_id for o in out}, {"a", "b"})

    def test_text_is_case_insensitive(self) -> None:
        out = filter_occurrences(self.occurrences, FilterCriteria(group_id="8", text="WorkShop"))
        self.assertEqual({o.session_id for o in out}, {"c"})

    def test_text_matches_location(self) -> None:
        out = filter_occurrences(self.occurrences, FilterCriteria(text="room a1"))
        self.assertEqual({o.session_id for o in out}, {"a"})

    def test_trainer_and_formation(self) -> None:
        out = filter_occurrences(self.occurrences, FilterCriteria(trainer_id="3"))
        self.assertEqual({o.group_id for o in out}, {"7", "9"})
        out = filter_occurrences(self.occurrences, FilterCriteria(trainer_id=3, formation_id=2))
        self.assertEqual({o.group_id for o in out}, {"7"})

    def test_float_ids_match_like_the_normalizer(self) -> None:
        by_float = filter_occurrences(self.occurrences, FilterCriteria(group_id=7.0, trainer_id=3.0))
        by_str = filter_occurrences(self.occurrences, FilterCriteria(group_id="7", trainer_id="3"))
        self.assertTrue(by_float)
        self.assertEqual(by_float, by_str)

    def test_period_inclusive(self) -> None:
        out = filter_occurrences(self.occurrences, FilterCriteria(period=Period(d("2025-01-06"), d("2025-01-08"))))
        self.assertEqual({str(o.date) for o in out}, {"2025-01-06", "2025-01-07", "2025-01-08"})

    def test_status(self) -> None:
        out = filter_occurrences(self.occurrences, FilterCriteria(status="cancelled"))
        self.assertEqual({o.session_id for o in out}, {"d"})

    def test_no_match(self) -> None:
        self.assertEqual(filter_occurrences(self.occurrences, FilterCriteria(group_id="404")), [])

    def test_composition(self) -> None:
        once = filter_occurrences(self.occurrences, FilterCriteria(group_id="7", text="lab"))
        twice = filter_occurrences(filter_occurrences(self.occurrences, FilterCriteria(group_id="7")), FilterCriteria(text="lab"))
        self.assertEqual(once, twice)

    def test_stable_order_regardless_of_input(self) -> None:
        shuffled = list(self.occurrences)
        random.Random(42).shuffle(shuffled)
        criteria = FilterCriteria(trainer_id="3")
        self.assertEqual(filter_occurrences(shuffled, criteria), filter_occurrences(self.occurrences, criteria))
        out = filter_occurrences(shuffled)
        self.assertEqual(out, sorted(out, key=lambda o: (o.date, o.start_time, o.id)))


if __name__ == "__main__":
    unittest.main()
