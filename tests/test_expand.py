"""
Unit tests for occurrence expansion and identity.

Properties checked:
- every weekly occurrence falls on one of the session's weekdays
- every occurrence lies inside group period ∩ override ∩ query range
- expansion is idempotent and ids are unique
- period bounds are inclusive
"""

import unittest

from trainingcal.caldate import Period, month_range, to_iso_string, weekday_of
from trainingcal.errors import InvalidInput
from trainingcal.expand import UNKNOWN_GROUP, expand, expand_all, identify
from trainingcal.model import SessionRule
from trainingcal.periods import resolve_period

from tests.helpers import d, group, single, weekly


def _dates(occurrences) -> list:
    return [to_iso_string(o.date) for o in occurrences]


class TestExpand(unittest.TestCase):
    def test_monday_wednesday_inside_group_period(self) -> None:
        g = group(start="2025-01-06", end="2025-03-28")
        s = weekly("s1", {1, 3})
        occ = expand(s, resolve_period(s, g), month_range(2025, 1), g)

        # Jan 1 is a Wednesday but before the group period
        self.assertEqual(
            _dates(occ),
            ["2025-01-06", "2025-01-08", "2025-01-13", "2025-01-15", "2025-01-20", "2025-01-22", "2025-01-27", "2025-01-29"],
        )
        for o in occ:
            self.assertIn(weekday_of(o.date), {1, 3})

    def test_single_date(self) -> None:
        s = single("s2", "2025-02-14")
        occ = expand(s, Period(), month_range(2025, 2))
        self.assertEqual(_dates(occ), ["2025-02-14"])
        self.assertEqual(occ[0].weekday, 5)

    def test_single_date_outside_range(self) -> None:
        s = single("s2", "2025-02-14")
        self.assertEqual(expand(s, Period(), month_range(2025, 3)), [])

    def test_override_narrower_than_group(self) -> None:
        g = group(start="2025-01-01", end="2025-03-31")
        s = weekly("s3", {5}, start="2025-01-01", end="2025-01-15")
        occ = expand(s, resolve_period(s, g), month_range(2025, 1), g)
        self.assertEqual(_dates(occ), ["2025-01-03", "2025-01-10"])

    def test_empty_effective_period(self) -> None:
        g = group(start="2025-05-01", end="2025-04-01")
        s = weekly("s4", {0, 1, 2, 3, 4, 5, 6})
        self.assertEqual(expand(s, resolve_period(s, g), month_range(2025, 4), g), [])

    def test_boundary_inclusive(self) -> None:
        g = group(start="2025-03-01", end="2025-03-31")
        s = weekly("s5", {1, 2})  # 2025-03-31 is a Monday, 2025-04-01 a Tuesday
        occ = expand(s, resolve_period(s, g), Period(d("2025-03-24"), d("2025-04-08")), g)
        self.assertEqual(_dates(occ), ["2025-03-24", "2025-03-25", "2025-03-31"])

    def test_query_range_edges_inclusive(self) -> None:
        s = weekly("s6", {1})
        occ = expand(s, Period(), Period(d("2025-01-06"), d("2025-01-13")))
        self.assertEqual(_dates(occ), ["2025-01-06", "2025-01-13"])

    def test_no_recurrence(self) -> None:
        s = SessionRule(id="s7", title="T", group_id="1", status="active", recurrence=None, start_time="09:00", end_time="10:00")
        self.assertEqual(expand(s, Period(), month_range(2025, 1)), [])

    def test_unbounded_query_rejected(self) -> None:
        with self.assertRaises(InvalidInput):
            expand(weekly("s", {1}), Period(), Period(start=d("2025-01-01")))

    def test_idempotent(self) -> None:
        g = group(start="2025-01-01", end="2025-12-31", trainer_name="Alice")
        s = weekly("s8", {2, 4})
        first = expand(s, resolve_period(s, g), month_range(2025, 6), g)
        second = expand(s, resolve_period(s, g), month_range(2025, 6), g)
        self.assertEqual(first, second)

    def test_copies_session_and_group_fields(self) -> None:
        g = group("7", name="Evening", trainer_id="3", trainer_name="Alice", formation_id="2", formation_title="Python")
        s = weekly("s9", {1}, group_id="7", title="Workshop", status="pending", location="Room A1", start_time="18:00", end_time="20:00")
        o = expand(s, Period(), Period(d("2025-01-06"), d("2025-01-06")), g)[0]
        self.assertEqual(o.id, "s9__2025-01-06")
        self.assertEqual((o.session_id, o.group_id), ("s9", "7"))
        self.assertEqual((o.start_time, o.end_time, o.status, o.location), ("18:00", "20:00", "pending", "Room A1"))
        self.assertEqual((o.title, o.group_name, o.trainer_name, o.formation_title), ("Workshop", "Evening", "Alice", "Python"))
        self.assertEqual((o.trainer_id, o.formation_id), ("3", "2"))

    def test_renamed_group_reflected(self) -> None:
        s = weekly("s10", {1})
        r = Period(d("2025-01-06"), d("2025-01-06"))
        self.assertEqual(expand(s, Period(), r, group(name="Old"))[0].group_name, "Old")
        self.assertEqual(expand(s, Period(), r, group(name="New"))[0].group_name, "New")

    def test_without_group(self) -> None:
        o = expand(weekly("s11", {1}), Period(), Period(d("2025-01-06"), d("2025-01-06")))[0]
        self.assertEqual(o.group_name, UNKNOWN_GROUP)


class TestIdentity(unittest.TestCase):
    def test_stable_and_distinct(self) -> None:
        a = weekly("12", {1})
        b = weekly("1", {1})
        self.assertEqual(identify(a, d("2025-01-06")), identify(a, d("2025-01-06")))
        self.assertNotEqual(identify(a, d("2025-01-06")), identify(a, d("2025-02-06")))
        # numeric concatenation would make these collide
        self.assertNotEqual(identify(a, d("2025-01-06")), identify(b, d("2025-01-06")))


class TestExpandAll(unittest.TestCase):
    def test_two_sessions_same_weekday(self) -> None:
        g = group("1", start="2025-01-01", end="2025-01-31")
        sessions = [weekly("a", {1}, start_time="09:00", end_time="10:00"), weekly("b", {1}, start_time="14:00", end_time="15:00")]
        occ = expand_all([g], sessions, month_range(2025, 1))

        self.assertEqual(len(occ), 8)  # 4 Mondays x 2 sessions
        self.assertEqual(len({o.id for o in occ}), 8)
        by_date: dict = {}
        for o in occ:
            by_date.setdefault(o.date, set()).add(o.session_id)
        self.assertTrue(all(ids == {"a", "b"} for ids in by_date.values()))

    def test_all_inside_all_periods(self) -> None:
        groups = [group("1", start="2025-01-10", end="2025-02-20"), group("2", end="2025-01-20")]
        sessions = [
            weekly("a", {0, 1, 2, 3, 4, 5, 6}, group_id="1", start="2025-01-15"),
            weekly("b", {3, 6}, group_id="2"),
            single("c", "2025-01-25", group_id="2"),
        ]
        query = Period(d("2025-01-05"), d("2025-02-28"))
        occ = expand_all(groups, sessions, query)

        self.assertTrue(occ)
        for o in occ:
            self.assertTrue(query.start <= o.date <= query.end)
            if o.session_id == "a":
                self.assertTrue(d("2025-01-15") <= o.date <= d("2025-02-20"))
            else:
                self.assertLessEqual(o.date, d("2025-01-20"))
        # the single date is after group 2 ended
        self.assertNotIn("c", {o.session_id for o in occ})

    def test_ordered_by_date_then_time(self) -> None:
        g = group("1")
        sessions = [weekly("late", {1, 2}, start_time="15:00", end_time="16:00"), weekly("early", {1}, start_time="08:00", end_time="09:00")]
        occ = expand_all([g], sessions, Period(d("2025-01-06"), d("2025-01-07")))
        self.assertEqual([o.id for o in occ], ["early__2025-01-06", "late__2025-01-06", "late__2025-01-07"])

    def test_unknown_group_skipped(self) -> None:
        occ = expand_all([group("1")], [weekly("a", {1}, group_id="99")], month_range(2025, 1))
        self.assertEqual(occ, [])

    def test_unbounded_query_rejected(self) -> None:
        with self.assertRaises(InvalidInput):
            expand_all([], [], Period())


if __name__ == "__main__":
    unittest.main()
