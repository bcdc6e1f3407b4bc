from __future__ import annotations

import unittest
from datetime import date, datetime

from src.filters import (
    FilterState,
    QuickRange,
    apply_quick_range,
    filter_cache_key,
    filter_records,
    resolve_quick_range,
)
from src.records import ClinicRecord


def _record(record_id: str, name: str, surname: str, mobile: str, record_date: str) -> ClinicRecord:
    return ClinicRecord(id=record_id, name=name, surname=surname, mobile=mobile, date=record_date)


RECORDS = [
    _record("r1", "John", "Doe", "555-100", "2024-03-15"),
    _record("r2", "Ann", "Lee", "+995 577", "2024-03-10"),
    _record("r3", "Nino", "Beridze", "599 123", "2024-02-28"),
    _record("r4", "Johanna", "Smith", "555-200", "2024-01-05"),
]


class FilterRecordsTests(unittest.TestCase):
    def test_empty_state_is_identity(self) -> None:
        self.assertEqual(filter_records(RECORDS, FilterState()), RECORDS)
        self.assertEqual(filter_records(RECORDS, FilterState(search="   ")), RECORDS)

    def test_result_preserves_input_order(self) -> None:
        result = filter_records(RECORDS, FilterState(search="jo"))
        self.assertEqual([record.id for record in result], ["r1", "r4"])

    def test_search_is_case_insensitive_substring_of_joined_fields(self) -> None:
        self.assertEqual([r.id for r in filter_records(RECORDS, FilterState(search="  JOHN DOE "))], ["r1"])
        self.assertEqual([r.id for r in filter_records(RECORDS, FilterState(search="doe 555"))], ["r1"])
        self.assertEqual([r.id for r in filter_records(RECORDS, FilterState(search="+995"))], ["r2"])

    def test_word_fragments_do_not_match_separately(self) -> None:
        self.assertEqual(filter_records(RECORDS, FilterState(search="jo do")), [])

    def test_date_bounds_are_inclusive(self) -> None:
        state = FilterState(date_from="2024-02-28", date_to="2024-03-10")
        self.assertEqual([r.id for r in filter_records(RECORDS, state)], ["r2", "r3"])

    def test_out_of_order_bounds_yield_nothing(self) -> None:
        state = FilterState(date_from="2024-03-15", date_to="2024-01-01")
        self.assertEqual(filter_records(RECORDS, state), [])

    def test_predicates_are_conjunctive(self) -> None:
        state = FilterState(search="555", date_from="2024-02-01")
        self.assertEqual([r.id for r in filter_records(RECORDS, state)], ["r1"])

    def test_cache_key_is_stable_for_equal_inputs(self) -> None:
        copy = [_record(r.id, r.name, r.surname, r.mobile, r.date) for r in RECORDS]
        state = FilterState(search="jo")
        self.assertEqual(filter_cache_key(RECORDS, state), filter_cache_key(copy, FilterState(search="jo")))
        self.assertNotEqual(filter_cache_key(RECORDS, state), filter_cache_key(RECORDS, FilterState(search="j")))


class QuickRangeTests(unittest.TestCase):
    def test_today(self) -> None:
        quick = resolve_quick_range("today", datetime(2024, 3, 15, 18, 45))
        self.assertEqual((quick.date_from, quick.date_to), ("2024-03-15", "2024-03-15"))

    def test_week_starts_on_sunday(self) -> None:
        quick = resolve_quick_range("week", date(2024, 3, 13))
        self.assertEqual((quick.date_from, quick.date_to), ("2024-03-10", "2024-03-16"))

    def test_week_on_boundary_days(self) -> None:
        sunday = resolve_quick_range("week", date(2024, 3, 10))
        saturday = resolve_quick_range("week", date(2024, 3, 16))
        self.assertEqual(sunday.date_from, "2024-03-10")
        self.assertEqual(saturday.date_from, "2024-03-10")
        self.assertEqual(saturday.date_to, "2024-03-16")

    def test_month_handles_leap_year_and_december(self) -> None:
        february = resolve_quick_range("month", date(2024, 2, 10))
        self.assertEqual((february.date_from, february.date_to), ("2024-02-01", "2024-02-29"))
        december = resolve_quick_range("month", date(2024, 12, 5))
        self.assertEqual((december.date_from, december.date_to), ("2024-12-01", "2024-12-31"))

    def test_clear_drops_bounds_and_requests_selection_reset(self) -> None:
        self.assertEqual(resolve_quick_range("clear", date(2024, 3, 13)), QuickRange(clear_selection=True))

    def test_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            resolve_quick_range("year", date(2024, 3, 13))

    def test_apply_keeps_search(self) -> None:
        state = FilterState(search="ann", date_from="2023-01-01", date_to="2023-12-31")
        applied = apply_quick_range(state, resolve_quick_range("clear", date(2024, 3, 13)))
        self.assertEqual(applied, FilterState(search="ann"))


if __name__ == "__main__":
    unittest.main()
