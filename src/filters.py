from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Sequence

from src.formatters import to_iso_date
from src.records import ClinicRecord

QUICK_RANGE_KINDS = ("today", "week", "month", "clear")


@dataclass(frozen=True)
class FilterState:
    search: str = ""
    date_from: str = ""
    date_to: str = ""


@dataclass(frozen=True)
class QuickRange:
    date_from: str = ""
    date_to: str = ""
    clear_selection: bool = False


def search_haystack(record: ClinicRecord) -> str:
    return f"{record.name} {record.surname} {record.mobile}".lower()


def record_matches(record: ClinicRecord, state: FilterState, query: str | None = None) -> bool:
    if query is None:
        query = str(state.search or "").strip().lower()
    if query and query not in search_haystack(record):
        return False
    if state.date_from and record.date < state.date_from:
        return False
    if state.date_to and record.date > state.date_to:
        return False
    return True


def filter_records(records: Sequence[ClinicRecord], state: FilterState) -> list[ClinicRecord]:
    query = str(state.search or "").strip().lower()
    return [record for record in records if record_matches(record, state, query)]


def filter_cache_key(records: Sequence[ClinicRecord], state: FilterState) -> tuple[Any, ...]:
    # Records are identified by id and the fields the filter reads.
    record_part = tuple((record.id, record.name, record.surname, record.mobile, record.date) for record in records)
    return (record_part, state.search, state.date_from, state.date_to)


def _local_day(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def resolve_quick_range(kind: str, now: date | datetime) -> QuickRange:
    """
    Concrete bounds for a quick filter relative to ``now`` in local time.

    Weeks start on Sunday regardless of locale. ``clear`` returns empty bounds
    and asks the caller to drop the current selection.
    """
    kind = str(kind or "").strip().lower()
    if kind not in QUICK_RANGE_KINDS:
        raise ValueError(f"Unknown quick range: {kind!r}")

    if kind == "clear":
        return QuickRange(clear_selection=True)

    today = _local_day(now)
    if kind == "today":
        iso = to_iso_date(today)
        return QuickRange(date_from=iso, date_to=iso)

    if kind == "week":
        # date.weekday() is Monday=0; shift so Sunday=0.
        days_since_sunday = (today.weekday() + 1) % 7
        start = today - timedelta(days=days_since_sunday)
        return QuickRange(date_from=to_iso_date(start), date_to=to_iso_date(start + timedelta(days=6)))

    start = today.replace(day=1)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    end = next_month - timedelta(days=1)
    return QuickRange(date_from=to_iso_date(start), date_to=to_iso_date(end))


def apply_quick_range(state: FilterState, quick: QuickRange) -> FilterState:
    return FilterState(search=state.search, date_from=quick.date_from, date_to=quick.date_to)
