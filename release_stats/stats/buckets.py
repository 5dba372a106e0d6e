"""
Bucketing Aggregator

Counts releases along temporal and categorical dimensions. Every function
builds a fresh mapping per call and never touches the records it reads.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from release_stats.stats.models import (
    STAT_TYPE_ORDER,
    WORKDAY_NAMES,
    ReleaseRecord,
    ReleaseStat,
)

BEFORE_WORK_HOURS = "09시 이전"
AFTER_WORK_HOURS = "18시 이후"
WORK_DAY_START = 9
WORK_DAY_END = 18
WORK_HOURS = tuple(
    f"{hour:02d}-{hour + 1:02d}" for hour in range(WORK_DAY_START, WORK_DAY_END)
)

KeyFunc = Callable[[ReleaseRecord], str]


def split_weekend(
    records: Iterable[ReleaseRecord],
) -> Tuple[List[ReleaseRecord], List[ReleaseRecord]]:
    """Split records into (workday, weekend) lists, preserving order."""
    workday, weekend = [], []
    for record in records:
        (weekend if record.is_weekend else workday).append(record)
    return workday, weekend


def _sunday_index(day: date) -> int:
    """Day index in a Sunday-first week (Sunday=0 .. Saturday=6)."""
    return (day.weekday() + 1) % 7


def week_of_year(day: date) -> int:
    """
    Sunday-first week number.

    Week 1 is the week containing January 1st. The last days of December
    already belong to week 1 when their week contains the next January 1st.
    """
    if day.month == 12 and day.day > 25:
        week_end = day + timedelta(days=6 - _sunday_index(day))
        if date(day.year + 1, 1, 1) <= week_end:
            return 1

    jan_first = date(day.year, 1, 1)
    first_week_start = jan_first - timedelta(days=_sunday_index(jan_first))
    return (day - first_week_start).days // 7 + 1


def year_key(record: ReleaseRecord) -> str:
    return record.published_at_local.strftime("%Y")


def month_key(record: ReleaseRecord) -> str:
    return record.published_at_local.strftime("%Y-%m")


def week_key(record: ReleaseRecord) -> str:
    local = record.published_at_local
    return f"{local.year:04d}-W{week_of_year(local.date()):02d}"


def day_key(record: ReleaseRecord) -> str:
    return record.published_at_local.strftime("%Y-%m-%d")


def weekday_key(record: ReleaseRecord) -> str:
    return record.weekday


def hour_key(record: ReleaseRecord) -> str:
    return f"{record.hour:02d}"


def business_hour_bucket(hour: int) -> str:
    """Map an hour of day to its business-hour bucket label."""
    if hour < WORK_DAY_START:
        return BEFORE_WORK_HOURS
    if hour >= WORK_DAY_END:
        return AFTER_WORK_HOURS
    return WORK_HOURS[hour - WORK_DAY_START]


def count_by(records: Iterable[ReleaseRecord], key: KeyFunc) -> Dict[str, int]:
    """Count records per key; the returned dict is ordered by key."""
    counts = Counter(key(record) for record in records)
    return dict(sorted(counts.items()))


def count_weekdays(records: Iterable[ReleaseRecord]) -> Dict[str, int]:
    """Monday..Friday counts, zero-initialized, in calendar order."""
    counts = {name: 0 for name in WORKDAY_NAMES}
    for record in records:
        counts[record.weekday] = counts.get(record.weekday, 0) + 1
    return counts


def count_business_hours(records: Iterable[ReleaseRecord]) -> Dict[str, int]:
    """Business-hour bucket counts with every bucket present."""
    counts = {BEFORE_WORK_HOURS: 0}
    counts.update((label, 0) for label in WORK_HOURS)
    counts[AFTER_WORK_HOURS] = 0
    for record in records:
        counts[business_hour_bucket(record.hour)] += 1
    return counts


# (stat_type, key function, restrict to workdays)
STAT_DIMENSIONS: Sequence[Tuple[str, KeyFunc, bool]] = (
    ("yearly", year_key, False),
    ("workday_yearly", year_key, True),
    ("monthly", month_key, False),
    ("workday_monthly", month_key, True),
    ("weekly", week_key, False),
    ("workday_weekly", week_key, True),
    ("daily", day_key, False),
    ("day_of_week", weekday_key, False),
    ("hour_of_day", hour_key, False),
)


def bucket_stats(records: Sequence[ReleaseRecord], repository: str) -> List[ReleaseStat]:
    """
    Build the flat statistics table for one repository.

    Plain dimensions count every record; workday_* dimensions count only
    records that were not published on a local weekend. Rows are ordered by
    stat type, then by period.
    """
    workday, _ = split_weekend(records)
    rows = []

    for stat_type, key, workdays_only in STAT_DIMENSIONS:
        source = workday if workdays_only else records
        for period, value in count_by(source, key).items():
            rows.append(ReleaseStat(repository, stat_type, period, value))

    rows.sort(key=lambda row: (STAT_TYPE_ORDER[row.stat_type], row.period))
    return rows
