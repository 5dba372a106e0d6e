from datetime import date

import pytest

from release_stats.stats.buckets import (
    bucket_stats,
    business_hour_bucket,
    count_business_hours,
    count_weekdays,
    split_weekend,
    week_of_year,
)

# ============================================================================
# BUSINESS-HOUR BUCKETS
# ============================================================================


@pytest.mark.parametrize(
    "hour, label",
    [
        (0, "09시 이전"),
        (8, "09시 이전"),
        (9, "09-10"),
        (12, "12-13"),
        (17, "17-18"),
        (18, "18시 이후"),
        (23, "18시 이후"),
    ],
)
def test_business_hour_bucket_boundaries(hour, label):
    assert business_hour_bucket(hour) == label


def test_business_hour_counts_have_every_bucket(sample_records):
    workday, _ = split_weekend(sample_records)
    counts = count_business_hours(workday)

    assert list(counts)[0] == "09시 이전"
    assert list(counts)[-1] == "18시 이후"
    assert len(counts) == 11
    assert counts["09시 이전"] == 1   # 08:30
    assert counts["09-10"] == 1       # 09:15
    assert counts["10-11"] == 1
    assert counts["14-15"] == 1
    assert counts["18시 이후"] == 1   # 18:00
    assert sum(counts.values()) == len(workday)


def test_weekday_counts_zero_initialized(sample_records):
    workday, weekend = split_weekend(sample_records)
    counts = count_weekdays(workday)

    assert list(counts) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert counts == {"Monday": 2, "Tuesday": 1, "Wednesday": 1, "Thursday": 1, "Friday": 0}
    assert [r.weekday for r in weekend] == ["Saturday"]

# ============================================================================
# WEEK NUMBERS
# ============================================================================


def test_week_of_year():
    assert week_of_year(date(2024, 1, 1)) == 1    # Monday
    assert week_of_year(date(2024, 1, 6)) == 1    # Saturday
    assert week_of_year(date(2024, 1, 7)) == 2    # Sunday starts week 2
    assert week_of_year(date(2024, 5, 1)) == 18
    assert week_of_year(date(2024, 12, 25)) == 52


def test_week_of_year_end_of_december_rolls_to_week_one():
    # the week of Sun 2024-12-29 contains 2025-01-01
    assert week_of_year(date(2024, 12, 29)) == 1
    assert week_of_year(date(2024, 12, 28)) == 52
    assert week_of_year(date(2025, 1, 1)) == 1

# ============================================================================
# FLAT STAT ROWS
# ============================================================================


def test_bucket_stats_rows(sample_records):
    repo_records = [r for r in sample_records if r.repository == "octo/repo"]
    rows = bucket_stats(repo_records, "octo/repo")
    table = {(r.stat_type, r.period): r.value for r in rows}

    assert all(r.repository == "octo/repo" for r in rows)
    assert table[("yearly", "2024")] == 5
    assert table[("workday_yearly", "2024")] == 4
    assert table[("monthly", "2024-05")] == 4
    assert table[("workday_monthly", "2024-05")] == 3
    assert table[("monthly", "2024-06")] == 1
    assert table[("weekly", "2024-W19")] == 3   # 05-06, 05-09, 05-11
    assert table[("workday_weekly", "2024-W19")] == 2
    assert table[("weekly", "2024-W18")] == 1
    assert table[("daily", "2024-05-11")] == 1
    assert table[("day_of_week", "Saturday")] == 1
    assert table[("day_of_week", "Monday")] == 2
    assert table[("hour_of_day", "05")] == 1
    assert table[("hour_of_day", "18")] == 1
    assert not any(r.stat_type in ("workday_daily", "workday_hour_of_day") for r in rows)


def test_bucket_stats_ordering(sample_records):
    rows = bucket_stats(sample_records, "octo/repo")
    order = [
        "yearly", "workday_yearly", "monthly", "workday_monthly", "weekly",
        "workday_weekly", "daily", "day_of_week", "hour_of_day",
    ]
    seen = []
    for row in rows:
        if not seen or seen[-1] != row.stat_type:
            seen.append(row.stat_type)
    assert seen == order

    for stat_type in order:
        periods = [r.period for r in rows if r.stat_type == stat_type]
        assert periods == sorted(periods)


def test_bucket_stats_empty():
    assert bucket_stats([], "octo/repo") == []


def test_bucket_stats_is_deterministic(sample_records):
    assert bucket_stats(sample_records, "x") == bucket_stats(list(reversed(sample_records)), "x")
