from typing import Iterable

from release_stats.stats.buckets import count_by, month_key, split_weekend
from release_stats.stats.models import ReleaseRecord, ReleaseTrend, TrendPoint


def release_trend(records: Iterable[ReleaseRecord]) -> ReleaseTrend:
    """Monthly workday release counts and their running total."""
    workday, _ = split_weekend(records)
    monthly = [TrendPoint(month, count) for month, count in count_by(workday, month_key).items()]

    cumulative = []
    running = 0
    for point in monthly:
        running += point.count
        cumulative.append(TrendPoint(point.date, running))

    return ReleaseTrend(monthly=monthly, cumulative=cumulative)
