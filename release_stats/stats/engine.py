"""
Stats Engine

Single entry point for release statistics. The same three calls are used
whether releases arrive fresh from the GitHub API or are reloaded from CSV
or the database:

- normalize(): raw payloads -> canonical records
- tabulate(): records -> flat (repository, stat_type, period, value) rows
- aggregate(): records -> structured dashboard report

The engine is pure: no I/O, no shared state between calls.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from release_stats.config import TOP_AUTHORS_LIMIT
from release_stats.schemas.github import GitHubRelease
from release_stats.stats.buckets import (
    bucket_stats,
    count_business_hours,
    count_by,
    count_weekdays,
    month_key,
    split_weekend,
)
from release_stats.stats.cadence import author_cadence, top_authors, upgrade_pattern
from release_stats.stats.models import ReleaseRecord, ReleaseReport, ReleaseStat
from release_stats.stats.normalizer import NormalizationResult, normalize_releases
from release_stats.stats.trend import release_trend
from release_stats.utils.metrics import REPORT_BUILD_TIME

ENGINE_VERSION = "1.0.0"

ALL_REPOSITORIES = "all"


def normalize(raw_releases: Iterable[GitHubRelease], repository: str) -> NormalizationResult:
    return normalize_releases(raw_releases, repository)


def filter_records(
    records: Iterable[ReleaseRecord], repository: Optional[str] = None
) -> List[ReleaseRecord]:
    """Records of one repository; None or "all" keeps everything."""
    if not repository or repository == ALL_REPOSITORIES:
        return list(records)
    return [record for record in records if record.repository == repository]


def repositories(records: Iterable[ReleaseRecord]) -> List[str]:
    return sorted({record.repository for record in records})


def tabulate(records: Iterable[ReleaseRecord]) -> List[ReleaseStat]:
    """Flat stat rows, one block per repository (repositories sorted by name)."""
    by_repository: Dict[str, List[ReleaseRecord]] = defaultdict(list)
    for record in records:
        by_repository[record.repository].append(record)

    rows = []
    for repository in sorted(by_repository):
        rows.extend(bucket_stats(by_repository[repository], repository))
    return rows


@REPORT_BUILD_TIME.time()
def aggregate(
    records: Sequence[ReleaseRecord],
    repository: Optional[str] = None,
    top_n: int = TOP_AUTHORS_LIMIT,
) -> ReleaseReport:
    """
    Build the dashboard report for ``repository`` (default: all).

    Every figure except ``weekend_release_count`` is computed over workday
    releases only. ``repositories`` always lists every repository present in
    ``records``, regardless of the filter.
    """
    selected = filter_records(records, repository)
    workday, weekend = split_weekend(selected)

    return ReleaseReport(
        total_releases=len(workday),
        releases_by_type=count_by(workday, lambda r: r.release_type),
        releases_by_weekday=count_weekdays(workday),
        releases_by_hour=count_business_hours(workday),
        releases_by_month=count_by(workday, month_key),
        releases_by_author=count_by(workday, lambda r: r.author_login),
        pre_release_count=sum(1 for r in workday if r.prerelease),
        draft_count=sum(1 for r in workday if r.draft),
        weekend_release_count=len(weekend),
        release_trend=release_trend(workday),
        top_authors=top_authors(author_cadence(workday), limit=top_n),
        upgrade_pattern=upgrade_pattern(workday),
        repositories=repositories(records),
    )
