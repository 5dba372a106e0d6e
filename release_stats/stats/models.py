"""
Release Statistics Models

Typed containers shared by the stats engine: the canonical release record,
the version classification, flat stat rows, cadence entries and trend points.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, NamedTuple, Optional

# Release types
MAJOR = "Major"
MINOR = "Minor"
PATCH = "Patch"
SCOPED_PACKAGE = "ScopedPackage"
DATE_BASED = "DateBased"
OTHER = "Other"

RELEASE_TYPES = (MAJOR, MINOR, PATCH, SCOPED_PACKAGE, DATE_BASED, OTHER)

# Stat types, in report order
STAT_TYPE_ORDER = {
    "yearly": 0,
    "workday_yearly": 1,
    "monthly": 2,
    "workday_monthly": 3,
    "weekly": 4,
    "workday_weekly": 5,
    "daily": 6,
    "day_of_week": 7,
    "hour_of_day": 8,
}

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
WORKDAY_NAMES = WEEKDAY_NAMES[:5]


class VersionInfo(NamedTuple):
    """Result of classifying a tag name."""
    major: Optional[int]
    minor: Optional[int]
    patch: Optional[int]
    release_type: str


@dataclass(frozen=True)
class ReleaseRecord:
    """
    Canonical release record.

    Created once by the normalizer and never mutated afterwards. The time
    fields (weekday, hour, is_weekend) derive from ``published_at_local``; the
    version fields derive from ``tag_name`` only.
    """
    repository: str
    release_id: int
    tag_name: str
    name: str
    published_at: datetime
    published_at_local: datetime
    prerelease: bool
    draft: bool
    author_login: str
    author_id: int
    body_snippet: str
    assets_count: int
    total_download_count: int
    url: str
    weekday: str
    hour: int
    is_weekend: bool
    major: Optional[int]
    minor: Optional[int]
    patch: Optional[int]
    release_type: str


class ReleaseStat(NamedTuple):
    """One row of the flat statistics table."""
    repository: str
    stat_type: str
    period: str
    value: int


class CadenceEntry(NamedTuple):
    """Average day gap for a group (author login or release type)."""
    key: str
    count: int
    avg_days: int


class TrendPoint(NamedTuple):
    date: str
    count: int


@dataclass(frozen=True)
class ReleaseTrend:
    monthly: List[TrendPoint] = field(default_factory=list)
    cumulative: List[TrendPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, object]]]:
        return {
            "monthly": [p._asdict() for p in self.monthly],
            "cumulative": [p._asdict() for p in self.cumulative],
        }


@dataclass(frozen=True)
class ReleaseReport:
    """Structured report consumed by the dashboard."""
    total_releases: int
    releases_by_type: Dict[str, int]
    releases_by_weekday: Dict[str, int]
    releases_by_hour: Dict[str, int]
    releases_by_month: Dict[str, int]
    releases_by_author: Dict[str, int]
    pre_release_count: int
    draft_count: int
    weekend_release_count: int
    release_trend: ReleaseTrend
    top_authors: List[CadenceEntry]
    upgrade_pattern: List[CadenceEntry]
    repositories: List[str]

    def to_dict(self) -> Dict[str, object]:
        """Render the report with the dashboard's JSON key names."""
        return {
            "totalReleases": self.total_releases,
            "releasesByType": dict(self.releases_by_type),
            "releasesByWeekday": dict(self.releases_by_weekday),
            "releasesByHour": dict(self.releases_by_hour),
            "releasesByMonth": dict(self.releases_by_month),
            "releasesByAuthor": dict(self.releases_by_author),
            "preReleaseCount": self.pre_release_count,
            "draftCount": self.draft_count,
            "weekendReleaseCount": self.weekend_release_count,
            "releaseTrend": self.release_trend.to_dict(),
            "topAuthors": [
                {"author": e.key, "count": e.count, "avgDays": e.avg_days}
                for e in self.top_authors
            ],
            "upgradePattern": [
                {"type": e.key, "count": e.count, "avgDays": e.avg_days}
                for e in self.upgrade_pattern
            ],
            "repositories": list(self.repositories),
        }
