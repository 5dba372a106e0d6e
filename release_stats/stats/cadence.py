"""
Cadence Calculator

Average number of days between consecutive releases, grouped by author or by
the release type of the earlier release of each pair.
"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from release_stats.config import TOP_AUTHORS_LIMIT
from release_stats.stats.buckets import split_weekend
from release_stats.stats.models import CadenceEntry, ReleaseRecord


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up (6.5 -> 7, not 6)."""
    return int(math.floor(value + 0.5))


def day_gap(earlier: ReleaseRecord, later: ReleaseRecord) -> int:
    """Whole days between two releases, truncated."""
    seconds = (later.published_at - earlier.published_at).total_seconds()
    return int(seconds / 86400)


def chronological(records: Iterable[ReleaseRecord]) -> List[ReleaseRecord]:
    """Workday releases sorted by publish time (stable for equal times)."""
    workday, _ = split_weekend(records)
    return sorted(workday, key=lambda record: record.published_at)


def _average(gaps: Sequence[int]) -> int:
    if not gaps:
        return 0
    return round_half_up(sum(gaps) / len(gaps))


def author_cadence(records: Iterable[ReleaseRecord]) -> List[CadenceEntry]:
    """
    Release count and average gap per author, ordered by author login.

    An author with a single release has a cadence of 0.
    """
    by_author: Dict[str, List[ReleaseRecord]] = defaultdict(list)
    for record in chronological(records):
        by_author[record.author_login].append(record)

    entries = []
    for author in sorted(by_author):
        releases = by_author[author]
        gaps = [day_gap(prev, cur) for prev, cur in zip(releases, releases[1:])]
        entries.append(CadenceEntry(author, len(releases), _average(gaps)))
    return entries


def upgrade_pattern(records: Iterable[ReleaseRecord]) -> List[CadenceEntry]:
    """
    Average gap until the next release, keyed by the type of the earlier one.

    For each adjacent pair (previous, current) in publish order the gap is
    attributed to ``previous.release_type``. Entries are ordered by descending
    count, then by type name.
    """
    releases = chronological(records)
    gaps_by_type: Dict[str, List[int]] = defaultdict(list)
    for prev, cur in zip(releases, releases[1:]):
        gaps_by_type[prev.release_type].append(day_gap(prev, cur))

    entries = [
        CadenceEntry(release_type, len(gaps), _average(gaps))
        for release_type, gaps in gaps_by_type.items()
    ]
    entries.sort(key=lambda entry: (-entry.count, entry.key))
    return entries


def top_authors(
    entries: Iterable[CadenceEntry], limit: int = TOP_AUTHORS_LIMIT
) -> List[CadenceEntry]:
    """Most active authors first, ties broken by login."""
    ranked = sorted(entries, key=lambda entry: (-entry.count, entry.key))
    return ranked[:limit]
