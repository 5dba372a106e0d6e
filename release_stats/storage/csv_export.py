"""
CSV Export / Reload

Writes the flat statistics table and the canonical release table, and reloads
release tables back into records through the normalizer.
"""

import csv
import logging
import os
from typing import Iterable, List

from release_stats.schemas.github import ReleaseRow
from release_stats.stats.models import ReleaseRecord, ReleaseStat
from release_stats.stats.normalizer import (
    InvalidReleaseError,
    NormalizationResult,
    build_record,
)
from release_stats.utils.metrics import RECORDS_NORMALIZED, RECORDS_REJECTED

logger = logging.getLogger(__name__)

STATS_HEADER = ["Repository", "Stat Type", "Period", "Value"]
RECORD_COLUMNS = list(ReleaseRow.__annotations__)


def _ensure_parent(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def _optional(value) -> str:
    return "" if value is None else str(value)


def write_stats_csv(rows: Iterable[ReleaseStat], path: str) -> int:
    """Write stat rows to ``path``; returns the number of rows written."""
    _ensure_parent(path)
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(STATS_HEADER)
        for row in rows:
            writer.writerow([row.repository, row.stat_type, row.period, row.value])
            count += 1
    logger.info(f"CSV file has been written successfully to {path} ({count} rows)")
    return count


def record_to_row(record: ReleaseRecord) -> ReleaseRow:
    return ReleaseRow(
        Repository=record.repository,
        ReleaseId=str(record.release_id),
        TagName=record.tag_name,
        ReleaseName=record.name,
        PublishedAt=record.published_at.isoformat().replace("+00:00", "Z"),
        PublishedAtKST=record.published_at_local.isoformat(),
        IsPreRelease=_flag(record.prerelease),
        IsDraft=_flag(record.draft),
        AuthorLogin=record.author_login,
        AuthorId=str(record.author_id),
        BodySnippet=record.body_snippet,
        AssetsCount=str(record.assets_count),
        TotalDownloadCount=str(record.total_download_count),
        ReleaseUrl=record.url,
        Weekday=record.weekday,
        HourOfDay=str(record.hour),
        IsWeekend=_flag(record.is_weekend),
        MajorVersion=_optional(record.major),
        MinorVersion=_optional(record.minor),
        PatchVersion=_optional(record.patch),
        ReleaseType=record.release_type,
    )


def write_records_csv(records: Iterable[ReleaseRecord], path: str) -> int:
    """Write canonical records, one column per field."""
    _ensure_parent(path)
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=RECORD_COLUMNS)
        writer.writeheader()
        for record in records:
            writer.writerow(record_to_row(record))
            count += 1
    logger.info(f"Wrote {count} release records to {path}")
    return count


def row_to_record(row: dict) -> ReleaseRecord:
    """
    Rebuild a record from an exported row.

    Derived columns (weekday, hour, version, release type) are recomputed
    from the timestamp and tag instead of being read back.
    """
    return build_record(
        repository=row.get("Repository"),
        release_id=row.get("ReleaseId"),
        tag_name=row.get("TagName"),
        published_at=row.get("PublishedAt") or row.get("PublishedAtKST"),
        name=row.get("ReleaseName"),
        prerelease=row.get("IsPreRelease"),
        draft=row.get("IsDraft"),
        author_login=row.get("AuthorLogin"),
        author_id=row.get("AuthorId"),
        body=row.get("BodySnippet"),
        assets_count=row.get("AssetsCount"),
        total_download_count=row.get("TotalDownloadCount"),
        url=row.get("ReleaseUrl"),
    )


def read_records_csv(path: str) -> NormalizationResult:
    """Reload a release table, skipping rows without a usable timestamp."""
    records: List[ReleaseRecord] = []
    rejected = 0

    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            try:
                records.append(row_to_record(row))
            except InvalidReleaseError as e:
                rejected += 1
                logger.warning(f"Skipping {path}:{line_no}: {e}")

    RECORDS_NORMALIZED.inc(len(records))
    RECORDS_REJECTED.inc(rejected)
    logger.info(f"Loaded {len(records)} release records from {path} ({rejected} rejected)")
    return NormalizationResult(records, rejected)
