"""
Record Normalizer

Turns loosely-typed release payloads (GitHub API JSON or reloaded CSV rows)
into immutable ReleaseRecord objects. Only an unusable timestamp rejects a
release; every other field falls back to a safe default.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, NamedTuple, Optional

from release_stats.config import BODY_SNIPPET_LENGTH, LOCAL_UTC_OFFSET_HOURS
from release_stats.schemas.github import GitHubRelease
from release_stats.stats.models import WEEKDAY_NAMES, ReleaseRecord
from release_stats.stats.version import classify_version
from release_stats.utils.metrics import RECORDS_NORMALIZED, RECORDS_REJECTED

logger = logging.getLogger(__name__)

LOCAL_TZ = timezone(timedelta(hours=LOCAL_UTC_OFFSET_HOURS))
UNKNOWN_AUTHOR = "unknown"

TRUE_STRINGS = {"true", "1", "yes", "y", "t"}


class InvalidReleaseError(ValueError):
    """Raised when a release payload cannot be turned into a record."""


class NormalizationResult(NamedTuple):
    records: List[ReleaseRecord]
    rejected: int


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken to be UTC. Raises InvalidReleaseError for
    missing or unparseable input.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidReleaseError(f"Unparseable timestamp {value!r}") from e
    else:
        raise InvalidReleaseError(f"Missing timestamp ({value!r})")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_local(published_at: datetime) -> datetime:
    """Shift a UTC timestamp to the fixed local offset (no DST)."""
    return published_at.astimezone(LOCAL_TZ)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def _as_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def build_record(
    repository: str,
    release_id: Any,
    tag_name: Optional[str],
    published_at: Any,
    name: Optional[str] = None,
    prerelease: Any = False,
    draft: Any = False,
    author_login: Optional[str] = None,
    author_id: Any = None,
    body: Optional[str] = None,
    assets_count: Any = 0,
    total_download_count: Any = 0,
    url: Optional[str] = None,
) -> ReleaseRecord:
    """
    Build a canonical record from already-extracted fields.

    Time fields are derived from ``published_at`` and version fields from
    ``tag_name``; neither is ever taken from the caller.
    """
    published_utc = parse_timestamp(published_at)
    published_local = to_local(published_utc)
    version = classify_version(tag_name)
    weekday_index = published_local.weekday()

    return ReleaseRecord(
        repository=_as_str(repository),
        release_id=_as_int(release_id),
        tag_name=_as_str(tag_name),
        name=_as_str(name),
        published_at=published_utc,
        published_at_local=published_local,
        prerelease=_as_bool(prerelease),
        draft=_as_bool(draft),
        author_login=_as_str(author_login) or UNKNOWN_AUTHOR,
        author_id=_as_int(author_id),
        body_snippet=_as_str(body)[:BODY_SNIPPET_LENGTH],
        assets_count=_as_int(assets_count),
        total_download_count=_as_int(total_download_count),
        url=_as_str(url),
        weekday=WEEKDAY_NAMES[weekday_index],
        hour=published_local.hour,
        is_weekend=weekday_index >= 5,
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        release_type=version.release_type,
    )


def normalize_release(raw: GitHubRelease, repository: str) -> ReleaseRecord:
    """
    Normalize one GitHub release payload.

    Uses ``published_at`` and falls back to ``created_at`` (drafts are never
    published). Raises InvalidReleaseError when neither is usable.
    """
    author = raw.get("author") or {}
    assets = raw.get("assets") or []

    return build_record(
        repository=repository,
        release_id=raw.get("id"),
        tag_name=raw.get("tag_name"),
        published_at=raw.get("published_at") or raw.get("created_at"),
        name=raw.get("name"),
        prerelease=raw.get("prerelease", False),
        draft=raw.get("draft", False),
        author_login=author.get("login"),
        author_id=author.get("id"),
        body=raw.get("body"),
        assets_count=len(assets),
        total_download_count=sum(_as_int(a.get("download_count")) for a in assets),
        url=raw.get("html_url"),
    )


def normalize_releases(
    raw_releases: Iterable[GitHubRelease], repository: str
) -> NormalizationResult:
    """Normalize a batch, skipping (and logging) releases that are rejected."""
    records = []
    rejected = 0

    for raw in raw_releases:
        try:
            records.append(normalize_release(raw, repository))
        except InvalidReleaseError as e:
            rejected += 1
            logger.warning(
                f"Skipping release {raw.get('id')} ({raw.get('tag_name')}) "
                f"of {repository}: {e}"
            )

    RECORDS_NORMALIZED.inc(len(records))
    RECORDS_REJECTED.inc(rejected)
    logger.info(
        f"Normalized {len(records)} releases for {repository} ({rejected} rejected)"
    )
    return NormalizationResult(records, rejected)
