"""
Database Operations with Tortoise ORM

Provides async persistence for canonical release records and flat release
statistics, with retry logic and transactions. Records loaded back go through
the same normalizer as freshly fetched releases.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Any, Iterable, List, Optional, TypeVar
from tortoise.exceptions import (
    OperationalError,
    TransactionManagementError,
    DBConnectionError
)
from tortoise.transactions import in_transaction

from release_stats.config import BATCH_SIZE
from release_stats.database.models import Repository, Release, ReleaseStat
from release_stats.stats.models import ReleaseRecord, ReleaseStat as StatRow
from release_stats.stats.normalizer import InvalidReleaseError, build_record

T = TypeVar('T')

logger = logging.getLogger(__name__)


def should_retry(error: Exception) -> bool:
    """
    Determine if an error should trigger a retry.

    Args:
        error: The exception that occurred

    Returns:
        bool: True if the operation should be retried
    """
    return isinstance(error, (
        OperationalError,
        DBConnectionError,
        TransactionManagementError
    ))


async def execute_with_retry(
    fn: Callable[[], Awaitable[T]],
    retries: int = 3,
    delay_ms: int = 1000,
    operation_name: str = "Database operation"
) -> T:
    """
    Execute an async database operation with automatic retry on transient failures.

    Args:
        fn: The async function to execute (should be a database operation)
        retries: Maximum number of retry attempts. Default is 3.
        delay_ms: Delay in milliseconds between retries. Default is 1000.
        operation_name: Name of the operation for logging purposes.

    Returns:
        The result of the successful function execution.

    Raises:
        Exception: Re-raises the last exception if all retries are exhausted.
    """
    attempt = 0
    last_error = None

    while attempt < retries:
        try:
            return await fn()
        except Exception as error:
            attempt += 1
            last_error = error

            if attempt >= retries or not should_retry(error):
                logger.error(
                    f"{operation_name} failed after {attempt} attempts: {error}"
                )
                raise

            logger.warning(
                f"{operation_name} failed (attempt {attempt}/{retries}): {error}. "
                f"Retrying in {delay_ms}ms..."
            )
            await asyncio.sleep(delay_ms / 1000.0)

    raise last_error or Exception(f"{operation_name} failed after maximum retries")


async def save_repository_records(
    repository: str,
    records: Iterable[ReleaseRecord]
) -> Dict[str, Any]:
    """
    Atomically upsert a repository and its release records.

    Releases are matched on (release_id, repository) and updated in place
    when they already exist.

    Returns:
        dict: Result dictionary with 'success', 'repo_id' and 'releases'.
    """
    records = list(records)

    async def transaction():
        async with in_transaction() as conn:
            repo, _ = await Repository.get_or_create(
                full_name=repository,
                using_db=conn
            )

            for i in range(0, len(records), BATCH_SIZE):
                for record in records[i:i + BATCH_SIZE]:
                    await Release.update_or_create(
                        release_id=record.release_id,
                        repo_id=repo.id,
                        defaults={
                            "tag_name": record.tag_name,
                            "release_name": record.name,
                            "body_snippet": record.body_snippet,
                            "published_at": record.published_at,
                            "prerelease": record.prerelease,
                            "draft": record.draft,
                            "author_login": record.author_login,
                            "author_id": record.author_id,
                            "assets_count": record.assets_count,
                            "total_download_count": record.total_download_count,
                            "html_url": record.url,
                        },
                        using_db=conn
                    )

            return {"success": True, "repo_id": repo.id, "releases": len(records)}

    return await execute_with_retry(
        transaction,
        operation_name=f"Upsert releases of {repository}"
    )


async def save_repository_stats(repository: str, rows: Iterable[StatRow]) -> int:
    """
    Replace the stored statistics of a repository with ``rows``.

    Returns the number of rows written.
    """
    rows = [row for row in rows if row.repository == repository]

    async def transaction():
        async with in_transaction() as conn:
            repo, _ = await Repository.get_or_create(
                full_name=repository,
                using_db=conn
            )
            await ReleaseStat.filter(repo_id=repo.id).using_db(conn).delete()
            await ReleaseStat.bulk_create(
                [
                    ReleaseStat(
                        repo_id=repo.id,
                        stat_type=row.stat_type,
                        period=row.period,
                        value=row.value,
                    )
                    for row in rows
                ],
                batch_size=BATCH_SIZE,
                using_db=conn
            )
            return len(rows)

    return await execute_with_retry(
        transaction,
        operation_name=f"Save stats of {repository}"
    )


async def load_records(repository: Optional[str] = None) -> List[ReleaseRecord]:
    """
    Load stored releases as canonical records (all repositories by default).
    """
    query = Release.all()
    if repository:
        query = query.filter(repo__full_name=repository)
    releases = await query.prefetch_related("repo").order_by("published_at", "id")

    records = []
    for release in releases:
        try:
            records.append(
                build_record(
                    repository=release.repo.full_name,
                    release_id=release.release_id,
                    tag_name=release.tag_name,
                    published_at=release.published_at,
                    name=release.release_name,
                    prerelease=release.prerelease,
                    draft=release.draft,
                    author_login=release.author_login,
                    author_id=release.author_id,
                    body=release.body_snippet,
                    assets_count=release.assets_count,
                    total_download_count=release.total_download_count,
                    url=release.html_url,
                )
            )
        except InvalidReleaseError as e:
            logger.warning(f"Skipping stored release {release.id}: {e}")

    logger.info(f"Loaded {len(records)} release records from the database")
    return records
