import time
import logging
import asyncio
from typing import Dict, List, Optional, Sequence

from release_stats.config import RAW_DATA_CSV, STATS_CSV
from release_stats.crawler.fetcher import fetch_releases
from release_stats.database.connection import ServiceFactory
from release_stats.database.operations import save_repository_records, save_repository_stats
from release_stats.stats import engine
from release_stats.stats.models import ReleaseRecord, ReleaseStat
from release_stats.storage.csv_export import write_records_csv, write_stats_csv

logger = logging.getLogger(__name__)


def split_full_name(full_name: str):
    """'owner/repo' -> ('owner', 'repo'); raises ValueError otherwise."""
    owner, sep, repo = full_name.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ValueError(f"Expected 'owner/repo', got {full_name!r}")
    return owner, repo


def collect_releases(repos: Sequence[str]) -> Dict[str, List[ReleaseRecord]]:
    """
    Fetch and normalize the releases of each repository.

    A repository that fails to fetch contributes whatever was collected
    before the failure (possibly nothing). Names that are not "owner/repo"
    are logged and skipped.
    """
    collected: Dict[str, List[ReleaseRecord]] = {}

    for full_name in repos:
        try:
            owner, repo = split_full_name(full_name)
        except ValueError as e:
            logger.error(f"Skipping repository: {e}")
            continue
        raw_releases = fetch_releases(owner, repo)
        result = engine.normalize(raw_releases, full_name)
        collected[full_name] = result.records
        print(f"[COLLECT] {full_name}: {len(result.records)} releases ({result.rejected} rejected)")

    return collected


async def save_to_database(
    collected: Dict[str, List[ReleaseRecord]],
    stats: List[ReleaseStat],
    db_url: Optional[str] = None,
):
    """Persist records and stats of every collected repository."""
    await ServiceFactory.init_orm(db_url=db_url)
    try:
        for full_name, records in collected.items():
            result = await save_repository_records(full_name, records)
            saved_stats = await save_repository_stats(full_name, stats)
            logger.info(
                f"Saved {result['releases']} releases and {saved_stats} stats for {full_name}"
            )
    finally:
        await ServiceFactory.shutdown()


def run_collection(
    repos: Sequence[str],
    raw_csv: str = RAW_DATA_CSV,
    stats_csv: str = STATS_CSV,
    save_db: bool = False,
) -> List[ReleaseStat]:
    """Collect, export both CSV tables and optionally save to the database."""
    start_time = time.time()

    print(f"\n{'=' * 70}")
    print("RELEASE STATS COLLECTION")
    print(f"{'=' * 70}\n")

    collected = collect_releases(repos)
    records = [record for records in collected.values() for record in records]
    stats = engine.tabulate(records)

    write_records_csv(records, raw_csv)
    write_stats_csv(stats, stats_csv)

    if save_db:
        asyncio.run(save_to_database(collected, stats))

    total_time = time.time() - start_time
    print(f"\n{'=' * 70}")
    print(f"Repositories: {len(collected)}")
    print(f"Releases: {len(records)}")
    print(f"Stat rows: {len(stats)}")
    print(f"Total time: {total_time:.2f} seconds")
    print(f"{'=' * 70}\n")
    return stats
