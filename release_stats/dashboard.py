"""
Dashboard Service

Query surface over an in-memory record set: returns the structured report for
an optional repository filter, with an optional Redis cache that is cleared
whenever the record set is reloaded. Cached reports are keyed by a
fingerprint of the record set, so services built on different records can
share one cache.
"""

import hashlib
import logging
from typing import Any, Dict, Iterable, List, Optional

from release_stats.stats import engine
from release_stats.stats.models import ReleaseRecord
from release_stats.utils.redis_client import RedisManager

logger = logging.getLogger(__name__)


def record_set_fingerprint(records: Iterable[ReleaseRecord]) -> str:
    """Short, order-independent hash identifying a record set."""
    identities = sorted(
        (record.repository, record.release_id, record.published_at.isoformat())
        for record in records
    )
    digest = hashlib.sha1()
    for repository, release_id, published_at in identities:
        digest.update(f"{repository}\t{release_id}\t{published_at}\n".encode("utf-8"))
    return digest.hexdigest()[:16]


class DashboardService:
    def __init__(
        self,
        records: Iterable[ReleaseRecord] = (),
        cache: Optional[RedisManager] = None,
    ):
        self._records = tuple(records)
        self._fingerprint = record_set_fingerprint(self._records)
        self.cache = cache

    @property
    def records(self) -> tuple:
        return self._records

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def reload(self, records: Iterable[ReleaseRecord]):
        """Swap in a new record set and drop every cached report."""
        self._records = tuple(records)
        self._fingerprint = record_set_fingerprint(self._records)
        if self.cache is not None:
            removed = self.cache.invalidate_reports()
            logger.info(f"Record set reloaded ({len(self._records)} records), {removed} cached reports dropped")

    def repositories(self) -> List[str]:
        return engine.repositories(self._records)

    def get_dashboard(self, repository: Optional[str] = None) -> Dict[str, Any]:
        """Report for one repository, or for all of them when None/"all"."""
        key = repository or engine.ALL_REPOSITORIES

        if self.cache is not None:
            cached = self.cache.get_report(engine.ENGINE_VERSION, self._fingerprint, key)
            if cached is not None:
                return cached

        report = engine.aggregate(self._records, repository=key).to_dict()

        if self.cache is not None:
            self.cache.cache_report(engine.ENGINE_VERSION, self._fingerprint, key, report)
        return report
