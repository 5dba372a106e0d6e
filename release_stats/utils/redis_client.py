import redis
import json
import logging
from typing import Dict, Any, Optional
from release_stats.config import REDIS_HOST, REDIS_PORT, REPORT_CACHE_TTL

logger = logging.getLogger(__name__)


class RedisManager:
    """Manages Redis operations for caching dashboard reports."""

    def __init__(
        self,
        host: str = REDIS_HOST,
        port: int = REDIS_PORT,
        ttl: int = REPORT_CACHE_TTL,
        client: Optional[redis.Redis] = None,
    ):
        self.redis_client = client or redis.Redis(
            host=host,
            port=port,
            decode_responses=True,
            socket_connect_timeout=5
        )
        self.ttl = ttl
        self.cache_prefix = "release_stats:report:"

    def _key(self, version: str, fingerprint: str, repository: str) -> str:
        return f"{self.cache_prefix}{version}:{fingerprint}:{repository}"

    def get_report(self, version: str, fingerprint: str, repository: str) -> Optional[Dict[str, Any]]:
        """Get a cached report for a record set and repository filter."""
        try:
            data = self.redis_client.get(self._key(version, fingerprint, repository))
            if data:
                return json.loads(data)
        except Exception as e:
            logger.error(f"Failed to get cached report: {e}")
        return None

    def cache_report(self, version: str, fingerprint: str, repository: str, report: Dict[str, Any]):
        """Cache a report for a record set and repository filter."""
        try:
            self.redis_client.set(
                self._key(version, fingerprint, repository),
                json.dumps(report, ensure_ascii=False),
                ex=self.ttl
            )
        except Exception as e:
            logger.error(f"Failed to cache report: {e}")

    def invalidate_reports(self) -> int:
        """Delete every cached report. Returns the number of keys removed."""
        try:
            keys = list(self.redis_client.scan_iter(match=f"{self.cache_prefix}*"))
            if keys:
                return self.redis_client.delete(*keys)
        except Exception as e:
            logger.error(f"Failed to invalidate cached reports: {e}")
        return 0
