from prometheus_client import Counter, Histogram, start_http_server
import logging

logger = logging.getLogger(__name__)

# Define metrics
REQUEST_COUNT = Counter(
    "release_stats_requests_total", "Total HTTP requests sent to GitHub API"
)
RETRY_COUNT = Counter(
    "release_stats_retries_total",
    "Total number of retries due to rate limits or errors",
)
RELEASES_FETCHED = Counter(
    "release_stats_releases_fetched_total", "Total release payloads fetched from GitHub"
)
RECORDS_NORMALIZED = Counter(
    "release_stats_records_normalized_total", "Total releases normalized into records"
)
RECORDS_REJECTED = Counter(
    "release_stats_records_rejected_total",
    "Total releases rejected because of an unusable timestamp",
)
REPORT_BUILD_TIME = Histogram(
    "release_stats_report_seconds", "Time taken to build a release report"
)


def start_metrics_server(port=8000):
    """Start the Prometheus metrics server."""
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
        print(f"📊 Metrics server started on port {port}")
    except Exception as e:
        logger.error(f"Failed to start metrics server: {e}")
