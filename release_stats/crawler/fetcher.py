import requests
import time
import random
import logging
from typing import List, Dict, Any, Optional
from release_stats.config import (
    GITHUB_API_URL,
    GITHUB_TOKENS,
    REQUEST_TIMEOUT,
    MAX_RETRIES,
    BASE_RETRY_DELAY,
    MAX_RETRY_DELAY,
    MAX_RATE_LIMIT_WAIT,
    PER_PAGE,
)
from release_stats.schemas.github import GitHubRelease
from release_stats.utils.token_rotator import GitHubTokenRotator
from release_stats.utils.metrics import REQUEST_COUNT, RETRY_COUNT, RELEASES_FETCHED

logger = logging.getLogger(__name__)

# Global token rotator
token_rotator = GitHubTokenRotator(GITHUB_TOKENS)


def _backoff_delay(attempt: int) -> float:
    """Exponential backoff + jitter for the given (1-based) attempt."""
    delay = min(MAX_RETRY_DELAY, BASE_RETRY_DELAY * (2 ** (attempt - 1)))
    return delay + random.uniform(0, 0.1 * delay)


def _rate_limit_wait(response: requests.Response) -> Optional[float]:
    """Seconds to wait before retrying a rate-limited response, if known."""
    retry_after = response.headers.get("Retry-After")
    if retry_after and retry_after.isdigit():
        return min(float(retry_after), MAX_RATE_LIMIT_WAIT)

    reset_time = response.headers.get("X-RateLimit-Reset")
    if reset_time and reset_time.isdigit():
        wait_time = int(reset_time) - time.time() + 1
        return min(max(wait_time, 0), MAX_RATE_LIMIT_WAIT)
    return None


def fetch_with_retry(
    url: str, params: Optional[Dict[str, Any]] = None, max_retries: int = MAX_RETRIES
) -> Optional[requests.Response]:
    """
    GET a GitHub API URL with retry logic and token rotation.

    Rate limits (403/429) wait for the reset time when GitHub sends one and
    back off exponentially otherwise. Server and network errors back off
    exponentially. 404/422 and other client errors are not retried.

    Returns the successful response, or None once retries are exhausted.
    """
    attempt = 0
    while attempt <= max_retries:
        headers = token_rotator.get_headers()
        REQUEST_COUNT.inc()

        try:
            response = requests.get(url, headers=headers, params=params, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            attempt += 1
            RETRY_COUNT.inc()
            logger.error(f"Request failed on attempt {attempt}: {e}")
            if attempt <= max_retries:
                time.sleep(_backoff_delay(attempt))
            continue

        if response.status_code == 200:
            return response

        if response.status_code in (403, 429):
            attempt += 1
            RETRY_COUNT.inc()
            token_rotator.mark_error(headers)
            wait_time = _rate_limit_wait(response)
            if wait_time is None:
                wait_time = _backoff_delay(attempt)
                logger.warning(f"Rate limit hit (no reset header) on attempt {attempt}")
            else:
                logger.warning(f"Rate limit hit. Waiting {wait_time:.2f}s until reset.")
            if attempt <= max_retries:
                time.sleep(wait_time)
            continue

        if response.status_code in (404, 422):
            logger.info(f"Resource not available ({response.status_code}): {url}")
            return None

        if 500 <= response.status_code < 600:
            attempt += 1
            RETRY_COUNT.inc()
            logger.warning(f"Server error {response.status_code} for {url} (attempt {attempt})")
            if attempt <= max_retries:
                time.sleep(_backoff_delay(attempt))
            continue

        logger.error(f"Error {response.status_code} for {url}: {response.text[:200]}")
        return None

    logger.error(f"Max retries exceeded for {url}")
    return None


def fetch_releases(owner: str, repo_name: str, per_page: int = PER_PAGE) -> List[GitHubRelease]:
    """
    Fetch every release of a repository, following Link rel="next" pages.

    If a page cannot be fetched the releases collected so far are returned.
    """
    url = f"{GITHUB_API_URL}/repos/{owner}/{repo_name}/releases"
    params: Optional[Dict[str, Any]] = {"per_page": per_page, "page": 1}
    releases: List[GitHubRelease] = []
    page = 1

    while True:
        logger.info(f"Fetching releases for {owner}/{repo_name} (page {page})...")
        response = fetch_with_retry(url, params=params)
        if response is None:
            logger.warning(
                f"Stopped fetching {owner}/{repo_name} at page {page}; "
                f"keeping {len(releases)} releases collected so far"
            )
            break

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(
                f"Invalid JSON for {owner}/{repo_name} page {page}: {e}; "
                f"keeping {len(releases)} releases collected so far"
            )
            break
        if not isinstance(data, list) or not data:
            break

        releases.extend(data)
        RELEASES_FETCHED.inc(len(data))

        next_link = response.links.get("next", {}).get("url")
        if not next_link:
            break
        # The next link already carries per_page/page in its query string
        url, params = next_link, None
        page += 1

    logger.info(f"Finished fetching releases for {owner}/{repo_name}. Total: {len(releases)}")
    return releases
