from unittest.mock import MagicMock, patch

import pytest
import requests

from release_stats.crawler import fetcher
from release_stats.crawler.manager import collect_releases, split_full_name
from release_stats.utils.token_rotator import GitHubTokenRotator


def make_response(status_code=200, data=None, links=None, headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data if data is not None else []
    response.links = links or {}
    response.headers = headers or {}
    response.text = ""
    return response


@pytest.fixture
def no_sleep():
    with patch("release_stats.crawler.fetcher.time.sleep") as sleep:
        yield sleep

# ============================================================================
# TOKEN ROTATION
# ============================================================================


def test_token_rotator_round_robin():
    rotator = GitHubTokenRotator(["a", "b"])
    tokens = [rotator.get_headers()["Authorization"] for _ in range(3)]
    assert tokens == ["token a", "token b", "token a"]
    assert rotator.token_stats["a"]["requests"] == 2


def test_token_rotator_without_tokens():
    rotator = GitHubTokenRotator([])
    headers = rotator.get_headers()
    assert "Authorization" not in headers
    assert headers["Accept"] == "application/vnd.github.v3+json"


def test_token_rotator_mark_error():
    rotator = GitHubTokenRotator(["a"])
    rotator.mark_error(rotator.get_headers())
    assert rotator.token_stats["a"]["errors"] == 1

# ============================================================================
# RETRY
# ============================================================================


def test_fetch_with_retry_success(no_sleep):
    ok = make_response(data=[{"id": 1}])
    with patch("release_stats.crawler.fetcher.requests.get", return_value=ok) as get:
        assert fetcher.fetch_with_retry("https://api.github.com/x") is ok
    assert get.call_count == 1
    no_sleep.assert_not_called()


def test_fetch_with_retry_waits_for_rate_limit_reset(no_sleep):
    limited = make_response(403, headers={"Retry-After": "7"})
    ok = make_response(data=[])
    with patch("release_stats.crawler.fetcher.requests.get", side_effect=[limited, ok]):
        assert fetcher.fetch_with_retry("https://api.github.com/x") is ok
    no_sleep.assert_called_once_with(7.0)


def test_fetch_with_retry_server_errors_exhaust(no_sleep):
    broken = make_response(502)
    with patch("release_stats.crawler.fetcher.requests.get", return_value=broken) as get:
        assert fetcher.fetch_with_retry("https://api.github.com/x", max_retries=2) is None
    assert get.call_count == 3


def test_fetch_with_retry_network_error_then_success(no_sleep):
    ok = make_response()
    side_effect = [requests.exceptions.ConnectionError("boom"), ok]
    with patch("release_stats.crawler.fetcher.requests.get", side_effect=side_effect):
        assert fetcher.fetch_with_retry("https://api.github.com/x") is ok
    assert no_sleep.call_count == 1


def test_fetch_with_retry_not_found(no_sleep):
    with patch("release_stats.crawler.fetcher.requests.get", return_value=make_response(404)) as get:
        assert fetcher.fetch_with_retry("https://api.github.com/x") is None
    assert get.call_count == 1

# ============================================================================
# PAGINATION
# ============================================================================


def test_fetch_releases_follows_next_links(no_sleep):
    next_url = "https://api.github.com/repositories/1/releases?per_page=2&page=2"
    pages = [
        make_response(data=[{"id": 1}, {"id": 2}], links={"next": {"url": next_url}}),
        make_response(data=[{"id": 3}]),
    ]
    with patch("release_stats.crawler.fetcher.requests.get", side_effect=pages) as get:
        releases = fetcher.fetch_releases("octo", "repo", per_page=2)

    assert [r["id"] for r in releases] == [1, 2, 3]
    first, second = get.call_args_list
    assert first.args[0] == "https://api.github.com/repos/octo/repo/releases"
    assert first.kwargs["params"] == {"per_page": 2, "page": 1}
    assert second.args[0] == next_url
    assert second.kwargs["params"] is None


def test_fetch_releases_keeps_partial_results(no_sleep):
    pages = [
        make_response(data=[{"id": 1}], links={"next": {"url": "https://api.github.com/next"}}),
        make_response(404),
    ]
    with patch("release_stats.crawler.fetcher.requests.get", side_effect=pages):
        releases = fetcher.fetch_releases("octo", "repo")
    assert [r["id"] for r in releases] == [1]


def test_fetch_releases_stops_on_invalid_json(no_sleep):
    garbled = make_response(links={"next": {"url": "https://api.github.com/next2"}})
    garbled.json.side_effect = ValueError("Expecting value")
    pages = [
        make_response(data=[{"id": 1}], links={"next": {"url": "https://api.github.com/next"}}),
        garbled,
    ]
    with patch("release_stats.crawler.fetcher.requests.get", side_effect=pages) as get:
        releases = fetcher.fetch_releases("octo", "repo")

    assert [r["id"] for r in releases] == [1]
    assert get.call_count == 2

# ============================================================================
# COLLECTION
# ============================================================================


def test_split_full_name():
    assert split_full_name("octo/repo") == ("octo", "repo")
    with pytest.raises(ValueError):
        split_full_name("octo")
    with pytest.raises(ValueError):
        split_full_name("octo/repo/extra")


def test_collect_releases_normalizes(payload_factory):
    raws = [payload_factory(release_id=1), payload_factory(release_id=2, published_at=None, created_at=None)]
    with patch("release_stats.crawler.manager.fetch_releases", return_value=raws) as fetch:
        collected = collect_releases(["octo/repo"])

    fetch.assert_called_once_with("octo", "repo")
    assert [r.release_id for r in collected["octo/repo"]] == [1]
    assert collected["octo/repo"][0].repository == "octo/repo"


def test_collect_releases_skips_malformed_names(payload_factory, caplog):
    with patch("release_stats.crawler.manager.fetch_releases", return_value=[payload_factory(release_id=1)]) as fetch:
        collected = collect_releases(["octo/repo", "not-a-repo", "octo/other"])

    assert list(collected) == ["octo/repo", "octo/other"]
    assert fetch.call_count == 2
    assert "not-a-repo" in caplog.text
