import pytest

from release_stats.stats.normalizer import build_record


def release_payload(
    release_id=1,
    tag_name="v1.0.0",
    published_at="2024-05-01T01:00:00Z",
    login="alice",
    author_id=100,
    **extra,
):
    """GitHub API shaped release payload."""
    payload = {
        "id": release_id,
        "tag_name": tag_name,
        "name": f"Release {tag_name}",
        "created_at": published_at,
        "published_at": published_at,
        "prerelease": False,
        "draft": False,
        "author": {"login": login, "id": author_id},
        "body": "Changelog",
        "assets": [],
        "html_url": f"https://github.com/octo/repo/releases/tag/{tag_name}",
    }
    payload.update(extra)
    return payload


def make_record(
    published_at="2024-05-01T01:00:00Z",
    tag_name="v1.0.0",
    login="alice",
    repository="octo/repo",
    release_id=1,
    **extra,
):
    return build_record(
        repository=repository,
        release_id=release_id,
        tag_name=tag_name,
        published_at=published_at,
        author_login=login,
        author_id=100,
        **extra,
    )


@pytest.fixture
def payload_factory():
    return release_payload


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def sample_records():
    """
    Six releases of two repositories (local time = UTC+9).

    2024-05-01 Wed 10:00  octo/repo   v1.0.0   alice
    2024-05-06 Mon 08:30  octo/repo   v0.1.0   bob    (prerelease)
    2024-05-09 Thu 18:00  octo/repo   v0.0.1   alice
    2024-05-11 Sat 05:00  octo/repo   v2.0.0   alice  (weekend, Fri 20:00 UTC)
    2024-06-03 Mon 09:15  octo/repo   nightly  carol  (draft)
    2024-06-04 Tue 14:00  octo/other  @octo/ui@1.2.3  dave
    """
    return [
        make_record("2024-05-01T01:00:00Z", "v1.0.0", "alice", release_id=1),
        make_record("2024-05-05T23:30:00Z", "v0.1.0", "bob", release_id=2, prerelease=True),
        make_record("2024-05-09T09:00:00Z", "v0.0.1", "alice", release_id=3),
        make_record("2024-05-10T20:00:00Z", "v2.0.0", "alice", release_id=4),
        make_record("2024-06-03T00:15:00Z", "nightly", "carol", release_id=5, draft=True),
        make_record("2024-06-04T05:00:00Z", "@octo/ui@1.2.3", "dave",
                    repository="octo/other", release_id=6),
    ]
