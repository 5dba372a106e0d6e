from release_stats.stats.cadence import (
    author_cadence,
    day_gap,
    round_half_up,
    top_authors,
    upgrade_pattern,
)
from release_stats.stats.models import CadenceEntry


def test_round_half_up():
    assert round_half_up(6.5) == 7
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(0) == 0


def test_day_gap_truncates(record_factory):
    a = record_factory("2024-05-01T01:00:00Z")
    b = record_factory("2024-05-03T00:59:00Z")
    assert day_gap(a, b) == 1

# ============================================================================
# BY AUTHOR
# ============================================================================


def test_author_cadence_average(record_factory):
    # Tue 05-07, Fri 05-17, Mon 05-20 (days 0, 10, 13), passed out of order
    records = [
        record_factory("2024-05-17T01:00:00Z", login="alice", release_id=2),
        record_factory("2024-05-07T01:00:00Z", login="alice", release_id=1),
        record_factory("2024-05-20T01:00:00Z", login="alice", release_id=3),
    ]
    assert author_cadence(records) == [CadenceEntry("alice", 3, 7)]


def test_single_release_author_has_zero_cadence(record_factory):
    records = [
        record_factory("2024-05-07T01:00:00Z", login="alice"),
        record_factory("2024-05-08T01:00:00Z", login="bob"),
        record_factory("2024-05-17T01:00:00Z", login="bob"),
    ]
    entries = {e.key: e for e in author_cadence(records)}
    assert entries["alice"] == CadenceEntry("alice", 1, 0)
    assert entries["bob"] == CadenceEntry("bob", 2, 9)


def test_author_cadence_ignores_weekend(record_factory):
    records = [
        record_factory("2024-05-07T01:00:00Z", login="alice"),
        record_factory("2024-05-11T01:00:00Z", login="alice"),  # Saturday
        record_factory("2024-05-14T01:00:00Z", login="alice"),
    ]
    assert author_cadence(records) == [CadenceEntry("alice", 2, 7)]

# ============================================================================
# BY PRECEDING VERSION TYPE
# ============================================================================


def test_upgrade_pattern_attributes_gap_to_previous_type(record_factory):
    # Wed 05-01, Mon 05-06, Thu 05-09 (days 0, 5, 8)
    records = [
        record_factory("2024-05-01T01:00:00Z", tag_name="v1.0.0"),
        record_factory("2024-05-06T01:00:00Z", tag_name="v0.1.0"),
        record_factory("2024-05-09T01:00:00Z", tag_name="v0.0.1"),
    ]
    entries = {e.key: e for e in upgrade_pattern(records)}

    assert entries["Major"] == CadenceEntry("Major", 1, 5)
    assert entries["Minor"] == CadenceEntry("Minor", 1, 3)
    # the last release starts no gap
    assert "Patch" not in entries


def test_upgrade_pattern_same_type_accumulates(record_factory):
    records = [
        record_factory("2024-05-01T01:00:00Z", tag_name="v1.0.0"),
        record_factory("2024-05-06T01:00:00Z", tag_name="v1.1.0"),
        record_factory("2024-05-09T01:00:00Z", tag_name="v1.1.1"),
    ]
    assert upgrade_pattern(records) == [CadenceEntry("Major", 2, 4)]


def test_upgrade_pattern_ordering(record_factory):
    records = [
        record_factory("2024-05-01T01:00:00Z", tag_name="nightly"),
        record_factory("2024-05-02T01:00:00Z", tag_name="v0.0.1"),
        record_factory("2024-05-03T01:00:00Z", tag_name="nightly"),
        record_factory("2024-05-06T01:00:00Z", tag_name="v1.0.0"),
    ]
    assert [e.key for e in upgrade_pattern(records)] == ["Other", "Patch"]


def test_upgrade_pattern_empty_and_single(record_factory):
    assert upgrade_pattern([]) == []
    assert upgrade_pattern([record_factory()]) == []

# ============================================================================
# TOP-N
# ============================================================================


def test_top_authors_ranking():
    entries = [
        CadenceEntry("zoe", 3, 1),
        CadenceEntry("bob", 5, 2),
        CadenceEntry("amy", 3, 4),
        CadenceEntry("cal", 1, 0),
        CadenceEntry("dan", 2, 0),
        CadenceEntry("eve", 1, 0),
    ]
    top = top_authors(entries)
    assert [e.key for e in top] == ["bob", "amy", "zoe", "dan", "cal"]
    assert [e.key for e in top_authors(entries, limit=2)] == ["bob", "amy"]
