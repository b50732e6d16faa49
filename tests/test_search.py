"""Tests for the shared filter helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from jinfo.memo.models import Memo, MemoEntry
from jinfo.memo.search import (
    count_tags,
    in_date_range,
    in_file_date_range,
    sort_by_timestamp_desc,
    top_tags,
)


def memo(timestamp: str, tags: list[str] | None = None) -> Memo:
    return Memo(id=timestamp, content="", tags=tags or [], timestamp=timestamp)


class TestFileDateRange:
    def test_unbounded(self):
        assert in_file_date_range("2024-01-15", None, None)

    def test_inclusive(self):
        assert in_file_date_range("2024-01-15", "2024-01-15", "2024-01-15")
        assert not in_file_date_range("2024-01-14", "2024-01-15", None)
        assert not in_file_date_range("2024-01-16", None, "2024-01-15")


class TestDateRange:
    def test_date_only_bounds_cover_whole_day(self):
        assert in_date_range(memo("2024-01-15T23:59:59"), "2024-01-15", "2024-01-15")
        assert in_date_range(memo("2024-01-15T00:00:00"), "2024-01-15", None)
        assert not in_date_range(memo("2024-01-14T23:59:59"), "2024-01-15", None)

    def test_instant_bounds(self):
        m = memo("2024-01-15T12:00:00")
        assert in_date_range(m, "2024-01-15T12:00:00", "2024-01-15T12:00:00")
        assert not in_date_range(m, "2024-01-15T12:00:01", None)
        assert not in_date_range(m, None, "2024-01-15T11:59:59")

    def test_utc_timestamps(self):
        stamp = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
        m = memo(stamp.isoformat().replace("+00:00", "Z"))
        assert in_date_range(m, "2024-01-15T11:00:00Z", "2024-01-15T13:00:00Z")
        assert not in_date_range(m, "2024-01-15T12:30:00Z", None)

    def test_unparseable_timestamp_is_excluded(self):
        assert not in_date_range(memo(""), "2024-01-01", None)
        assert in_date_range(memo(""), None, None)


class TestSorting:
    def test_desc_by_timestamp_text(self):
        entries = [
            MemoEntry("2024-01-15 09:00:00", "a", [], "2024-01-15"),
            MemoEntry("2024-01-16 08:00:00", "b", [], "2024-01-16"),
            MemoEntry("2024-01-15 10:00:00", "c", [], "2024-01-15"),
        ]
        assert [e.content for e in sort_by_timestamp_desc(entries)] == ["b", "c", "a"]


class TestTagCounts:
    def test_counts_each_occurrence(self):
        counts = count_tags([memo("1", ["#a", "#b"]), memo("2", ["#a"])])
        assert counts == {"#a": 2, "#b": 1}

    def test_top_tags(self):
        counts = count_tags([memo("1", ["#a"]), memo("2", ["#b", "#b"])])
        assert [(t.tag, t.count) for t in top_tags(counts)] == [("#b", 2), ("#a", 1)]
