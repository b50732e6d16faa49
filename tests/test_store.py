"""Tests for the day-file memo store."""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

import pytest

from jinfo.config import DEFAULT_MEMO_TYPES
from jinfo.memo.models import FileSearchOptions
from jinfo.memo.store import DailyMemoStore


def _day(offset: int = 0) -> str:
    return (date.today() - timedelta(days=offset)).isoformat()


@pytest.fixture
def store(tmp_path: Path) -> DailyMemoStore:
    return DailyMemoStore(tmp_path / "project")


def write_day(store: DailyMemoStore, day: str, *lines: str) -> Path:
    store.base_path.mkdir(parents=True, exist_ok=True)
    path = store.base_path / f"{day}.md"
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


class TestAddMemo:
    def test_creates_directory_and_today_file(self, store: DailyMemoStore):
        assert not store.base_path.exists()
        line = store.add_memo("Test memo")
        path = store.base_path / f"{_day()}.md"
        assert path.exists()
        assert path.read_text(encoding="utf-8") == line + "\n"
        assert line.endswith("] Test memo")

    def test_specified_date(self, store: DailyMemoStore):
        store.add_memo("Old memo", date="2024-01-15")
        assert (store.base_path / "2024-01-15.md").exists()

    def test_appends(self, store: DailyMemoStore):
        store.add_memo("first", date="2024-01-15")
        store.add_memo("second", date="2024-01-15")
        lines = (store.base_path / "2024-01-15.md").read_text(encoding="utf-8").splitlines()
        assert [l.split("] ", 1)[1] for l in lines] == ["first", "second"]

    def test_keeps_duplicate_tags_verbatim(self, store: DailyMemoStore):
        store.add_memo("a #foo b #bar #foo", date="2024-01-15")
        [entry] = store.read_memos("2024-01-15")
        assert entry.content == "a #foo b #bar #foo"
        assert entry.tags == ["#foo", "#bar", "#foo"]

    def test_semantic_memo(self, store: DailyMemoStore):
        task = DEFAULT_MEMO_TYPES[1]
        line = store.add_memo("write tests", date="2024-01-15", memo_type=task)
        assert "] task(Task): write tests" in line
        [entry] = store.read_memos("2024-01-15")
        assert entry.type == "task"
        assert entry.content == "write tests"
        assert entry.render().endswith("] ✅ task(Task): write tests")

    def test_plain_memo_renders_as_stored(self, store: DailyMemoStore):
        line = store.add_memo("just text", date="2024-01-15")
        [entry] = store.read_memos("2024-01-15")
        assert entry.render() == line

    def test_multiline_content_stays_one_entry(self, store: DailyMemoStore):
        store.add_memo("first line\nsecond line", date="2024-01-15")
        [entry] = store.read_memos("2024-01-15")
        assert entry.content == "first line second line"

    def test_write_failure_is_raised(self, tmp_path: Path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x", encoding="utf-8")
        store = DailyMemoStore(blocker)
        with pytest.raises(OSError):
            store.add_memo("will fail")


class TestReadMemos:
    def test_missing_day_is_empty(self, store: DailyMemoStore):
        assert store.read_memos("2000-01-01") == []

    def test_skips_malformed_and_blank_lines(self, store: DailyMemoStore):
        write_day(
            store,
            "2024-01-15",
            "[2024-01-15 09:00:00] first #a",
            "",
            "garbage without a timestamp",
            "   ",
            "[2024-01-15 10:00:00] second",
        )
        entries = store.read_memos("2024-01-15")
        assert len(entries) == 2
        assert [e.content for e in entries] == ["first #a", "second"]
        assert entries[0].timestamp == "2024-01-15 09:00:00"
        assert entries[0].tags == ["#a"]
        assert entries[0].date == "2024-01-15"

    def test_file_order_is_kept(self, store: DailyMemoStore):
        write_day(store, "2024-01-15", "[2024-01-15 12:00:00] later", "[2024-01-15 08:00:00] earlier")
        entries = store.read_memos("2024-01-15")
        assert [e.content for e in entries] == ["later", "earlier"]

    def test_defaults_to_today(self, store: DailyMemoStore):
        store.add_memo("today")
        assert [e.content for e in store.read_memos()] == ["today"]

    def test_unreadable_file_returns_empty(self, store: DailyMemoStore):
        store.base_path.mkdir(parents=True)
        (store.base_path / "2024-01-15.md").write_bytes(b"\xff\xfe\x00bad")
        assert store.read_memos("2024-01-15") == []


class TestReadRecentMemos:
    def test_skips_empty_day_and_sorts_desc(self, store: DailyMemoStore):
        today, two_days_ago = _day(0), _day(2)
        write_day(store, today, f"[{today} 08:00:00] today memo")
        write_day(store, two_days_ago, f"[{two_days_ago} 20:00:00] older memo")

        entries = store.read_recent_memos(3)
        assert [e.content for e in entries] == ["today memo", "older memo"]

    def test_window_excludes_older_days(self, store: DailyMemoStore):
        old = _day(5)
        write_day(store, old, f"[{old} 08:00:00] too old")
        assert store.read_recent_memos(3) == []
        assert len(store.read_recent_memos(6)) == 1

    def test_sorts_within_and_across_days(self, store: DailyMemoStore):
        today, yesterday = _day(0), _day(1)
        write_day(store, today, f"[{today} 08:00:00] a", f"[{today} 18:00:00] b")
        write_day(store, yesterday, f"[{yesterday} 23:59:59] c")
        assert [e.content for e in store.read_recent_memos()] == ["b", "a", "c"]

    def test_unreadable_day_is_skipped(self, store: DailyMemoStore):
        today, yesterday, two_days_ago = _day(0), _day(1), _day(2)
        write_day(store, today, f"[{today} 08:00:00] today memo")
        (store.base_path / f"{yesterday}.md").write_bytes(b"\xff\xfe\x00bad")
        write_day(store, two_days_ago, f"[{two_days_ago} 20:00:00] older memo")

        entries = store.read_recent_memos(3)
        assert [e.content for e in entries] == ["today memo", "older memo"]

    def test_no_directory(self, store: DailyMemoStore):
        assert store.read_recent_memos() == []


class TestSearchMemos:
    @pytest.fixture
    def populated(self, store: DailyMemoStore) -> DailyMemoStore:
        write_day(store, "2024-01-10", "[2024-01-10 09:00:00] Meeting with team #work")
        write_day(store, "2024-01-15", "[2024-01-15 09:00:00] lunch #personal",
                  "[2024-01-15 11:00:00] meeting notes #work #urgent")
        write_day(store, "2024-01-20", "[2024-01-20 09:00:00] MEETING recap")
        return store

    def test_case_insensitive(self, populated: DailyMemoStore):
        results = populated.search_memos("meeting")
        assert [e.date for e in results] == ["2024-01-20", "2024-01-15", "2024-01-10"]

    def test_tag_filter(self, populated: DailyMemoStore):
        results = populated.search_memos("meeting", FileSearchOptions(tag="work"))
        assert [e.timestamp for e in results] == ["2024-01-15 11:00:00", "2024-01-10 09:00:00"]

    def test_date_bounds_inclusive(self, populated: DailyMemoStore):
        results = populated.search_memos(
            "meeting", FileSearchOptions(from_date="2024-01-15", to_date="2024-01-20")
        )
        assert [e.date for e in results] == ["2024-01-20", "2024-01-15"]

    def test_empty_query_matches_all(self, populated: DailyMemoStore):
        assert len(populated.search_memos("")) == 4

    def test_missing_directory(self, store: DailyMemoStore):
        assert store.search_memos("anything") == []

    def test_list_dates(self, populated: DailyMemoStore):
        assert populated.list_dates() == ["2024-01-10", "2024-01-15", "2024-01-20"]
