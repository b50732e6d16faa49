"""File-backed memo store: one append-only markdown file per day.

Writes fail loud (logged, then re-raised). Reads fail quiet: any read error is
logged and the affected day contributes nothing.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable

from jinfo.config import MemoType
from jinfo.memo.formatter import DATE_FORMAT, extract_tags, format_memo, parse_memo_line
from jinfo.memo.models import FileSearchOptions, MemoEntry
from jinfo.memo.search import in_file_date_range, matches_keyword, sort_by_timestamp_desc

logger = logging.getLogger(__name__)

DAY_FILE_SUFFIX = ".md"


def _today() -> str:
    return date.today().strftime(DATE_FORMAT)


class DailyMemoStore:
    """Append and read memos under a project's base directory."""

    def __init__(self, base_path: Path, memo_types: Iterable[MemoType] | None = None) -> None:
        self.base_path = Path(base_path)
        self.memo_types = list(memo_types) if memo_types is not None else None

    # ── Paths ─────────────────────────────────────────────────

    def _day_path(self, day: str | None = None) -> Path:
        return self.base_path / f"{day or _today()}{DAY_FILE_SUFFIX}"

    def list_dates(self) -> list[str]:
        """Dates that have a day-file, oldest first."""
        if not self.base_path.is_dir():
            return []
        return sorted(p.stem for p in self.base_path.glob(f"*{DAY_FILE_SUFFIX}") if p.is_file())

    # ── Write ─────────────────────────────────────────────────

    def add_memo(
        self,
        content: str,
        date: str | None = None,
        memo_type: MemoType | None = None,
    ) -> str:
        """Append one formatted line to the day-file. Returns the line written."""
        path = self._day_path(date)
        line = format_memo(content, memo_type)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error("Failed to add memo to %s: %s", path, e)
            raise
        logger.info("Added memo to %s", path.name)
        return line

    # ── Read ──────────────────────────────────────────────────

    def _parse_day(self, text: str, day: str) -> list[MemoEntry]:
        entries: list[MemoEntry] = []
        for line in text.splitlines():
            if not line.strip():
                continue
            parsed = parse_memo_line(line, self.memo_types)
            if not parsed.timestamp or not parsed.content:
                logger.debug("Skipping malformed line in %s: %r", day, line)
                continue
            entries.append(
                MemoEntry(
                    timestamp=parsed.timestamp,
                    content=parsed.content,
                    tags=extract_tags(parsed.content),
                    date=day,
                    type=parsed.type,
                    label=parsed.label,
                    emoji=parsed.emoji,
                )
            )
        return entries

    def read_memos(self, date: str | None = None) -> list[MemoEntry]:
        """Entries of one day in file order. A missing day is empty, not an error."""
        day = date or _today()
        path = self._day_path(day)
        if not path.exists():
            return []
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read memos from %s: %s", path, e)
            return []
        return self._parse_day(text, day)

    def read_recent_memos(self, days: int = 7) -> list[MemoEntry]:
        """Entries from the last ``days`` calendar days (today included), newest first."""
        today = date.today()
        entries: list[MemoEntry] = []
        for offset in range(days):
            day = (today - timedelta(days=offset)).strftime(DATE_FORMAT)
            entries.extend(self.read_memos(day))
        return sort_by_timestamp_desc(entries)

    def search_memos(
        self, query: str, options: FileSearchOptions | None = None
    ) -> list[MemoEntry]:
        """Case-insensitive content search across day-files, newest first."""
        options = options or FileSearchOptions()
        try:
            days = self.list_dates()
        except OSError as e:
            logger.error("Failed to list memo files in %s: %s", self.base_path, e)
            return []

        entries: list[MemoEntry] = []
        for day in days:
            if not in_file_date_range(day, options.from_date, options.to_date):
                continue
            entries.extend(self.read_memos(day))

        wanted_tag = f"#{options.tag}" if options.tag else None
        matched = [
            e
            for e in entries
            if matches_keyword(e, query) and (wanted_tag is None or wanted_tag in e.tags)
        ]
        return sort_by_timestamp_desc(matched)
