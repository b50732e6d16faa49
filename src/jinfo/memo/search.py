"""Filtering, sorting and tag statistics shared by both memo stores."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from typing import Iterable, Protocol, TypeVar

from jinfo.memo.models import Memo, MemoSearchOptions, TagCount

TOP_TAGS_LIMIT = 10


class _Searchable(Protocol):
    timestamp: str
    content: str
    tags: list[str]


T = TypeVar("T", bound=_Searchable)


def matches_keyword(item: _Searchable, keyword: str) -> bool:
    """Case-insensitive substring match on content."""
    return keyword.lower() in item.content.lower()


def has_tag(item: _Searchable, tag: str) -> bool:
    return tag in item.tags


def has_all_tags(item: _Searchable, tags: Iterable[str]) -> bool:
    return all(tag in item.tags for tag in tags)


def sort_by_timestamp_desc(items: Iterable[T]) -> list[T]:
    """Newest first. The fixed-width timestamp sorts chronologically as text."""
    return sorted(items, key=lambda item: item.timestamp, reverse=True)


def in_file_date_range(day: str, from_date: str | None, to_date: str | None) -> bool:
    """Inclusive bounds compared as ``YYYY-MM-DD`` strings."""
    if from_date and day < from_date:
        return False
    if to_date and day > to_date:
        return False
    return True


def _parse_instant(value: str) -> datetime:
    # fromisoformat only accepts a trailing "Z" from 3.11 onward
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _is_date_only(value: str) -> bool:
    return len(value) == 10 and "T" not in value and " " not in value


def _local(dt: datetime) -> datetime:
    """Convert aware datetimes to naive local time."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def in_date_range(memo: Memo, from_date: str | None, to_date: str | None) -> bool:
    """Inclusive date-range check on a memo's creation timestamp.

    A date-only bound covers the whole calendar day (local time); a bound
    with a time component is compared as an instant.
    """
    if not from_date and not to_date:
        return True
    try:
        stamp = _local(_parse_instant(memo.timestamp))
    except ValueError:
        # Unparseable timestamps never fall inside a range
        return False

    if from_date:
        if _is_date_only(from_date):
            if stamp.date() < date.fromisoformat(from_date):
                return False
        elif stamp < _local(_parse_instant(from_date)):
            return False

    if to_date:
        if _is_date_only(to_date):
            if stamp.date() > date.fromisoformat(to_date):
                return False
        elif stamp > _local(_parse_instant(to_date)):
            return False

    return True


def filter_memos(memos: Iterable[Memo], options: MemoSearchOptions) -> list[Memo]:
    """Apply every set field of ``options``; unset fields do not filter."""
    result = list(memos)
    if options.keyword:
        result = [m for m in result if matches_keyword(m, options.keyword)]
    if options.tag:
        result = [m for m in result if has_tag(m, options.tag)]
    if options.tags:
        result = [m for m in result if has_all_tags(m, options.tags)]
    if options.from_date or options.to_date:
        result = [m for m in result if in_date_range(m, options.from_date, options.to_date)]
    return result


def count_tags(items: Iterable[_Searchable]) -> Counter[str]:
    """Tag usage counts, keyed in order of first appearance."""
    counts: Counter[str] = Counter()
    for item in items:
        counts.update(item.tags)
    return counts


def top_tags(counts: Counter[str], limit: int = TOP_TAGS_LIMIT) -> list[TagCount]:
    """Most used tags, count descending; equal counts keep first-appearance order."""
    return [TagCount(tag=tag, count=n) for tag, n in counts.most_common(limit)]
