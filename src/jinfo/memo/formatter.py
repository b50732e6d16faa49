"""Memo line formatting, parsing and tag extraction.

Stored line formats::

    [2024-01-15 14:30:45] content #tag
    [2024-01-15 14:30:45] task(Task): content #tag
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from jinfo.config import DEFAULT_MEMO_TYPES, MemoType

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

# Day-log tags: ASCII word chars, Hiragana, Katakana, CJK ideographs
_TAG_RE = re.compile(r"#[A-Za-z0-9_\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]+")
# Collection tags additionally accept CJK Extension A
_UNIQUE_TAG_RE = re.compile(
    r"#[A-Za-z0-9_\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF\u3400-\u4DBF]+"
)

_SEMANTIC_LINE_RE = re.compile(r"^\[([^\]]+)\]\s*(\w+)\((.+?)\):\s*(.*)$")
_PLAIN_LINE_RE = re.compile(r"^\[([^\]]+)\]\s*(.*)$")


@dataclass
class ParsedLine:
    timestamp: str
    content: str
    type: str | None = None
    label: str | None = None
    emoji: str | None = None


def extract_tags(content: str) -> list[str]:
    """Return every tag token in order of appearance, duplicates included."""
    return _TAG_RE.findall(content)


def extract_unique_tags(content: str) -> list[str]:
    """Return tag tokens in first-appearance order with duplicates removed."""
    return list(dict.fromkeys(_UNIQUE_TAG_RE.findall(content)))


def get_timestamp(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def format_memo(
    content: str,
    memo_type: MemoType | None = None,
    now: datetime | None = None,
) -> str:
    """Render content as a stored day-file line (without the newline).

    A day-file holds one memo per line, so line breaks inside the content
    are folded into single spaces.
    """
    timestamp = get_timestamp(now)
    content = " ".join(content.splitlines())
    if memo_type is not None:
        return f"[{timestamp}] {memo_type.key}({memo_type.label}): {content}"
    return f"[{timestamp}] {content}"


def parse_memo_line(line: str, memo_types: Iterable[MemoType] | None = None) -> ParsedLine:
    """Parse a stored line back into its fields.

    Lines without a bracketed prefix are not rejected: they come back with an
    empty timestamp and the whole trimmed line as content.
    """
    known = {t.key: t for t in (memo_types if memo_types is not None else DEFAULT_MEMO_TYPES)}

    match = _SEMANTIC_LINE_RE.match(line)
    if match and match.group(2) in known:
        timestamp, key, label, rest = match.groups()
        return ParsedLine(
            timestamp=timestamp,
            content=rest.strip(),
            type=key,
            label=label,
            emoji=known[key].emoji or None,
        )

    match = _PLAIN_LINE_RE.match(line)
    if match:
        timestamp, rest = match.groups()
        return ParsedLine(timestamp=timestamp, content=rest.strip())

    return ParsedLine(timestamp="", content=line.strip())
