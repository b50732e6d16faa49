"""Key-value-backed memo collection with CRUD, search and stats.

The whole collection lives under one key and every mutation is a full
read-modify-write of it.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from datetime import datetime, timezone

from jinfo.errors import NotFoundError, ValidationError
from jinfo.memo.formatter import extract_unique_tags
from jinfo.memo.kv import KeyValueStorage
from jinfo.memo.models import Memo, MemoSearchOptions, MemoStats
from jinfo.memo.search import (
    count_tags,
    filter_memos,
    has_all_tags,
    has_tag,
    matches_keyword,
    top_tags,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "memos"

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Millisecond clock in base 36 followed by a random base-36 suffix."""
    millis = _to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(10))
    return millis + suffix


def now_iso() -> str:
    """Current UTC time as ``2024-01-15T14:30:45.123Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _require_content(content: str) -> str:
    if not content or not content.strip():
        raise ValidationError("Memo content is required")
    return content.strip()


class MemoService:
    """CRUD and search over the memo collection in a key-value store."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def save_memos(self, memos: list[Memo]) -> None:
        """Replace the stored collection."""
        self.storage.set(STORAGE_KEY, [m.to_dict() for m in memos])

    def _index_of(self, memos: list[Memo], memo_id: str) -> int:
        for i, memo in enumerate(memos):
            if memo.id == memo_id:
                return i
        raise NotFoundError(f"Memo {memo_id} not found")

    def get_all_memos(self) -> list[Memo]:
        raw = self.storage.get(STORAGE_KEY) or []
        return [Memo.from_dict(item) for item in raw]

    def add_memo(self, content: str, tags: list[str] | None = None) -> Memo:
        text = _require_content(content)
        ts = now_iso()
        memo = Memo(
            id=generate_id(),
            content=text,
            tags=list(tags) if tags is not None else extract_unique_tags(content),
            timestamp=ts,
            created_at=ts,
            updated_at=ts,
        )
        memos = self.get_all_memos()
        memos.append(memo)
        self.save_memos(memos)
        logger.info("Added memo %s", memo.id)
        return memo

    def update_memo(self, memo_id: str, content: str, tags: list[str] | None = None) -> Memo:
        memos = self.get_all_memos()
        index = self._index_of(memos, memo_id)
        text = _require_content(content)

        memo = memos[index]
        memo.content = text
        memo.tags = list(tags) if tags is not None else extract_unique_tags(content)
        memo.updated_at = now_iso()
        self.save_memos(memos)
        logger.info("Updated memo %s", memo_id)
        return memo

    def delete_memo(self, memo_id: str) -> None:
        memos = self.get_all_memos()
        index = self._index_of(memos, memo_id)
        del memos[index]
        self.save_memos(memos)
        logger.info("Deleted memo %s", memo_id)

    def clear_all(self) -> None:
        """Drop every memo in the collection."""
        self.save_memos([])
        logger.info("Cleared all memos")

    # ── Search ────────────────────────────────────────────────

    def search_memos(self, keyword: str) -> list[Memo]:
        return [m for m in self.get_all_memos() if matches_keyword(m, keyword)]

    def search_memos_by_tag(self, tag: str) -> list[Memo]:
        return [m for m in self.get_all_memos() if has_tag(m, tag)]

    def search_memos_by_tags(self, tags: list[str]) -> list[Memo]:
        """Memos carrying every one of ``tags``."""
        return [m for m in self.get_all_memos() if has_all_tags(m, tags)]

    def search_memos_advanced(self, options: MemoSearchOptions) -> list[Memo]:
        return filter_memos(self.get_all_memos(), options)

    def get_stats(self) -> MemoStats:
        memos = self.get_all_memos()
        counts = count_tags(memos)
        return MemoStats(
            total_memos=len(memos),
            total_tags=len(counts),
            most_used_tags=top_tags(counts),
        )
