"""Record types for both memo stores."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class MemoEntry:
    """One line of a day-file, parsed.

    Identity is positional: entries have no id, only their order in the file.
    """

    timestamp: str
    content: str
    tags: list[str]
    date: str
    type: str | None = None
    label: str | None = None
    emoji: str | None = None

    def render(self) -> str:
        if self.type:
            prefix = f"{self.emoji} " if self.emoji else ""
            return f"[{self.timestamp}] {prefix}{self.type}({self.label}): {self.content}"
        return f"[{self.timestamp}] {self.content}"


@dataclass
class Memo:
    """A memo in the key-value collection."""

    id: str
    content: str
    tags: list[str] = field(default_factory=list)
    timestamp: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "tags": list(self.tags),
            "timestamp": self.timestamp,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Memo:
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            tags=list(data.get("tags") or []),
            timestamp=data.get("timestamp", ""),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class FileSearchOptions:
    """Filters for searching day-files.

    tag: bare tag name, matched as ``"#" + tag``.
    from_date / to_date: inclusive ``YYYY-MM-DD`` bounds on the file name.
    """

    tag: str | None = None
    from_date: str | None = None
    to_date: str | None = None


@dataclass
class MemoSearchOptions:
    """Filters for the key-value store. Every set field must match."""

    keyword: str | None = None
    tag: str | None = None
    tags: list[str] = field(default_factory=list)
    from_date: str | None = None
    to_date: str | None = None


@dataclass
class TagCount:
    tag: str
    count: int


@dataclass
class MemoStats:
    total_memos: int
    total_tags: int
    most_used_tags: list[TagCount] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMemos": self.total_memos,
            "totalTags": self.total_tags,
            "mostUsedTags": [asdict(t) for t in self.most_used_tags],
        }
