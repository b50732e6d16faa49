"""Key-value storage backends for the memo collection.

Every write replaces the whole value stored under a key; there is no locking,
so concurrent writers race and the last one wins.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_DEFAULT_KV_PATH = Path.home() / ".jinfo" / "memos.json"


class KeyValueStorage(Protocol):
    """Minimal get/set interface a memo collection is persisted through."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryStorage:
    """Process-local storage. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JSONFileStorage:
    """All keys kept in a single JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or Path(os.getenv("JINFO_KV_PATH", str(_DEFAULT_KV_PATH)))

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def get(self, key: str) -> Any | None:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.debug("Wrote key %s to %s", key, self.path)
