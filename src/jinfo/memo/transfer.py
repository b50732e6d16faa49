"""JSON export and import of the key-value memo collection."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from jinfo.errors import ValidationError
from jinfo.memo.models import Memo
from jinfo.memo.service import MemoService, generate_id, now_iso

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"


def export_memos(service: MemoService) -> dict[str, Any]:
    return {
        "version": EXPORT_VERSION,
        "exportDate": now_iso(),
        "memos": [m.to_dict() for m in service.get_all_memos()],
    }


def write_export(service: MemoService, directory: Path) -> Path:
    """Write ``jinfo-export-YYYY-MM-DD.json`` into ``directory``."""
    path = directory / f"jinfo-export-{date.today().isoformat()}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(export_memos(service), ensure_ascii=False, indent=2), encoding="utf-8"
    )
    logger.info("Exported memos to %s", path)
    return path


def import_memos(service: MemoService, data: dict[str, Any]) -> int:
    """Add memos whose id is not already in the collection.

    Records keep their exported id, so importing the same file twice is a
    no-op. Returns the number of memos added.
    """
    records = data.get("memos") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise ValidationError("Invalid import file: 'memos' must be a list")

    memos = service.get_all_memos()
    seen = {m.id for m in memos}
    added = 0
    for record in records:
        if not isinstance(record, dict) or not str(record.get("content") or "").strip():
            logger.warning("Skipping memo without content: %r", record)
            continue
        record = {**record, "id": record.get("id") or generate_id()}
        memo = Memo.from_dict(record)
        if memo.id in seen:
            continue
        memo.content = memo.content.strip()
        memo.timestamp = memo.timestamp or now_iso()
        memo.created_at = memo.created_at or memo.timestamp
        memo.updated_at = memo.updated_at or memo.timestamp
        memos.append(memo)
        seen.add(memo.id)
        added += 1

    if added:
        service.save_memos(memos)
    logger.info("Imported %d of %d memos", added, len(records))
    return added


def read_import(service: MemoService, path: Path) -> int:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid import file {path}: {e}") from e
    return import_memos(service, data)
