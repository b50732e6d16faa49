"""Memo storage and retrieval.

Two independent stores share the formatter and search helpers:

    <project>/                       # DailyMemoStore (CLI)
    ├── 2026-02-17.md                # [YYYY-MM-DD HH:MM:SS] content #tag
    └── 2026-02-18.md                # append-only, one memo per line

    ~/.jinfo/memos.json              # MemoService over a KeyValueStorage
                                     # (CLI: jinfo export / jinfo import)
    {"memos": [{"id": ..., "content": ..., "tags": [...], ...}]}

Day-file tags are re-derived from each line and keep duplicates; collection
tags are stored with the memo and de-duplicated when extracted.
"""
