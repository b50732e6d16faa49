"""Entry point: jinfo [COMMAND] ...

- Bare text / no args: add a memo (prompted for when omitted)
- list, search, project, interactive, types: see ``jinfo --help``
"""

from __future__ import annotations

import logging
import os
import sys

from jinfo.cli import app, normalize_args


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> None:
    _setup_logging(os.getenv("JINFO_LOG_LEVEL", "WARNING"))
    app(args=normalize_args(sys.argv[1:]), prog_name="jinfo")


if __name__ == "__main__":
    main()
