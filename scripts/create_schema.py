#!/usr/bin/env python3
"""Create the Postgres tables used by the leaderboard and echo the DDL."""

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tourney.db import SCHEMA_STATEMENTS, ensure_schema
from tourney.settings import load_settings


def main() -> None:
    settings = load_settings()
    if settings.uses_memory_store:
        raise SystemExit("DATABASE_URL is not set; nothing to create.")
    ensure_schema(settings.database_url)
    print("Schema ensured.")

    print("\nSchema DDL dump:")
    for statement in SCHEMA_STATEMENTS:
        print(statement.strip())


if __name__ == "__main__":
    main()
