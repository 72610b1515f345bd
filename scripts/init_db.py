"""Create the attendance database (if missing) and apply database/schema.sql.

Usage: python scripts/init_db.py [--check]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.strata_checkin.strata_checkin.database.bootstrap import apply_schema, list_tables

EXPECTED_TABLES = {"attendance", "owners", "strata_plans"}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--check", action="store_true", help="only report which tables exist")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    db_config = dict(importlib.import_module(get_settings_module()).DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    if not args.check:
        count = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        print(f"Applied {count} statements to {target}")

    tables = set(list_tables(db_config))
    missing = EXPECTED_TABLES - tables
    if missing:
        print(f"Missing tables in {target}: {', '.join(sorted(missing))}")
        return 1
    print(f"OK: {target} has {', '.join(sorted(EXPECTED_TABLES))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
